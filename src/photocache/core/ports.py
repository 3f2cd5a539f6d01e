"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable


if TYPE_CHECKING:
    import builtins
    from concurrent.futures import Future

    from photocache.core.models import CacheStatistics

ProgressCallback = Callable[[int, int], None]

T = TypeVar("T")


@runtime_checkable
class ImageCodec(Protocol[T]):
    """Turns downloaded bytes into images and images into stored bytes."""

    def decode(self, data: bytes) -> T:
        """Interpret raw bytes as an image.

        Raises:
            ResourceDecodeError: If the bytes are not a supported image.
        """
        ...

    def encode(self, image: T) -> bytes:
        """Serialize an image for the disk tier."""
        ...


@runtime_checkable
class ImageCachePort(Protocol):
    """Two-tier key to image cache."""

    codec: ImageCodec[Any]

    def get(self, key: str) -> Any | None:
        """Return the cached image, or None if it was never stored."""
        ...

    def put(self, key: str, image: Any) -> Future[object]:
        """Store an image in memory now and on disk in the background.

        Returns:
            Future of the durable write. It never needs to be awaited.
        """
        ...

    def delete(self, key: str) -> None:
        """Remove an image from both tiers."""
        ...

    def contains(self, key: str) -> bool:
        """Check either tier without decoding anything."""
        ...

    def list_all_keys(self) -> builtins.list[str]:
        """List the keys stored on disk."""
        ...

    def statistics(self) -> CacheStatistics:
        """Count and size the cached images."""
        ...

    def clear(self) -> int:
        """Remove every cached image.

        Returns:
            Number of files removed from disk.
        """
        ...


@runtime_checkable
class EvictionPolicy(Protocol):
    """Decides which memory entries an image cache drops.

    Only the memory tier is affected. Files on disk stay until deleted.
    """

    def touch(self, key: str) -> None:
        """Record that a key was read."""
        ...

    def admit(self, key: str) -> builtins.list[str]:
        """Record that a key was stored.

        Returns:
            Keys to drop from memory, possibly empty.
        """
        ...

    def forget(self, key: str) -> None:
        """Record that a key was removed."""
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports batch fetch progress to the user.

    The core domain uses this to report progress without depending
    on any specific UI library.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a task.

        Args:
            name: Human-readable name for the task.
            total: Number of units (images) to process.

        Returns:
            A ProgressCallback to call with (completed, total).
        """
        ...

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name passed to start_task().
        """
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output.

    Used as the default when no progress reporting is desired.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:  # noqa: ARG002
        """Return a no-op callback."""
        return lambda _completed, _total: None

    def finish_task(self, name: str) -> None:
        """Do nothing."""
        _ = name  # Unused but required by protocol


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor for background disk writes.

    Abstracts over concurrent.futures executors so the image cache can be
    tested with writes that complete before put() returns.
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Submit a function for execution.

        Returns:
            Future representing the pending result.
        """
        ...

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work, optionally waiting for pending writes."""
        ...
