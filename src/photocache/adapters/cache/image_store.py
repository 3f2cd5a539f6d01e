"""Two-tier image cache adapter implementing ImageCachePort."""

from __future__ import annotations

import concurrent.futures
import contextlib
import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Generic, TypeVar

from photocache.core.exceptions import ResourceDecodeError, StorageWriteError
from photocache.core.models import CacheStatistics


if TYPE_CHECKING:
    from concurrent.futures import Future
    from types import TracebackType

    from photocache.core.ports import EvictionPolicy, ExecutorPort, ImageCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def filename_for_key(key: str) -> str:
    """Map a cache key onto a file name.

    Characters outside [A-Za-z0-9._-] become "_"; nothing is hashed.

    Raises:
        ValueError: If the key maps to "", "." or "..".
    """
    name = _UNSAFE_CHARS.sub("_", key)
    if name in ("", ".", ".."):
        raise ValueError(f"Cache key {key!r} does not map to a usable file name")
    return name


class ImageStore(Generic[T]):
    """Image cache with an in-memory map in front of one file per key.

    put() updates memory synchronously and hands the disk write to an
    executor. get() checks memory first and promotes disk hits into memory.
    A failed disk write is logged; the memory copy stays authoritative for
    the rest of the process lifetime.

    An image evicted from memory before its file exists is held aside
    until its write lands, so eviction never turns a stored image into a
    miss. Each put() carries a version: a write overtaken by a newer put()
    of the same key is discarded instead of replacing the newer file.

    Attributes:
        cache_dir: Directory holding one file per cached image.
        codec: Converts between images and stored bytes.

    Example:
        >>> store = ImageStore(Path("./images"))
        >>> store.get("52793") is None
        True
    """

    def __init__(
        self,
        cache_dir: Path,
        codec: ImageCodec[T] | None = None,
        executor: ExecutorPort | None = None,
        policy: EvictionPolicy | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            cache_dir: Directory for the disk tier; created on first write.
            codec: Image codec. Defaults to JpegCodec (Pillow, quality 50).
            executor: Runs disk writes. Defaults to a private thread pool,
                shut down by close().
            policy: Memory eviction policy. Defaults to UnboundedPolicy.
        """
        from photocache.adapters.cache.eviction import UnboundedPolicy

        self.cache_dir = cache_dir
        if codec is None:
            from photocache.adapters.codec import JpegCodec

            codec = JpegCodec()  # type: ignore[assignment]
        self.codec: ImageCodec[T] = codec  # type: ignore[assignment]

        self._owns_executor = executor is None
        if executor is None:
            from photocache.adapters.executor import ThreadPoolExecutorAdapter

            executor = ThreadPoolExecutorAdapter()
        self._executor = executor

        self._policy = policy if policy is not None else UnboundedPolicy()
        self._memory: dict[str, T] = {}
        # Evicted from memory while their file is not written yet: key -> (version, image)
        self._unwritten: dict[str, tuple[int, T]] = {}
        self._versions: dict[str, int] = {}
        self._durable: dict[str, int] = {}
        self._pending: dict[str, list[Future[object]]] = {}
        # Reentrant: SynchronousExecutor runs _write inside put()'s critical section
        self._lock = threading.RLock()

    def __enter__(self) -> ImageStore[T]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self, wait: bool = True) -> None:
        """Shut down the private writer pool, if this store created one."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _file_path(self, key: str) -> Path:
        """Get the path for a cached image."""
        return self.cache_dir / filename_for_key(key)

    def get(self, key: str) -> T | None:
        """Get a cached image, or None if it is in neither tier.

        Args:
            key: Cache key (the photo ID).

        Returns:
            The image from memory, or decoded from disk and promoted into
            memory. None signals that the key was never stored.
        """
        path = self._file_path(key)

        with self._lock:
            cached = self._lookup(key)
            if cached is not None:
                return cached

        try:
            data = path.read_bytes()
        except FileNotFoundError:
            logger.debug("Cache miss for %s", key)
            return None
        except OSError:
            logger.warning("Cannot read cached image %s", path, exc_info=True)
            return None

        try:
            image = self.codec.decode(data)
        except ResourceDecodeError:
            logger.warning("Cached image %s is unreadable; treating as miss", path)
            return None

        with self._lock:
            # A put() that landed while we were reading wins over the disk copy
            cached = self._lookup(key)
            if cached is not None:
                return cached
            self._memory[key] = image
            self._evict(self._policy.admit(key))

        logger.debug("Disk hit for %s, promoted to memory", key)
        return image

    def _lookup(self, key: str) -> T | None:
        """Find an image in memory or held aside for its write. Caller holds the lock."""
        image = self._memory.get(key)
        if image is not None:
            self._policy.touch(key)
            logger.debug("Memory hit for %s", key)
            return image

        entry = self._unwritten.pop(key, None)
        if entry is None:
            return None
        logger.debug("Hit for %s while its disk write is pending", key)
        image = entry[1]
        self._memory[key] = image
        self._evict(self._policy.admit(key))
        return image

    def put(self, key: str, image: T) -> Future[object]:
        """Store an image in memory and schedule its disk write.

        Args:
            key: Cache key (the photo ID).
            image: Decoded image to store.

        Returns:
            Future of the disk write. It resolves to the file path, or holds
            a StorageWriteError; it is safe to ignore.
        """
        self._file_path(key)  # Reject unusable keys before touching memory

        with self._lock:
            version = self._versions.get(key, 0) + 1
            self._versions[key] = version
            self._memory[key] = image
            self._unwritten.pop(key, None)
            self._evict(self._policy.admit(key))
            # Submitted under the lock so eviction always sees the write as pending
            future = self._executor.submit(self._write, key, image, version)
            self._pending.setdefault(key, []).append(future)

        future.add_done_callback(lambda done: self._discard_pending(key, done))
        return future

    def _discard_pending(self, key: str, future: Future[object]) -> None:
        with self._lock:
            futures = self._pending.get(key)
            if futures is None or future not in futures:
                return
            futures.remove(future)
            if not futures:
                del self._pending[key]

    def _write(self, key: str, image: T, version: int) -> Path:
        """Encode and atomically write one image to disk."""
        path = self._file_path(key)
        tmp_path: Path | None = None
        try:
            data = self.codec.encode(image)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=self.cache_dir, prefix=f".{path.name}.", suffix=".tmp", delete=False
            ) as tmp_file:
                tmp_path = Path(tmp_file.name)
                tmp_file.write(data)

            with self._lock:
                superseded = self._versions.get(key) != version
                if not superseded:
                    os.replace(tmp_path, path)
                    tmp_path = None
                    self._durable[key] = version
                    entry = self._unwritten.get(key)
                    if entry is not None and entry[0] == version:
                        del self._unwritten[key]
        except (OSError, ValueError) as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            logger.warning("Failed to write cached image for %s to %s: %s", key, path, e)
            raise StorageWriteError(
                f"Failed to write cached image for '{key}'",
                key=key,
                path=path,
                cause=e,
            ) from e

        if tmp_path is not None:
            logger.debug("Discarding superseded write for %s", key)
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
        return path

    def _evict(self, keys: list[str]) -> None:
        """Drop keys from memory only. Caller holds the lock."""
        for evicted in keys:
            image = self._memory.pop(evicted, None)
            version = self._versions.get(evicted)
            if image is not None and version is not None and self._durable.get(evicted) != version:
                self._unwritten[evicted] = (version, image)
                logger.debug("Evicted %s from memory; holding it until written", evicted)
            else:
                logger.debug("Evicted %s from memory", evicted)

    def _wait_pending(self, keys: list[str] | None = None) -> None:
        """Block until outstanding disk writes (for keys, or all) have landed."""
        with self._lock:
            if keys is None:
                futures = [f for pending in self._pending.values() for f in pending]
            else:
                futures = [f for k in keys for f in self._pending.get(k, [])]
        if futures:
            concurrent.futures.wait(futures)

    def delete(self, key: str) -> None:
        """Remove an image from memory and disk.

        A disk failure is logged and not raised; the entry is gone from the
        caller's point of view once memory no longer holds it.

        Args:
            key: Cache key to delete.
        """
        path = self._file_path(key)

        with self._lock:
            self._memory.pop(key, None)
            self._unwritten.pop(key, None)
            self._policy.forget(key)

        # Every write still in flight would resurrect the file after the unlink
        self._wait_pending([key])

        with self._lock:
            self._durable.pop(key, None)

        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            error = StorageWriteError(
                f"Failed to remove cached image for '{key}'", key=key, path=path, cause=e
            )
            logger.warning("%s: %s", error, e)

    def contains(self, key: str) -> bool:
        """Check whether a key is cached in either tier, without decoding."""
        path = self._file_path(key)
        with self._lock:
            if key in self._memory or key in self._unwritten:
                return True
        return path.is_file()

    def _cached_files(self) -> list[Path]:
        """Files of the disk tier, excluding in-progress temporary files."""
        if not self.cache_dir.is_dir():
            return []
        return sorted(
            p for p in self.cache_dir.iterdir() if p.is_file() and not p.name.startswith(".")
        )

    def list_all_keys(self) -> list[str]:
        """List all keys stored on disk, sorted.

        Keys are reported as their file names, which equals the key for
        keys made only of [A-Za-z0-9._-].
        """
        return [p.name for p in self._cached_files()]

    def statistics(self) -> CacheStatistics:
        """Count and size the cached images.

        Returns:
            CacheStatistics for the disk tier plus the memory entry count.
        """
        total_size = 0
        file_count = 0
        for file_path in self._cached_files():
            with contextlib.suppress(OSError):
                total_size += file_path.stat().st_size
                file_count += 1

        with self._lock:
            memory_count = len(self._memory)

        return CacheStatistics(
            file_count=file_count, total_size=total_size, memory_count=memory_count
        )

    def clear(self) -> int:
        """Remove every image from memory and disk.

        Returns:
            Number of files removed from disk.
        """
        with self._lock:
            for key in self._memory:
                self._policy.forget(key)
            self._memory.clear()
            self._unwritten.clear()

        self._wait_pending()

        with self._lock:
            self._durable.clear()

        count = 0
        for file_path in self._cached_files():
            try:
                file_path.unlink()
            except FileNotFoundError:
                continue
            except OSError:
                logger.warning("Failed to remove cached image %s", file_path, exc_info=True)
                continue
            count += 1
        return count
