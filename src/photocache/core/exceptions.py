"""Domain exceptions for photocache.

All library errors inherit from PhotocacheError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


class PhotocacheError(Exception):
    """Base class for all photocache exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class FetchError(PhotocacheError):
    """Base class for failures of a catalog or image fetch.

    Attributes:
        source: The URL (or photo ID) the fetch was about.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
    ) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)


class TransportError(FetchError):
    """Raised when the network request fails or returns a non-success status.

    Attributes:
        status_code: HTTP status of the response, None if no response arrived.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, source=source, cause=cause)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking connectivity or the API key."""
        if self.status_code in (401, 403):
            return "Check that the API key is valid"
        if self.status_code is not None:
            return f"The service answered HTTP {self.status_code}; try again later"
        return "Check network connectivity and that the service is reachable"


class DecodeError(FetchError):
    """Raised when the listing response does not have the expected envelope."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the request parameters."""
        return "Verify the endpoint and that format=json with nojsoncallback=1 is sent"


class MissingResourceURLError(FetchError):
    """Raised when a photo has no image URL to fetch from.

    Attributes:
        photo_id: The photo that has no remote URL.
    """

    def __init__(self, photo_id: str) -> None:
        self.photo_id = photo_id
        super().__init__(f"Photo '{photo_id}' has no image URL", source=photo_id)

    @property
    def recovery_hint(self) -> str:
        """Explain where the URL comes from."""
        return "The listing omitted the url_z size for this photo; request it in extras"


class InvalidPhotoIDError(FetchError):
    """Raised when a photo ID cannot serve as a cache key.

    IDs such as "." or ".." have no usable file name on disk.

    Attributes:
        photo_id: The rejected photo ID.
    """

    def __init__(self, photo_id: str, cause: Exception | None = None) -> None:
        self.photo_id = photo_id
        super().__init__(
            f"Photo ID '{photo_id}' cannot be used as a cache key", source=photo_id, cause=cause
        )

    @property
    def recovery_hint(self) -> str:
        """Explain which IDs are usable."""
        return "Photo IDs need at least one character other than '.'"


class ResourceDecodeError(FetchError):
    """Raised when downloaded bytes are not a readable image."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking what the URL serves."""
        return f"Check that {self.source} serves an image"


class CacheError(PhotocacheError):
    """Base class for cache-related errors."""

    pass


class StorageWriteError(CacheError):
    """Raised when writing or deleting a cached image on disk fails.

    This error is logged by the cache and never reaches fetch callers.

    Attributes:
        key: The cache key of the entry.
        path: The file that could not be written or removed.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        key: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.key = key
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the cache directory."""
        return f"Check free space and permissions of {self.path.parent}"


class ConfigurationError(PhotocacheError):
    """Raised for configuration problems (missing required settings)."""

    @property
    def recovery_hint(self) -> str:
        """Point at the environment variables."""
        return "Pass --api-key or set PHOTOCACHE_API_KEY"
