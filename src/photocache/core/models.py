"""Core domain models for photocache.

These models are pure Python dataclasses with no I/O dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Photo:
    """One photo from the catalog listing.

    Equality and hashing cover every field, so a Photo can be used as a
    dict key or for diffing two listings.

    Attributes:
        title: Human-readable title, possibly empty.
        photo_id: Identifier from the service, used as the image cache key.
        remote_url: URL of the image, or None when the listing omitted it.
        date_taken: When the photo was taken (timezone-aware, UTC).

    Example:
        >>> from datetime import UTC, datetime
        >>> photo = Photo(
        ...     title="Sunset",
        ...     photo_id="52793",
        ...     remote_url="https://live.staticflickr.com/1/52793_z.jpg",
        ...     date_taken=datetime(2023, 1, 1, tzinfo=UTC),
        ... )
        >>> photo.has_remote_url
        True
    """

    title: str
    photo_id: str
    remote_url: str | None
    date_taken: datetime

    def __post_init__(self) -> None:
        """Validate photo fields after initialization."""
        if not self.photo_id:
            raise ValueError("Photo ID cannot be empty")

    @property
    def has_remote_url(self) -> bool:
        """Whether the image can be downloaded at all."""
        return self.remote_url is not None


@dataclass(frozen=True, slots=True)
class CacheStatistics:
    """Snapshot of an image cache.

    Attributes:
        file_count: Number of images on disk.
        total_size: Bytes used by those images.
        memory_count: Number of images held in memory.
    """

    file_count: int = 0
    total_size: int = 0
    memory_count: int = 0
