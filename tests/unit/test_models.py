"""Unit tests for core domain models.

These tests verify the behavior of Photo and CacheStatistics.
They are pure unit tests with no I/O dependencies.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from photocache.core.models import CacheStatistics, Photo


TAKEN = datetime(2023, 1, 1, 12, 30, tzinfo=UTC)


class TestPhoto:
    """Tests for the Photo model."""

    @pytest.mark.core
    def test_photo_creation(self) -> None:
        """Photo keeps every field as given."""
        photo = Photo(title="Sunset", photo_id="42", remote_url="http://x/42.jpg", date_taken=TAKEN)

        assert photo.title == "Sunset"
        assert photo.photo_id == "42"
        assert photo.remote_url == "http://x/42.jpg"
        assert photo.date_taken == TAKEN

    @pytest.mark.core
    def test_photo_without_url(self) -> None:
        """An absent remote URL is a valid state."""
        photo = Photo(title="", photo_id="42", remote_url=None, date_taken=TAKEN)

        assert photo.remote_url is None
        assert photo.has_remote_url is False

    @pytest.mark.core
    def test_photo_immutable(self) -> None:
        """Photo is immutable (frozen dataclass)."""
        photo = Photo(title="A", photo_id="1", remote_url=None, date_taken=TAKEN)

        with pytest.raises(AttributeError):
            photo.photo_id = "2"  # type: ignore[misc]

    @pytest.mark.core
    def test_photo_empty_id_raises(self) -> None:
        """Photo raises ValueError for an empty ID."""
        with pytest.raises(ValueError, match="ID cannot be empty"):
            Photo(title="A", photo_id="", remote_url=None, date_taken=TAKEN)

    @pytest.mark.core
    def test_equal_photos_hash_equal(self) -> None:
        """Photos with the same fields are equal and usable as one dict key."""
        first = Photo(title="A", photo_id="1", remote_url="http://x/1.jpg", date_taken=TAKEN)
        second = Photo(title="A", photo_id="1", remote_url="http://x/1.jpg", date_taken=TAKEN)

        assert first == second
        assert len({first: 1, second: 2}) == 1

    @pytest.mark.core
    def test_equality_covers_all_fields(self) -> None:
        """A different title makes a different photo, even with the same ID."""
        photo = Photo(title="A", photo_id="1", remote_url=None, date_taken=TAKEN)

        assert photo != replace(photo, title="B")


class TestCacheStatistics:
    """Tests for the CacheStatistics model."""

    @pytest.mark.core
    def test_defaults_to_empty(self) -> None:
        stats = CacheStatistics()

        assert stats.file_count == 0
        assert stats.total_size == 0
        assert stats.memory_count == 0
