"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from photocache.core.formatting import status_to_color


if TYPE_CHECKING:
    from photocache.core.models import Photo
    from photocache.core.ports import ImageCachePort


def _format_status_with_color(status: str) -> Text:
    """Format cache state with color coding.

    Args:
        status: Cache state ("cached", "missing", or "no url")

    Returns:
        Rich Text object colored by status_to_color().
    """
    color = status_to_color(status)
    return Text(status, style=color) if color else Text(status)


def _get_cache_state(images: ImageCachePort, photo: Photo) -> str:
    """Get cache state for a photo (cached/missing/no url)."""
    if images.contains(photo.photo_id):
        return "cached"
    if not photo.has_remote_url:
        return "no url"
    return "missing"
