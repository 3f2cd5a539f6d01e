"""Formatting utilities for domain logic."""


def status_to_color(status: str) -> str:
    """Map a cache state to a color name.

    Args:
        status: Cache state ("cached", "missing", or "no url")

    Returns:
        Color name string:
        - "cached" -> "green"
        - "missing" -> "yellow"
        - "no url" -> "red"
        - invalid -> empty string
    """
    color_map = {
        "cached": "green",
        "missing": "yellow",
        "no url": "red",
    }
    return color_map.get(status, "")


def format_size(size_bytes: int) -> str:
    """Format size in bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"
