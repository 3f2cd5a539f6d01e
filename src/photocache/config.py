"""Configuration utilities for photocache.

This module provides settings resolution and project root discovery.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from photocache.core.exceptions import ConfigurationError
from photocache.core.flickr import DEFAULT_ENDPOINT


API_KEY_ENV = "PHOTOCACHE_API_KEY"
CACHE_DIR_ENV = "PHOTOCACHE_CACHE_DIR"

# Cache directory relative to the project root
DEFAULT_CACHE_DIR = Path(".photocache") / "images"


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root directory by walking up from start directory.

    Searches for marker files in the following priority order:
    1. .photocache - Explicit project marker
    2. pyproject.toml - Python project root
    3. .git - Version control root

    Args:
        start: Directory to start searching from. If None, uses current directory.

    Returns:
        Path to project root directory. Returns start directory if no markers found.
    """
    if start is None:
        start = Path.cwd()

    markers = [".photocache", "pyproject.toml", ".git"]
    current = start.resolve()

    for parent in [current, *current.parents]:
        for marker in markers:
            if (parent / marker).exists():
                return parent

    return start.resolve()


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved runtime settings.

    Attributes:
        api_key: Flickr API key.
        cache_dir: Absolute directory of the image cache.
        endpoint: Flickr REST endpoint.
        per_page: Optional listing page size.
        jpeg_quality: Quality of images written to disk.
    """

    api_key: str
    cache_dir: Path
    endpoint: str = DEFAULT_ENDPOINT
    per_page: int | None = None
    jpeg_quality: int = 50


def resolve_cache_dir(
    cache_dir: Path | str | None = None, directory: Path | None = None
) -> Path:
    """Resolve the image cache directory.

    Explicit argument first, then $PHOTOCACHE_CACHE_DIR, then
    .photocache/images under the project root. Relative paths are
    resolved against the project root.
    """
    root = find_project_root(directory)
    if cache_dir is None:
        cache_dir = os.environ.get(CACHE_DIR_ENV) or DEFAULT_CACHE_DIR

    resolved = Path(cache_dir).expanduser()
    if not resolved.is_absolute():
        resolved = root / resolved
    return resolved


def load_settings(
    api_key: str | None = None,
    cache_dir: Path | str | None = None,
    directory: Path | None = None,
    per_page: int | None = None,
) -> Settings:
    """Resolve settings from arguments and the environment.

    Args:
        api_key: API key; falls back to $PHOTOCACHE_API_KEY.
        cache_dir: Cache directory; see resolve_cache_dir().
        directory: Start directory for root discovery (defaults to cwd).
        per_page: Optional listing page size.

    Returns:
        Settings with an absolute cache_dir.

    Raises:
        ConfigurationError: If no API key is available.
    """
    key = api_key or os.environ.get(API_KEY_ENV)
    if not key:
        raise ConfigurationError(f"No API key configured (set {API_KEY_ENV})")

    return Settings(
        api_key=key,
        cache_dir=resolve_cache_dir(cache_dir, directory),
        per_page=per_page,
    )
