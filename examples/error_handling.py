"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from typing import Any

from photocache import (
    MissingResourceURLError,
    Photo,
    PhotocacheError,
    PhotoStore,
    ResourceDecodeError,
    TransportError,
)


# Pattern 1: Photos without an image URL
async def fetch_or_skip(store: PhotoStore, photo: Photo) -> Any | None:
    """Fetch an image, returning None if the listing gave no URL."""
    try:
        return await store.fetch_image(photo)
    except MissingResourceURLError as e:
        print(f"No image URL for {e.photo_id}")
        return None


# Pattern 2: Network failures and bad status codes
async def fetch_with_hint(store: PhotoStore, photo: Photo) -> Any | None:
    """Fetch an image, explaining transport failures."""
    try:
        return await store.fetch_image(photo)
    except TransportError as e:
        if e.status_code is None:
            print(f"No response from {e.source}")
        else:
            print(f"{e.source} answered HTTP {e.status_code}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 3: Catch-all for any library error
async def fetch_safe(store: PhotoStore, photo: Photo) -> Any | None:
    """Fetch an image with comprehensive error handling."""
    try:
        return await store.fetch_image(photo)
    except ResourceDecodeError as e:
        print(f"Not an image: {e.source}")
        return None
    except PhotocacheError as e:
        print(f"Unexpected error: {e}")
        print(f"Hint: {e.recovery_hint}")
        return None
