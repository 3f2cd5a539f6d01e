"""Basic listing and image fetch example.

This example shows the simplest usage pattern: resolve settings, fetch
the interesting-photos listing, and fetch one image. The library keeps
the image in memory and on disk, so running the script again makes no
image request.
"""

import asyncio

from photocache import PhotoStore, load_settings


async def main() -> None:
    # API key from $PHOTOCACHE_API_KEY, cache under .photocache/images
    settings = load_settings()

    async with PhotoStore.from_settings(settings) as store:
        photos = await store.fetch_interesting_photos()
        print(f"Listing has {len(photos)} photos")

        first = next(photo for photo in photos if photo.has_remote_url)
        image = await store.fetch_image(first)
        print(f"{first.title!r} is {image.width}x{image.height}")

        # Served from memory, no request
        await store.fetch_image(first)


if __name__ == "__main__":
    asyncio.run(main())
