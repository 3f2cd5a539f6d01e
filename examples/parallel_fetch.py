"""Concurrent image fetch with progress display.

fetch_images() fetches every photo concurrently. A failing photo is
reported in the result instead of aborting the batch.
"""

import asyncio

from photocache import FetchError, PhotoStore, RichProgressReporter, load_settings


async def main() -> None:
    async with PhotoStore.from_settings(load_settings(), coalesce=True) as store:
        photos = await store.fetch_interesting_photos()

        with RichProgressReporter() as reporter:
            results = await store.fetch_images(photos, progress=reporter)

    for photo_id, result in results.items():
        if isinstance(result, FetchError):
            print(f"{photo_id}: {result} ({result.recovery_hint})")
        else:
            print(f"{photo_id}: {result.size}")


if __name__ == "__main__":
    asyncio.run(main())
