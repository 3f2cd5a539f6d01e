"""Core domain services for photocache."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from photocache.core.exceptions import (
    FetchError,
    InvalidPhotoIDError,
    MissingResourceURLError,
    ResourceDecodeError,
    TransportError,
)
from photocache.core.ports import NullProgressReporter


if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from photocache.config import Settings
    from photocache.core.flickr import FlickrAPI
    from photocache.core.models import Photo
    from photocache.core.ports import ImageCachePort, ProgressReporter

logger = logging.getLogger(__name__)


class PhotoStore:
    """Fetches the photo listing and photo images, consulting the image cache.

    This is the only component that talks to the network. An image is
    downloaded at most once per cache key: a cached image is returned
    without any request.
    """

    def __init__(
        self,
        api: FlickrAPI,
        images: ImageCachePort,
        client: httpx.AsyncClient | None = None,
        *,
        coalesce: bool = False,
    ) -> None:
        """Create a store.

        Args:
            api: Listing URL builder and response decoder.
            images: Image cache consulted before every image download.
            client: HTTP client. When omitted the store creates one and
                closes it in aclose().
            coalesce: Share one in-flight download between concurrent
                fetch_image() calls for the same photo.
        """
        self._api = api
        self._images = images
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(follow_redirects=True)
        self._coalesce = coalesce
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._owned_images: Any = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        *,
        coalesce: bool = False,
    ) -> PhotoStore:
        """Create a PhotoStore with a JPEG image cache from settings.

        Args:
            settings: Resolved settings (API key, cache directory, ...).
            client: Optional HTTP client, e.g. one with a mock transport.
            coalesce: See __init__.

        Returns:
            PhotoStore whose image cache is closed by aclose().
        """
        from photocache.adapters.cache import ImageStore
        from photocache.adapters.codec import JpegCodec
        from photocache.core.flickr import FlickrAPI

        api = FlickrAPI(
            api_key=settings.api_key,
            endpoint=settings.endpoint,
            per_page=settings.per_page,
        )
        images = ImageStore(settings.cache_dir, codec=JpegCodec(settings.jpeg_quality))
        store = cls(api, images, client, coalesce=coalesce)
        store._owned_images = images
        return store

    @property
    def images(self) -> ImageCachePort:
        """The image cache this store reads and fills."""
        return self._images

    async def __aenter__(self) -> PhotoStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client and image cache if this store created them."""
        if self._owns_client:
            await self._client.aclose()
        if self._owned_images is not None:
            self._owned_images.close()

    async def _get(self, url: httpx.URL | str) -> httpx.Response:
        """Issue one GET request, mapping every failure onto TransportError."""
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TransportError(
                f"Request to {url} failed with HTTP {status}",
                source=str(url),
                cause=e,
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request to {url} failed: {e}", source=str(url), cause=e
            ) from e
        return response

    async def fetch_interesting_photos(self) -> list[Photo]:
        """Fetch and decode the current listing.

        Returns:
            Photos in listing order.

        Raises:
            TransportError: If the request fails or the status is not 2xx.
            DecodeError: If the response is not a valid listing envelope.
        """
        url = self._api.build_listing_url()
        response = await self._get(url)
        photos = self._api.decode_listing(response.content)
        logger.info("Fetched %d photos from listing", len(photos))
        return photos

    async def fetch_image(self, photo: Photo) -> Any:
        """Return the image of a photo, downloading it only on a cache miss.

        Args:
            photo: Photo whose image to return.

        Returns:
            The decoded image (a PIL image with the default codec).

        Raises:
            InvalidPhotoIDError: If the photo ID has no usable cache file name.
            MissingResourceURLError: If the photo is not cached and has no URL.
            TransportError: If the download fails. The cache is not touched.
            ResourceDecodeError: If the downloaded bytes are not an image.
                The cache is not touched.
        """
        if not self._coalesce:
            return await self._fetch_image(photo)

        key = photo.photo_id
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_image(photo))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget_in_flight(key, done))
        else:
            logger.debug("Joining in-flight fetch for %s", key)
        return await asyncio.shield(task)

    def _forget_in_flight(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Callers may all have been cancelled; the outcome is still consumed here
        if not task.cancelled():
            task.exception()

    async def _fetch_image(self, photo: Photo) -> Any:
        key = photo.photo_id

        try:
            cached = await asyncio.to_thread(self._images.get, key)
        except ValueError as e:
            raise InvalidPhotoIDError(key, cause=e) from e
        if cached is not None:
            return cached

        if photo.remote_url is None:
            raise MissingResourceURLError(key)

        logger.debug("Downloading %s from %s", key, photo.remote_url)
        response = await self._get(photo.remote_url)

        try:
            image = await asyncio.to_thread(self._images.codec.decode, response.content)
        except ResourceDecodeError as e:
            raise ResourceDecodeError(
                f"Image of photo '{key}' could not be decoded",
                source=photo.remote_url,
                cause=e.cause,
            ) from e

        # The disk write finishes in the background; its failure is only logged
        self._images.put(key, image)
        return image

    async def fetch_images(
        self,
        photos: Sequence[Photo],
        progress: ProgressReporter | None = None,
    ) -> dict[str, Any]:
        """Fetch the images of many photos concurrently.

        One failing photo does not affect the others.

        Args:
            photos: Photos to fetch.
            progress: Optional progress reporter, advanced once per photo.

        Returns:
            Dict mapping photo ID to its image, or to the FetchError raised
            for it.
        """
        if progress is None:
            progress = NullProgressReporter()

        total = len(photos)
        completed = 0
        callback = progress.start_task("images", total)

        async def fetch_one(photo: Photo) -> tuple[str, Any]:
            nonlocal completed
            try:
                result: Any = await self.fetch_image(photo)
            except FetchError as e:
                logger.info("Could not fetch image of %s: %s", photo.photo_id, e)
                result = e
            completed += 1
            callback(completed, total)
            return photo.photo_id, result

        try:
            pairs = await asyncio.gather(*(fetch_one(photo) for photo in photos))
        finally:
            progress.finish_task("images")

        return dict(pairs)

    def delete_image(self, photo_id: str) -> None:
        """Remove a photo's image from the cache, forcing a download next time."""
        self._images.delete(photo_id)
