"""photocache - Fetch a Flickr photo listing and cache the photo images.

This library fetches the interesting-photos listing and downloads each
photo's image at most once: images live in memory and on disk, and a
cached image is returned without any network request.

Example:
    >>> import asyncio
    >>> from photocache import PhotoStore, load_settings
    >>> async def first_image():
    ...     async with PhotoStore.from_settings(load_settings()) as store:
    ...         photos = await store.fetch_interesting_photos()
    ...         return await store.fetch_image(photos[0])
    >>> image = asyncio.run(first_image())  # Downloads only on a cache miss
"""

from photocache.adapters.cache import ImageStore, LRUPolicy, UnboundedPolicy
from photocache.adapters.codec import JpegCodec, RawBytesCodec
from photocache.adapters.executor import SynchronousExecutor, ThreadPoolExecutorAdapter
from photocache.config import Settings, find_project_root, load_settings
from photocache.core.exceptions import (
    CacheError,
    ConfigurationError,
    DecodeError,
    FetchError,
    InvalidPhotoIDError,
    MissingResourceURLError,
    PhotocacheError,
    ResourceDecodeError,
    StorageWriteError,
    TransportError,
)
from photocache.core.flickr import FlickrAPI
from photocache.core.models import CacheStatistics, Photo
from photocache.core.ports import (
    EvictionPolicy,
    ImageCachePort,
    ImageCodec,
    NullProgressReporter,
    ProgressCallback,
    ProgressReporter,
)
from photocache.core.services import PhotoStore
from photocache.progress import RichProgressReporter


__version__ = "0.1.0"

__all__ = [
    "CacheError",
    "CacheStatistics",
    "ConfigurationError",
    "DecodeError",
    "EvictionPolicy",
    "FetchError",
    "FlickrAPI",
    "ImageCachePort",
    "ImageCodec",
    "ImageStore",
    "InvalidPhotoIDError",
    "JpegCodec",
    "LRUPolicy",
    "MissingResourceURLError",
    "NullProgressReporter",
    "Photo",
    "PhotoStore",
    "PhotocacheError",
    "ProgressCallback",
    "ProgressReporter",
    "RawBytesCodec",
    "ResourceDecodeError",
    "RichProgressReporter",
    "Settings",
    "StorageWriteError",
    "SynchronousExecutor",
    "ThreadPoolExecutorAdapter",
    "TransportError",
    "UnboundedPolicy",
    "__version__",
    "find_project_root",
    "load_settings",
]
