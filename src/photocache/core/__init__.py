"""Core domain module for photocache.

This module contains the domain models, the Flickr codec, port definitions
and the PhotoStore service. Apart from httpx URL and client types it has no
I/O dependencies of its own.
"""

from photocache.core.flickr import FlickrAPI
from photocache.core.models import CacheStatistics, Photo
from photocache.core.ports import (
    EvictionPolicy,
    ExecutorPort,
    ImageCachePort,
    ImageCodec,
    ProgressCallback,
)


__all__ = [
    "CacheStatistics",
    "EvictionPolicy",
    "ExecutorPort",
    "FlickrAPI",
    "ImageCachePort",
    "ImageCodec",
    "Photo",
    "ProgressCallback",
]
