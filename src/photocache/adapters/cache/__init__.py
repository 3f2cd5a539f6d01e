"""Image cache adapters."""

from photocache.adapters.cache.eviction import LRUPolicy, UnboundedPolicy
from photocache.adapters.cache.image_store import ImageStore


__all__ = ["ImageStore", "LRUPolicy", "UnboundedPolicy"]
