#!/usr/bin/env python3

"""Cache implementations for parsed syntax and description records."""

from .description_cache import CacheEntry, DescriptionCache
from .lru_cache import LRUCache
from .persistent_description_cache import PersistentDescriptionCache

__all__ = [
    "CacheEntry",
    "DescriptionCache",
    "LRUCache",
    "PersistentDescriptionCache",
]
