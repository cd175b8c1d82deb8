"""Cache subsystem — two-tier (memory + disk) artifact cache with alias-scoped keys."""

from any2db.cache.keys import disk_filename, make_cache_key
from any2db.cache.manager import ArtifactCache
from any2db.cache.stats import CacheEntry, CacheStats

__all__ = [
    "ArtifactCache",
    "CacheEntry",
    "CacheStats",
    "disk_filename",
    "make_cache_key",
]
