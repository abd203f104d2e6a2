"""Key/value cache abstraction with memory, file and Redis backends."""

from daily_gm.cache.client import CacheBackend, CacheClient

__all__ = ["CacheBackend", "CacheClient"]
