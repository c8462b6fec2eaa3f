"""
Caches for geo lookups.

The engine only needs ``get`` and ``set``; backends decide how values are
stored and expired.
"""

from .base import CacheUnavailableError, GeoCache
from .memory import InMemoryCache
from .redis_cache import RedisCache

__all__ = ["CacheUnavailableError", "GeoCache", "InMemoryCache", "RedisCache"]
