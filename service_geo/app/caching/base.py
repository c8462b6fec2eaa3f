"""
Cache interface for the Geo service.
"""

from abc import ABC, abstractmethod
from typing import Optional


class CacheUnavailableError(Exception):
    """The cache backend could not be reached."""
    pass


class GeoCache(ABC):
    """String key/value cache with per-entry TTL."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when absent or expired.

        Raises :class:`CacheUnavailableError` when the backend is unreachable.
        """

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int) -> bool:
        """Store ``value`` for ``ttl`` seconds. Returns False on failure."""

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass
