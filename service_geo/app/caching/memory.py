"""
Process-local cache for single-replica runs and tests.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from .base import GeoCache


class InMemoryCache(GeoCache):
    """Dict-backed cache with TTL on the monotonic clock.

    Reads and writes never suspend, so concurrent coroutines see each entry
    either fully written or absent.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[str, float]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int) -> bool:
        self._entries[key] = (value, self._clock() + ttl)
        return True

    def keys(self):
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
