"""
Redis-backed cache shared by all Geo replicas.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger
from .base import CacheUnavailableError, GeoCache


class RedisCache(GeoCache):
    """Cache on a shared Redis instance. Last writer wins."""

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self.logger = get_logger("geo.cache")
        self._redis: Optional[redis.Redis] = client

    async def _get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url, decode_responses=True)
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        """Stored value for ``key``; entries that are not UTF-8 read as absent."""
        redis_client = await self._get_redis()
        try:
            value = await redis_client.get(key)
            if isinstance(value, bytes):
                value = value.decode("utf-8")
        except RedisError as e:
            raise CacheUnavailableError(str(e)) from e
        except UnicodeDecodeError:
            self.logger.warning("Discarding undecodable cache entry", key=key)
            return None
        return value

    async def set(self, key: str, value: str, ttl: int) -> bool:
        redis_client = await self._get_redis()
        try:
            await redis_client.set(key, value, ex=ttl)
        except RedisError as e:
            self.logger.error("Cache set error", error=str(e))
            return False

        self.logger.debug("Cached value", key=key, ttl=ttl)
        return True

    async def ping(self) -> bool:
        redis_client = await self._get_redis()
        try:
            return bool(await redis_client.ping())
        except RedisError:
            return False

    async def close(self):
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
