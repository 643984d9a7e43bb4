"""
Redis cache client for the dashboard snapshot.

The last BitcoinDataResponse is cached for `snapshot_cache_ttl_seconds` so
dashboard polls between refresh cycles never hit upstream providers.
"""

import logging
import time
from typing import Optional

import redis.asyncio as redis

from btc_tracker.schemas.indicators import BitcoinDataResponse

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "btc_tracker:snapshot"


async def create_redis_client(redis_url: str) -> Optional[redis.Redis]:
    """
    Connect to Redis.
    Returns None when Redis is unreachable so callers fall back to memory.
    """
    client = redis.from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    try:
        await client.ping()
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        await client.close()
        return None

    logger.info(f"Redis connected: {redis_url}")
    return client


class SnapshotCache:
    """
    Cache for the latest dashboard snapshot.

    Keys:
    - btc_tracker:snapshot → JSON BitcoinDataResponse (TTL = ttl_seconds)

    Falls back to a per-instance in-memory entry when Redis is unavailable.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, ttl_seconds: int = 300):
        self._redis = redis_client
        self._ttl = ttl_seconds
        self._memory_value: Optional[str] = None
        self._memory_expires_at = 0.0

    @property
    def backend(self) -> str:
        return "redis" if self._redis else "memory"

    def _memory_get(self) -> Optional[str]:
        if self._memory_value is not None and time.monotonic() < self._memory_expires_at:
            return self._memory_value
        return None

    def _memory_set(self, value: str) -> None:
        self._memory_value = value
        self._memory_expires_at = time.monotonic() + self._ttl

    async def get(self) -> Optional[BitcoinDataResponse]:
        """Return the cached snapshot, or None when missing or expired."""
        value = None
        if self._redis:
            try:
                value = await self._redis.get(SNAPSHOT_KEY)
            except Exception as e:
                logger.debug(f"Redis get snapshot failed: {e}")
                value = self._memory_get()
        else:
            value = self._memory_get()

        return BitcoinDataResponse.model_validate_json(value) if value else None

    async def set(self, snapshot: BitcoinDataResponse) -> None:
        value = snapshot.model_dump_json()

        # Memory copy is kept either way so a Redis outage still serves it
        self._memory_set(value)
        if self._redis:
            try:
                await self._redis.set(SNAPSHOT_KEY, value, ex=self._ttl)
            except Exception as e:
                logger.debug(f"Redis set snapshot failed: {e}")

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis:
            await self._redis.close()
            self._redis = None
            logger.info("Redis connection closed")
