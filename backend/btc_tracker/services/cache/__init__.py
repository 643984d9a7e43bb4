"""
Cache module for BTC Tracker.

Provides Redis caching for the dashboard snapshot.
"""

from btc_tracker.services.cache.redis_client import (
    SnapshotCache,
    create_redis_client,
)

__all__ = [
    "SnapshotCache",
    "create_redis_client",
]
