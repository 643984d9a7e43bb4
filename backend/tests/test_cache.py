import asyncio
import datetime as dt

from btc_tracker.schemas.indicators import (
    BitcoinDataResponse,
    Crossover,
    CrossoverReport,
    CrossoverStatus,
)
from btc_tracker.schemas.market import FearGreedIndex, PricePoint
from btc_tracker.services.cache import SnapshotCache


def _snapshot() -> BitcoinDataResponse:
    no_cross = Crossover(status=CrossoverStatus.NONE, short_period=50, long_period=200)
    weekly = [PricePoint(date=dt.date(2024, 1, 1), price=42_000.0)]
    return BitcoinDataResponse(
        current_price=42_500.0,
        fear_greed_index=FearGreedIndex(value=30, classification="Fear"),
        buy_signal=False,
        sell_signal=False,
        signal_explanation="Waiting for trading signals",
        crossovers=CrossoverReport(daily=no_cross, weekly=no_cross),
        historical_data=weekly,
        weekly_prices=weekly,
        generated_at=dt.datetime(2024, 1, 2, tzinfo=dt.timezone.utc),
    )


def test_memory_cache_round_trip() -> None:
    async def run():
        cache = SnapshotCache(None, ttl_seconds=60)
        missing = await cache.get()
        await cache.set(_snapshot())
        cached = await cache.get()
        await cache.close()
        return cache, missing, cached

    cache, missing, cached = asyncio.run(run())
    assert cache.backend == "memory"
    assert missing is None
    assert cached == _snapshot()


def test_memory_cache_expires() -> None:
    async def run():
        cache = SnapshotCache(None, ttl_seconds=0)
        await cache.set(_snapshot())
        return await cache.get()

    assert asyncio.run(run()) is None
