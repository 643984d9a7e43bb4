"""
Tracker Service Implementation

Owns the in-memory weekly series and runs refresh cycles:
fetch upstream data -> compute snapshot -> persist -> cache.

Only one cycle runs at a time; triggers arriving while a cycle is in
flight await that cycle instead of starting another.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from btc_tracker.core.config import Settings
from btc_tracker.schemas.indicators import (
    BitcoinDataResponse,
    CrossoverReport,
    MovingAverageChart,
    SignalResult,
    TrackerSnapshot,
    WeeklyOverview,
)
from btc_tracker.schemas.market import MarketData, MarketDataRequest, PricePoint
from btc_tracker.services.base import PersistenceError
from btc_tracker.services.cache import SnapshotCache
from btc_tracker.services.data_ingestion.interface import MarketDataServiceInterface
from btc_tracker.services.indicators import (
    IndicatorConfig,
    find_last_crossover,
    moving_average_points,
    round_or_none,
)
from btc_tracker.services.signals import SignalThresholds, explain_signal
from btc_tracker.services.storage.interface import WeeklySeriesStore
from btc_tracker.services.tracker.interface import TrackerServiceInterface
from btc_tracker.services.tracker.snapshot import SnapshotPersistenceError, compute_snapshot
from btc_tracker.services.weekly import MergeMode, save_weekly_series

logger = logging.getLogger(__name__)


class TrackerService(TrackerServiceInterface):
    """
    Refresh-cycle orchestrator.

    Usage:
        service = TrackerService(settings, market_data, store, cache)
        data = await service.execute(False)   # cached when fresh
        data = await service.refresh()        # forces a cycle
    """

    def __init__(
        self,
        settings: Settings,
        market_data: MarketDataServiceInterface,
        store: WeeklySeriesStore,
        cache: SnapshotCache,
    ):
        self._settings = settings
        self._market_data = market_data
        self._store = store
        self._cache = cache

        self._config = IndicatorConfig.from_settings(settings)
        self._thresholds = SignalThresholds.from_settings(settings)
        self._merge_mode = MergeMode(settings.weekly_merge_mode)

        self._weekly: Optional[list[PricePoint]] = None
        self._daily: list[PricePoint] = []
        self._dirty = False  # In-memory weekly series not yet persisted
        self._inflight: Optional[asyncio.Future] = None
        self._load_lock = asyncio.Lock()
        self._last_refresh: Optional[datetime] = None

    @property
    def last_refresh(self) -> Optional[datetime]:
        return self._last_refresh

    @property
    def has_unpersisted_changes(self) -> bool:
        return self._dirty

    async def execute(self, input_data: bool = False) -> BitcoinDataResponse:
        """Dashboard payload; `input_data` forces a refresh cycle."""
        if not input_data:
            cached = await self._cache.get()
            if cached is not None:
                return cached
        return await self.refresh()

    async def refresh(self) -> BitcoinDataResponse:
        """Run a refresh cycle, or join the one already in flight."""
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._run_cycle())
        return await asyncio.shield(self._inflight)

    async def _ensure_weekly_loaded(self) -> list[PricePoint]:
        async with self._load_lock:
            if self._weekly is None:
                self._weekly = await asyncio.to_thread(self._store.load)
                if not self._weekly:
                    logger.info("Weekly prices store is empty, initializing from historical data...")
        return self._weekly

    async def _run_cycle(self) -> BitcoinDataResponse:
        logger.info("=== Fetching Bitcoin data ===")
        weekly = await self._ensure_weekly_loaded()

        market = await self._market_data.execute(
            MarketDataRequest(pair=self._settings.kraken_pair)
        )
        warnings = list(market.warnings)

        persisted = True
        try:
            snapshot = await self._run_blocking(
                compute_snapshot,
                market.daily,
                weekly,
                market.fear_greed.value,
                store=self._store,
                config=self._config,
                merge_mode=self._merge_mode,
                thresholds=self._thresholds,
            )
        except SnapshotPersistenceError as e:
            snapshot = e.snapshot
            persisted = False
            warnings.append(f"Weekly series not persisted: {e.message}")

        if snapshot.weekly_changed:
            self._dirty = not persisted
        elif self._dirty:
            persisted = await self._retry_save(snapshot.weekly_series, warnings)

        # Swap by reference; readers never see a partially merged series
        self._weekly = snapshot.weekly_series
        self._daily = market.daily
        self._last_refresh = datetime.now(timezone.utc)

        logger.info(
            f"RSI: {round_or_none(snapshot.rsi)} | 50W MA: {round_or_none(snapshot.ma50w)} | "
            f"200W MA: {round_or_none(snapshot.ma200w)} | weeks: {len(snapshot.weekly_series)}"
        )

        response = self._build_response(market, snapshot, persisted, warnings)
        await self._cache.set(response)
        return response

    async def _run_blocking(self, func, *args, **kwargs):
        """
        Run a store-writing call in a worker thread.

        The thread cannot be interrupted, so on cancellation the write is
        allowed to finish before CancelledError propagates.
        """
        work = asyncio.ensure_future(asyncio.to_thread(func, *args, **kwargs))
        try:
            return await asyncio.shield(work)
        except asyncio.CancelledError:
            await asyncio.wait([work])
            if not work.cancelled() and work.exception() is not None:
                logger.warning(f"Worker call failed during cancellation: {work.exception()}")
            raise

    async def _retry_save(self, series: list[PricePoint], warnings: list[str]) -> bool:
        """Persist a series left unsaved by an earlier failed cycle."""
        try:
            await self._run_blocking(save_weekly_series, self._store, series)
        except PersistenceError as e:
            logger.error(f"Retry of weekly series save failed: {e}")
            warnings.append(f"Weekly series not persisted: {e.message}")
            return False

        logger.info("Persisted weekly series left over from a failed save")
        self._dirty = False
        return True

    def _build_response(
        self,
        market: MarketData,
        snapshot: TrackerSnapshot,
        persisted: bool,
        warnings: list[str],
    ) -> BitcoinDataResponse:
        signal = SignalResult(buy=snapshot.buy_signal, sell=snapshot.sell_signal)
        crossovers = CrossoverReport(
            daily=find_last_crossover(
                market.daily, self._config.ma_short_period, self._config.ma_long_period
            ),
            weekly=find_last_crossover(
                snapshot.weekly_series,
                self._config.ma_weekly_short_period,
                self._config.ma_weekly_long_period,
            ),
        )

        return BitcoinDataResponse(
            current_price=market.current_price,
            fear_greed_index=market.fear_greed,
            rsi=round_or_none(snapshot.rsi),
            ma50w=round_or_none(snapshot.ma50w),
            ma200w=round_or_none(snapshot.ma200w),
            ma50d=round_or_none(snapshot.ma_short),
            ma200d=round_or_none(snapshot.ma_long),
            buy_signal=snapshot.buy_signal,
            sell_signal=snapshot.sell_signal,
            signal_explanation=explain_signal(
                market.fear_greed.value, snapshot.rsi, signal, self._thresholds
            ),
            crossovers=crossovers,
            historical_data=market.daily[-self._settings.history_days_in_payload :],
            weekly_prices=snapshot.weekly_series,
            persisted=persisted,
            warnings=warnings,
            generated_at=datetime.now(timezone.utc),
        )

    async def weekly_overview(self) -> WeeklyOverview:
        """Weekly series plus the most recent weeks with their MAs, newest first."""
        weekly = await self._ensure_weekly_loaded()
        rows = moving_average_points(
            weekly,
            self._config.ma_weekly_short_period,
            self._config.ma_weekly_long_period,
        )
        table = list(reversed(rows[-self._settings.weekly_table_rows :]))
        return WeeklyOverview(weekly_prices=weekly, table=table, count=len(weekly))

    async def daily_chart(self) -> MovingAverageChart:
        """Daily closes of the payload window with trailing daily MAs."""
        if not self._daily:
            await self.refresh()

        points = moving_average_points(
            self._daily, self._config.ma_short_period, self._config.ma_long_period
        )
        return MovingAverageChart(
            granularity="daily",
            short_period=self._config.ma_short_period,
            long_period=self._config.ma_long_period,
            points=points[-self._settings.history_days_in_payload :],
        )

    async def weekly_chart(self) -> MovingAverageChart:
        weekly = await self._ensure_weekly_loaded()
        return MovingAverageChart(
            granularity="weekly",
            short_period=self._config.ma_weekly_short_period,
            long_period=self._config.ma_weekly_long_period,
            points=moving_average_points(
                weekly,
                self._config.ma_weekly_short_period,
                self._config.ma_weekly_long_period,
            ),
        )

    async def close(self) -> None:
        """
        Stop the cycle in flight, then release upstream sessions, the cache
        connection and the weekly store.
        """
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
            try:
                await self._inflight
            except asyncio.CancelledError:
                logger.info("Cancelled refresh cycle in flight at shutdown")
            except Exception as e:
                logger.warning(f"Refresh cycle in flight at shutdown failed: {e}")

        await self._market_data.close()
        await self._cache.close()
        await asyncio.to_thread(self._store.close)

    async def health_check(self) -> bool:
        """Healthy once the weekly series could be loaded."""
        try:
            await self._ensure_weekly_loaded()
        except PersistenceError as e:
            logger.error(f"Health check failed: {e}")
            return False
        return True
