"""
Snapshot Builder

Single synchronous entry point of the indicator pipeline:
daily series -> weekly merge -> indicators -> signals.
"""

import logging
from typing import Optional, Sequence

from btc_tracker.schemas.indicators import TrackerSnapshot
from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.base import PersistenceError
from btc_tracker.services.indicators import (
    IndicatorConfig,
    compute_daily_indicators,
    compute_weekly_averages,
)
from btc_tracker.services.signals import SignalThresholds, evaluate_signal
from btc_tracker.services.storage.interface import WeeklySeriesStore
from btc_tracker.services.weekly import MergeMode, merge_weekly, save_weekly_series

logger = logging.getLogger(__name__)


class SnapshotPersistenceError(PersistenceError):
    """The snapshot was computed but the merged weekly series was not saved."""

    def __init__(self, snapshot: TrackerSnapshot, cause: PersistenceError):
        super().__init__(
            cause.service_name,
            cause.message,
            cause.details,
            series=list(snapshot.weekly_series),
        )
        self.snapshot = snapshot


def compute_snapshot(
    daily: Sequence[PricePoint],
    persisted_weekly: Sequence[PricePoint],
    fear_greed_value: Optional[int],
    *,
    store: Optional[WeeklySeriesStore] = None,
    config: IndicatorConfig = IndicatorConfig(),
    merge_mode: MergeMode = MergeMode.APPEND_ONLY,
    thresholds: SignalThresholds = SignalThresholds(),
) -> TrackerSnapshot:
    """
    Compute the full indicator snapshot for one refresh cycle.

    The weekly series is merged from `daily`; if it changed and a store is
    given, it is saved before returning.

    Raises:
        SnapshotPersistenceError: save failed; `.snapshot` is still complete
    """
    outcome = merge_weekly(persisted_weekly, daily, merge_mode)

    daily_indicators = compute_daily_indicators(daily, config)
    ma50w, ma200w = compute_weekly_averages(outcome.series, config)
    signal = evaluate_signal(fear_greed_value, daily_indicators.rsi, thresholds)

    if signal.buy:
        logger.info(f"BUY SIGNAL TRIGGERED (F&G {fear_greed_value}, RSI {daily_indicators.rsi:.2f})")
    if signal.sell:
        logger.info(f"SELL SIGNAL TRIGGERED (F&G {fear_greed_value}, RSI {daily_indicators.rsi:.2f})")

    snapshot = TrackerSnapshot(
        weekly_series=outcome.series,
        weekly_changed=outcome.changed,
        rsi=daily_indicators.rsi,
        ma_short=daily_indicators.ma_short,
        ma_long=daily_indicators.ma_long,
        ma50w=ma50w,
        ma200w=ma200w,
        buy_signal=signal.buy,
        sell_signal=signal.sell,
    )

    if store is not None and outcome.changed:
        try:
            save_weekly_series(store, outcome.series)
        except PersistenceError as e:
            logger.error(f"Weekly series not persisted: {e}")
            raise SnapshotPersistenceError(snapshot, e) from e

    return snapshot
