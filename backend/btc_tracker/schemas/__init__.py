"""
BTC Tracker Schema Contracts

This module defines all JSON contracts between system components.
"""

from btc_tracker.schemas.market import (
    PricePoint,
    DailySeries,
    WeeklySeries,
    FearGreedIndex,
    MarketData,
    MarketDataRequest,
)
from btc_tracker.schemas.indicators import (
    IndicatorSnapshot,
    SignalResult,
    TrackerSnapshot,
    Crossover,
    CrossoverReport,
    CrossoverDirection,
    CrossoverStatus,
    MovingAveragePoint,
    MovingAverageChart,
    WeeklyOverview,
    BitcoinDataResponse,
)

__all__ = [
    # Market
    "PricePoint",
    "DailySeries",
    "WeeklySeries",
    "FearGreedIndex",
    "MarketData",
    "MarketDataRequest",
    # Indicators
    "IndicatorSnapshot",
    "SignalResult",
    "TrackerSnapshot",
    "Crossover",
    "CrossoverReport",
    "CrossoverDirection",
    "CrossoverStatus",
    "MovingAveragePoint",
    "MovingAverageChart",
    "WeeklyOverview",
    "BitcoinDataResponse",
]
