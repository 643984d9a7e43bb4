"""
CONTRACT 2: Indicator Engine

Input: DailySeries + persisted WeeklySeries + Fear & Greed value
Output: TrackerSnapshot (core) / BitcoinDataResponse (dashboard payload)

All mathematical results are produced by the pure functions under
services/indicators, services/weekly and services/signals.
"""

import datetime as dt
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from btc_tracker.schemas.market import FearGreedIndex, PricePoint


# =============================================================================
# ENUMS
# =============================================================================


class CrossoverDirection(str, Enum):
    ABOVE = "above"
    BELOW = "below"


class CrossoverStatus(str, Enum):
    DETECTED = "detected"
    NONE = "none"
    INSUFFICIENT_DATA = "insufficient_data"


# =============================================================================
# CORE OUTPUT
# =============================================================================


class IndicatorSnapshot(BaseModel):
    """Daily indicators; None means not enough data."""

    rsi: Optional[float] = None
    ma_short: Optional[float] = None
    ma_long: Optional[float] = None


class SignalResult(BaseModel):
    """Buy/sell gate output."""

    buy: bool = False
    sell: bool = False


class TrackerSnapshot(BaseModel):
    """Result of one core computation cycle."""

    weekly_series: list[PricePoint]
    weekly_changed: bool = False
    rsi: Optional[float] = None
    ma_short: Optional[float] = None
    ma_long: Optional[float] = None
    ma50w: Optional[float] = None
    ma200w: Optional[float] = None
    buy_signal: bool = False
    sell_signal: bool = False


# =============================================================================
# DASHBOARD COMPONENTS
# =============================================================================


class Crossover(BaseModel):
    """Most recent short/long moving average crossover."""

    status: CrossoverStatus
    direction: Optional[CrossoverDirection] = None
    date: Optional[dt.date] = None
    short_period: int
    long_period: int


class CrossoverReport(BaseModel):
    daily: Crossover
    weekly: Crossover


class MovingAveragePoint(BaseModel):
    """One row of a chart or table: price with its trailing averages."""

    date: dt.date
    price: float
    ma_short: Optional[float] = None
    ma_long: Optional[float] = None


class MovingAverageChart(BaseModel):
    granularity: str = Field(..., description="daily / weekly")
    short_period: int
    long_period: int
    points: list[MovingAveragePoint]


class WeeklyOverview(BaseModel):
    """Full weekly series plus the recent-weeks table (most recent first)."""

    weekly_prices: list[PricePoint]
    table: list[MovingAveragePoint]
    count: int


# =============================================================================
# OUTPUT: BitcoinDataResponse (Complete Dashboard Payload)
# =============================================================================


class BitcoinDataResponse(BaseModel):
    """Payload consumed by the dashboard on each refresh."""

    current_price: float
    fear_greed_index: FearGreedIndex
    rsi: Optional[float] = None
    ma50w: Optional[float] = None
    ma200w: Optional[float] = None
    ma50d: Optional[float] = None
    ma200d: Optional[float] = None
    buy_signal: bool
    sell_signal: bool
    signal_explanation: str
    crossovers: CrossoverReport
    historical_data: list[PricePoint]
    weekly_prices: list[PricePoint]
    persisted: bool = Field(True, description="False when the weekly series write failed")
    warnings: list[str] = Field(default_factory=list)
    generated_at: dt.datetime
