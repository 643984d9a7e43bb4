"""
CONTRACT 1: Market Data

Input: upstream provider payloads (Kraken, Live Coin Watch, alternative.me)
Output: MarketData

Price points are the unit of every series in the system: the daily series
fetched each cycle and the persisted weekly series share the same shape
({"date": "YYYY-MM-DD", "price": 12345.67}).
"""

import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# SERIES
# =============================================================================


class PricePoint(BaseModel):
    """Single dated price (daily close or weekly mean)."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    price: float


# Chronological, ascending, unique dates
DailySeries = list[PricePoint]
WeeklySeries = list[PricePoint]


# =============================================================================
# SENTIMENT
# =============================================================================


class FearGreedIndex(BaseModel):
    """Crypto Fear & Greed Index reading."""

    value: int = Field(..., ge=0, le=100)
    classification: str = Field(..., description="e.g. 'Extreme Fear', 'Greed'")
    timestamp: Optional[dt.datetime] = None


# =============================================================================
# INPUT: MarketDataRequest
# =============================================================================


class MarketDataRequest(BaseModel):
    """
    Request for one refresh cycle of upstream data.
    Sent by: Tracker Service
    Received by: Market Data Service
    """

    pair: str = Field(default="XBTUSD", description="Kraken pair for the daily series")
    include_current_price: bool = Field(
        default=True,
        description="Query the spot price provider (falls back to last daily close)",
    )


# =============================================================================
# OUTPUT: MarketData (one refresh cycle worth of upstream data)
# =============================================================================


class MarketData(BaseModel):
    """Everything fetched from upstream providers for one refresh cycle."""

    daily: list[PricePoint]
    current_price: float = Field(..., gt=0)
    current_price_source: str = Field(..., description="Provider of current_price")
    fear_greed: FearGreedIndex
    warnings: list[str] = Field(default_factory=list)
    fetched_at: dt.datetime
