"""
Indicator Engine

Applies the calculations to price series: the daily indicator snapshot,
weekly moving averages and the per-point chart/table rows.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from btc_tracker.core.config import Settings
from btc_tracker.schemas.indicators import IndicatorSnapshot, MovingAveragePoint
from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.indicators.calculations import (
    calculate_moving_average,
    calculate_rsi,
    rolling_moving_average,
)


@dataclass(frozen=True)
class IndicatorConfig:
    """Indicator windows, in points of the series they apply to."""

    rsi_period: int = 14
    ma_short_period: int = 50
    ma_long_period: int = 200
    ma_weekly_short_period: int = 50
    ma_weekly_long_period: int = 200

    @classmethod
    def from_settings(cls, settings: Settings) -> "IndicatorConfig":
        return cls(
            rsi_period=settings.rsi_period,
            ma_short_period=settings.ma_short_period,
            ma_long_period=settings.ma_long_period,
            ma_weekly_short_period=settings.ma_weekly_short_period,
            ma_weekly_long_period=settings.ma_weekly_long_period,
        )


def closing_prices(points: Sequence[PricePoint]) -> list[float]:
    return [p.price for p in points]


def compute_daily_indicators(
    daily: Sequence[PricePoint], config: IndicatorConfig = IndicatorConfig()
) -> IndicatorSnapshot:
    """RSI and short/long moving averages of the daily closes."""
    closes = closing_prices(daily)
    return IndicatorSnapshot(
        rsi=calculate_rsi(closes, config.rsi_period),
        ma_short=calculate_moving_average(closes, config.ma_short_period),
        ma_long=calculate_moving_average(closes, config.ma_long_period),
    )


def compute_weekly_averages(
    weekly: Sequence[PricePoint], config: IndicatorConfig = IndicatorConfig()
) -> tuple[Optional[float], Optional[float]]:
    """Short and long moving averages of the weekly series."""
    prices = closing_prices(weekly)
    return (
        calculate_moving_average(prices, config.ma_weekly_short_period),
        calculate_moving_average(prices, config.ma_weekly_long_period),
    )


def moving_average_points(
    points: Sequence[PricePoint], short_period: int, long_period: int
) -> list[MovingAveragePoint]:
    """Each point with its trailing short/long averages (chart and table rows)."""
    prices = closing_prices(points)
    short_ma = rolling_moving_average(prices, short_period)
    long_ma = rolling_moving_average(prices, long_period)

    return [
        MovingAveragePoint(
            date=point.date,
            price=point.price,
            ma_short=round(short, 2) if short is not None else None,
            ma_long=round(long, 2) if long is not None else None,
        )
        for point, short, long in zip(points, short_ma, long_ma)
    ]
