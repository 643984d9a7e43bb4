"""
Technical Indicator Calculations

Pure Python/NumPy implementations of the tracker's indicators.
All math is deterministic; insufficient data is reported as None,
never raised.
"""

import math
from typing import Optional, Sequence

import numpy as np

from btc_tracker.schemas.indicators import Crossover, CrossoverDirection, CrossoverStatus
from btc_tracker.schemas.market import PricePoint

# RSI value used when the smoothed average loss is exactly zero
RSI_NO_LOSS = 100.0


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def calculate_moving_average(series: Sequence[float], period: int) -> Optional[float]:
    """
    Simple Moving Average of the trailing `period` values.

    Returns None when the series is shorter than `period` or the window
    holds a non-finite value.
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")
    if len(series) < period:
        return None

    window = np.asarray(series[-period:], dtype=float)
    return _finite_or_none(float(np.mean(window)))


def rolling_moving_average(series: Sequence[float], period: int) -> list[Optional[float]]:
    """
    Trailing SMA at every point of the series.

    Entry i is calculate_moving_average(series[: i + 1], period), so the
    first period - 1 entries are None.
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    result: list[Optional[float]] = [None] * min(len(series), period - 1)
    for end in range(period, len(series) + 1):
        result.append(calculate_moving_average(series[end - period : end], period))
    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def calculate_rsi(series: Sequence[float], period: int = 14) -> Optional[float]:
    """
    Wilder's smoothed Relative Strength Index, most recent value only.

    Seeds the average gain/loss from the first `period` differences and
    smooths every following difference with factor (period - 1) / period.
    A zero average loss gives RSI_NO_LOSS (100), a flat series included.
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")
    if len(series) < period + 1:
        return None

    closes = np.asarray(series, dtype=float)
    if not np.all(np.isfinite(closes)):
        return None

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    if avg_loss == 0:
        return RSI_NO_LOSS

    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


# =============================================================================
# CROSSOVERS
# =============================================================================


def find_last_crossover(
    points: Sequence[PricePoint], short_period: int, long_period: int
) -> Crossover:
    """
    Find the most recent point where the short MA crossed the long MA.

    Walks back from the latest point; a cross is a strict change of sign
    in (short MA - long MA) between two consecutive points.
    """
    if len(points) < long_period:
        return Crossover(
            status=CrossoverStatus.INSUFFICIENT_DATA,
            short_period=short_period,
            long_period=long_period,
        )

    prices = [p.price for p in points]
    short_ma = rolling_moving_average(prices, short_period)
    long_ma = rolling_moving_average(prices, long_period)

    for i in range(len(points) - 1, 0, -1):
        values = (short_ma[i - 1], long_ma[i - 1], short_ma[i], long_ma[i])
        if any(v is None for v in values):
            break

        short_prev, long_prev, short_curr, long_curr = values
        if short_prev < long_prev and short_curr > long_curr:
            direction = CrossoverDirection.ABOVE
        elif short_prev > long_prev and short_curr < long_curr:
            direction = CrossoverDirection.BELOW
        else:
            continue

        return Crossover(
            status=CrossoverStatus.DETECTED,
            direction=direction,
            date=points[i].date,
            short_period=short_period,
            long_period=long_period,
        )

    return Crossover(
        status=CrossoverStatus.NONE,
        short_period=short_period,
        long_period=long_period,
    )


def round_or_none(value: Optional[float], digits: int = 2) -> Optional[float]:
    """Round an indicator for display, keeping None as None."""
    return round(value, digits) if value is not None else None
