"""
Indicator Engine

RESPONSIBILITIES:
    - Simple moving averages (daily and weekly)
    - Wilder's RSI
    - Rolling MA series and MA crossovers for the dashboard charts

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from btc_tracker.services.indicators.calculations import (
    calculate_moving_average,
    calculate_rsi,
    rolling_moving_average,
    find_last_crossover,
    round_or_none,
    RSI_NO_LOSS,
)
from btc_tracker.services.indicators.service import (
    IndicatorConfig,
    compute_daily_indicators,
    compute_weekly_averages,
    moving_average_points,
)

__all__ = [
    "calculate_moving_average",
    "calculate_rsi",
    "rolling_moving_average",
    "find_last_crossover",
    "round_or_none",
    "RSI_NO_LOSS",
    "IndicatorConfig",
    "compute_daily_indicators",
    "compute_weekly_averages",
    "moving_average_points",
]
