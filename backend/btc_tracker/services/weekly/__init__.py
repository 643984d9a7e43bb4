"""
Weekly Series

Daily-to-weekly aggregation and the idempotent merge into the
persisted weekly series.
"""

from btc_tracker.services.weekly.aggregation import aggregate_to_weekly, week_start
from btc_tracker.services.weekly.merger import (
    MergeMode,
    MergeOutcome,
    save_weekly_series,
    merge_weekly,
)

__all__ = [
    "aggregate_to_weekly",
    "week_start",
    "MergeMode",
    "MergeOutcome",
    "save_weekly_series",
    "merge_weekly",
]
