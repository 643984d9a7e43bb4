"""
Weekly Series Merger

Reconciles the persisted weekly series with weekly buckets recomputed
from the latest daily window.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.base import PersistenceError
from btc_tracker.services.storage.interface import WeeklySeriesStore
from btc_tracker.services.weekly.aggregation import aggregate_to_weekly, week_start

logger = logging.getLogger(__name__)


class MergeMode(str, Enum):
    """How the in-progress (last) week is treated."""

    APPEND_ONLY = "append_only"  # Never touch a week once persisted
    REPLACE_LAST = "replace_last"  # Keep the last week live-updated


@dataclass
class MergeOutcome:
    """Result of a merge; `series` is always a new list."""

    series: list[PricePoint]
    changed: bool = False
    appended: Optional[PricePoint] = None
    replaced: Optional[PricePoint] = None


def merge_weekly(
    persisted: Sequence[PricePoint],
    fresh_daily: Sequence[PricePoint],
    mode: MergeMode = MergeMode.APPEND_ONLY,
) -> MergeOutcome:
    """
    Merge weekly buckets computed from `fresh_daily` into `persisted`.

    - Empty persisted series: replaced by every candidate bucket.
    - Candidate's last bucket in a later week: appended.
    - Same week: left alone (APPEND_ONLY) or overwritten (REPLACE_LAST).
    - Candidate's last bucket in an earlier week: ignored.

    `persisted` is never mutated and no persisted week is ever dropped.
    """
    current = list(persisted)
    candidate = aggregate_to_weekly(fresh_daily)

    if not candidate:
        return MergeOutcome(series=current)

    if not current:
        logger.info(f"Initialized weekly series with {len(candidate)} weeks")
        return MergeOutcome(series=candidate, changed=True)

    last_stored = current[-1]
    latest = candidate[-1]

    if latest.date == last_stored.date or week_start(latest.date) == week_start(last_stored.date):
        if mode == MergeMode.REPLACE_LAST and latest != last_stored:
            current[-1] = latest
            logger.info(f"Updated in-progress week: {latest.date} at ${latest.price}")
            return MergeOutcome(series=current, changed=True, replaced=last_stored)
        return MergeOutcome(series=current)

    if week_start(latest.date) < week_start(last_stored.date):
        logger.warning(
            f"Ignoring stale weekly bucket {latest.date}; "
            f"persisted series already ends at {last_stored.date}"
        )
        return MergeOutcome(series=current)

    current.append(latest)
    logger.info(f"Added new week: {latest.date} at ${latest.price}")
    return MergeOutcome(series=current, changed=True, appended=latest)


def save_weekly_series(store: WeeklySeriesStore, series: Sequence[PricePoint]) -> None:
    """
    Persist `series` through `store`.

    Raises:
        PersistenceError: save failed; `.series` holds the unsaved series
    """
    try:
        store.save(series)
    except PersistenceError as e:
        e.series = list(series)
        raise
    except Exception as e:
        raise PersistenceError(
            store.name,
            f"Failed to save weekly series: {e}",
            series=list(series),
        ) from e
