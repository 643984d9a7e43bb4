"""
Weekly Aggregation

Groups a daily price series into Monday-aligned calendar weeks.
"""

import datetime as dt
from itertools import groupby
from typing import Sequence

import numpy as np

from btc_tracker.schemas.market import PricePoint


def week_start(day: dt.date) -> dt.date:
    """Monday of the week containing `day` (Sunday belongs to the prior Monday)."""
    return day - dt.timedelta(days=day.weekday())


def aggregate_to_weekly(daily: Sequence[PricePoint]) -> list[PricePoint]:
    """
    Collapse consecutive daily points into one point per calendar week.

    Each bucket is dated by its first observed day (not necessarily the
    Monday) and priced at the mean of its closes, rounded to 2 decimals.
    Weeks without data are skipped. Input must be ascending; it is not
    re-sorted here.
    """
    weekly = []
    for _, bucket in groupby(daily, key=lambda point: week_start(point.date)):
        points = list(bucket)
        mean_price = float(np.mean([p.price for p in points]))
        weekly.append(PricePoint(date=points[0].date, price=round(mean_price, 2)))
    return weekly
