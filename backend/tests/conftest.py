import datetime as dt
import threading
import time
from typing import Callable, Optional, Sequence

import pytest

from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.storage.interface import WeeklySeriesStore

# A Monday
MONDAY = dt.date(2024, 1, 1)


class MemoryWeeklyStore(WeeklySeriesStore):
    """
    In-memory store recording every save and close in `events`.

    `fail_with` makes saves raise; `save_delay` makes them block the thread.
    """

    def __init__(self, series: Optional[list[PricePoint]] = None):
        self.series = list(series or [])
        self.saves: list[list[PricePoint]] = []
        self.fail_with: Optional[Exception] = None
        self.save_delay = 0.0
        self.save_started = threading.Event()
        self.events: list[str] = []

    @property
    def name(self) -> str:
        return "MemoryWeeklyStore"

    def load(self) -> list[PricePoint]:
        return list(self.series)

    def save(self, series: Sequence[PricePoint]) -> None:
        self.save_started.set()
        if self.save_delay:
            time.sleep(self.save_delay)
        if self.fail_with is not None:
            raise self.fail_with
        self.series = list(series)
        self.saves.append(list(series))
        self.events.append("save")

    def close(self) -> None:
        self.events.append("close")


def make_daily(start: dt.date, prices: Sequence[float]) -> list[PricePoint]:
    return [
        PricePoint(date=start + dt.timedelta(days=i), price=float(price))
        for i, price in enumerate(prices)
    ]


@pytest.fixture
def daily_factory() -> Callable[[dt.date, Sequence[float]], list[PricePoint]]:
    return make_daily


@pytest.fixture
def memory_store() -> MemoryWeeklyStore:
    return MemoryWeeklyStore()
