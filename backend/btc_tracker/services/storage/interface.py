"""
Weekly Series Store Interface

Defines the contract for persisting the weekly price series.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from btc_tracker.schemas.market import PricePoint


class WeeklySeriesStore(ABC):
    """
    Weekly Series Store Contract.

    load(): the persisted series, ascending; empty list when nothing is stored
    save(series): replace the stored series as a whole
    close(): release held resources at shutdown

    Both raise PersistenceError on failure. A save is atomic: readers see
    either the previous series or the new one, never a partial write.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Store name for logging."""
        pass

    @abstractmethod
    def load(self) -> list[PricePoint]:
        pass

    @abstractmethod
    def save(self, series: Sequence[PricePoint]) -> None:
        pass

    def close(self) -> None:
        """Release connections held by the store."""
        pass
