"""
Tracker Service Interface

Defines the contract for the refresh-cycle orchestrator.
"""

from abc import abstractmethod

from btc_tracker.services.base import BaseService
from btc_tracker.schemas.indicators import (
    BitcoinDataResponse,
    MovingAverageChart,
    WeeklyOverview,
)


class TrackerServiceInterface(BaseService[bool, BitcoinDataResponse]):
    """
    Tracker Service Contract.

    INPUT: force_refresh flag
        - False: serve the cached snapshot when fresh
        - True: run a refresh cycle

    OUTPUT: BitcoinDataResponse
        - Indicators, signals, weekly series and chart-ready history
    """

    @property
    def name(self) -> str:
        return "TrackerService"

    @abstractmethod
    async def execute(self, input_data: bool = False) -> BitcoinDataResponse:
        pass

    @abstractmethod
    async def refresh(self) -> BitcoinDataResponse:
        """Run (or join) a refresh cycle."""
        pass

    @abstractmethod
    async def weekly_overview(self) -> WeeklyOverview:
        pass

    @abstractmethod
    async def daily_chart(self) -> MovingAverageChart:
        pass

    @abstractmethod
    async def weekly_chart(self) -> MovingAverageChart:
        pass
