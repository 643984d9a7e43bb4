"""
Market Data Service Interface

Defines the contract for the data ingestion layer.
"""

from abc import abstractmethod

from btc_tracker.services.base import BaseService
from btc_tracker.schemas.market import MarketData, MarketDataRequest


class MarketDataServiceInterface(BaseService[MarketDataRequest, MarketData]):
    """
    Market Data Service Contract.

    INPUT: MarketDataRequest
        - pair: Kraken pair for the daily series
        - include_current_price: query the spot price provider

    OUTPUT: MarketData
        - daily: ascending daily close series
        - current_price: spot price (or last daily close as fallback)
        - fear_greed: latest Fear & Greed Index
        - warnings: non-fatal issues (e.g. spot price fallback)
    """

    @property
    def name(self) -> str:
        return "MarketDataService"

    @abstractmethod
    async def execute(self, input_data: MarketDataRequest) -> MarketData:
        """Fetch all upstream data for one refresh cycle."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
