"""
Market Data Ingestion

CONTRACT:
    Input:  MarketDataRequest
    Output: MarketData

RESPONSIBILITIES:
    - Fetch daily BTC/USD closes (Kraken)
    - Fetch the current spot price (Live Coin Watch)
    - Fetch the Fear & Greed Index (alternative.me)
    - Validate ordering of the daily series before it reaches the core
"""

from btc_tracker.services.data_ingestion.interface import MarketDataServiceInterface
from btc_tracker.services.data_ingestion.service import MarketDataService

__all__ = [
    "MarketDataServiceInterface",
    "MarketDataService",
]
