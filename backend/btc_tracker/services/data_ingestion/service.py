"""
Market Data Service Implementation

Fetches the daily series, spot price and Fear & Greed Index concurrently
and joins them before any computation starts.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import aiohttp

from btc_tracker.core.config import Settings
from btc_tracker.schemas.market import MarketData, MarketDataRequest
from btc_tracker.services.base import ExternalAPIError
from btc_tracker.services.data_ingestion.fear_greed_adapter import fetch_fear_greed
from btc_tracker.services.data_ingestion.interface import MarketDataServiceInterface
from btc_tracker.services.data_ingestion.kraken_adapter import fetch_kraken_daily
from btc_tracker.services.data_ingestion.livecoinwatch_adapter import fetch_livecoinwatch_price

logger = logging.getLogger(__name__)


class MarketDataService(MarketDataServiceInterface):
    """
    Upstream data for the tracker.

    Sources:
    - Kraken public OHLC (daily closes, required)
    - alternative.me Fear & Greed (required)
    - Live Coin Watch (spot price, optional)
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": f"{self._settings.app_name}/{self._settings.app_version}"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def execute(self, input_data: MarketDataRequest) -> MarketData:
        """
        Fetch all upstream data for one refresh cycle.

        Raises:
            ExternalAPIError: daily series or Fear & Greed unavailable
            ValidationError: daily series malformed
        """
        session = await self._ensure_session()
        warnings: list[str] = []

        tasks = [
            fetch_kraken_daily(session, self._settings, input_data.pair),
            fetch_fear_greed(session, self._settings),
        ]
        if input_data.include_current_price and self._settings.livecoinwatch_api_key:
            tasks.append(fetch_livecoinwatch_price(session, self._settings))

        results = await asyncio.gather(*tasks, return_exceptions=True)

        # Required sources: surface the first failure
        for result in results[:2]:
            if isinstance(result, BaseException):
                raise result
        daily, fear_greed = results[0], results[1]

        if not daily:
            raise ExternalAPIError(self.name, "Daily price series is empty")

        current_price = daily[-1].price
        current_source = "Kraken (last daily close)"
        if len(results) > 2:
            spot = results[2]
            if isinstance(spot, BaseException):
                logger.warning(f"Spot price unavailable, using last daily close: {spot}")
                warnings.append(f"Spot price unavailable: {spot}")
            else:
                current_price = spot
                current_source = "Live Coin Watch"
        elif input_data.include_current_price:
            warnings.append("Spot price provider not configured, using last daily close")

        return MarketData(
            daily=daily,
            current_price=current_price,
            current_price_source=current_source,
            fear_greed=fear_greed,
            warnings=warnings,
            fetched_at=datetime.now(timezone.utc),
        )

    async def health_check(self) -> bool:
        """Upstream reachability is checked per cycle; the service itself holds no state."""
        return True
