"""
Kraken Data Adapter

Fetches the daily BTC/USD close series from Kraken's public OHLC endpoint
(free, no auth required). Kraken returns up to 720 candles per call.

Response shape:
    {"error": [], "result": {"XXBTZUSD": [[time, open, high, low, close,
     vwap, volume, count], ...], "last": 1700000000}}
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Sequence

import aiohttp

from btc_tracker.core.config import Settings
from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.base import ExternalAPIError, ValidationError

logger = logging.getLogger(__name__)

SOURCE = "Kraken"

# Index of the close price in a Kraken OHLC row
CLOSE_INDEX = 4


def ensure_ascending(series: Sequence[PricePoint], source: str = SOURCE) -> None:
    """Reject daily series that are out of order or repeat a date."""
    for prev, curr in zip(series, series[1:]):
        if curr.date <= prev.date:
            raise ValidationError(
                source,
                f"Daily series not strictly ascending at {curr.date} (after {prev.date})",
                {"previous": str(prev.date), "current": str(curr.date)},
            )


def parse_kraken_ohlc(payload: dict[str, Any]) -> list[PricePoint]:
    """Convert a Kraken OHLC response into an ascending daily close series."""
    errors = payload.get("error") or []
    if errors:
        raise ExternalAPIError(SOURCE, str(errors[0]), {"errors": errors})

    result = payload.get("result") or {}
    rows = next((value for key, value in result.items() if key != "last"), None)
    if rows is None:
        raise ExternalAPIError(SOURCE, "OHLC response contains no pair data")

    try:
        prices = [
            PricePoint(
                date=datetime.fromtimestamp(int(row[0]), tz=timezone.utc).date(),
                price=float(row[CLOSE_INDEX]),
            )
            for row in rows
        ]
    except (TypeError, ValueError, IndexError) as e:
        raise ExternalAPIError(SOURCE, f"Malformed OHLC row: {e}") from e

    ensure_ascending(prices)
    return prices


async def fetch_kraken_daily(
    session: aiohttp.ClientSession,
    settings: Settings,
    pair: str,
) -> list[PricePoint]:
    """
    Fetch the daily close series for `pair`.

    Raises:
        ExternalAPIError: transport failure or Kraken-reported error
        ValidationError: series out of order
    """
    url = f"{settings.kraken_base_url}/0/public/OHLC"
    params = {
        "pair": pair,
        "interval": settings.kraken_interval_minutes,
        "since": 0,  # All available data
    }

    logger.info("Fetching Bitcoin historical data from Kraken...")
    try:
        async with session.get(
            url,
            params=params,
            timeout=aiohttp.ClientTimeout(total=settings.kraken_timeout_seconds),
        ) as response:
            if response.status != 200:
                raise ExternalAPIError(SOURCE, f"HTTP {response.status}", {"url": url})
            payload = await response.json()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Error fetching Bitcoin historical data: {e}")
        raise ExternalAPIError(SOURCE, f"Request failed: {e}") from e

    prices = parse_kraken_ohlc(payload)
    logger.info(f"Fetched {len(prices)} historical data points")
    return prices
