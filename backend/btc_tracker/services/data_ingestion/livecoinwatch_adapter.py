"""
Live Coin Watch Adapter

Fetches the current BTC/USD spot price.
Requires an API key (LIVECOINWATCH_API_KEY).
"""

import asyncio
import logging
from typing import Any

import aiohttp

from btc_tracker.core.config import Settings
from btc_tracker.services.base import ExternalAPIError

logger = logging.getLogger(__name__)

SOURCE = "Live Coin Watch"


def parse_livecoinwatch_rate(payload: dict[str, Any]) -> float:
    """Extract the USD rate from a coins/single response."""
    rate = payload.get("rate")
    try:
        price = float(rate)
    except (TypeError, ValueError) as e:
        raise ExternalAPIError(SOURCE, f"Response has no usable rate: {rate!r}") from e

    if price <= 0:
        raise ExternalAPIError(SOURCE, f"Non-positive rate: {price}")
    return price


async def fetch_livecoinwatch_price(
    session: aiohttp.ClientSession,
    settings: Settings,
    code: str = "BTC",
) -> float:
    """
    Fetch the current price of `code` in USD.

    Raises:
        ExternalAPIError: no API key, transport failure or bad payload
    """
    if not settings.livecoinwatch_api_key:
        raise ExternalAPIError(SOURCE, "LIVECOINWATCH_API_KEY not configured")

    url = f"{settings.livecoinwatch_base_url}/coins/single"
    headers = {
        "x-api-key": settings.livecoinwatch_api_key,
        "content-type": "application/json",
    }
    body = {"currency": "USD", "code": code, "meta": True}

    logger.info("Fetching current Bitcoin price from Live Coin Watch...")
    try:
        async with session.post(
            url,
            json=body,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=settings.livecoinwatch_timeout_seconds),
        ) as response:
            if response.status != 200:
                raise ExternalAPIError(SOURCE, f"HTTP {response.status}", {"url": url})
            payload = await response.json()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Error fetching current Bitcoin price: {e}")
        raise ExternalAPIError(SOURCE, f"Request failed: {e}") from e

    price = parse_livecoinwatch_rate(payload)
    logger.info(f"Current Bitcoin price: ${price:.2f}")
    return price
