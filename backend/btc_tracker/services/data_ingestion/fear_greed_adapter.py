"""
Fear & Greed Index Adapter

Fetches the latest Crypto Fear & Greed Index from alternative.me.

Response shape:
    {"data": [{"value": "25", "value_classification": "Extreme Fear",
               "timestamp": "1700000000", ...}]}
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from btc_tracker.core.config import Settings
from btc_tracker.schemas.market import FearGreedIndex
from btc_tracker.services.base import ExternalAPIError, ValidationError

logger = logging.getLogger(__name__)

SOURCE = "alternative.me"


def parse_fear_greed(payload: dict[str, Any]) -> FearGreedIndex:
    """Convert the latest Fear & Greed entry into a FearGreedIndex."""
    entries = payload.get("data") or []
    if not entries:
        raise ExternalAPIError(SOURCE, "Fear & Greed response contains no data")

    entry = entries[0]
    try:
        value = int(entry["value"])
        timestamp = entry.get("timestamp")
        return FearGreedIndex(
            value=value,
            classification=entry.get("value_classification", ""),
            timestamp=(
                datetime.fromtimestamp(int(timestamp), tz=timezone.utc) if timestamp else None
            ),
        )
    except PydanticValidationError as e:
        raise ValidationError(SOURCE, f"Fear & Greed value out of range: {entry.get('value')}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise ExternalAPIError(SOURCE, f"Malformed Fear & Greed entry: {e}") from e


async def fetch_fear_greed(session: aiohttp.ClientSession, settings: Settings) -> FearGreedIndex:
    """
    Fetch the current Fear & Greed Index.

    Raises:
        ExternalAPIError: transport failure or bad payload
    """
    logger.info("Fetching Fear & Greed Index...")
    try:
        async with session.get(
            settings.fear_greed_url,
            params={"limit": 1},
            timeout=aiohttp.ClientTimeout(total=settings.fear_greed_timeout_seconds),
        ) as response:
            if response.status != 200:
                raise ExternalAPIError(SOURCE, f"HTTP {response.status}")
            payload = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Error fetching Fear & Greed Index: {e}")
        raise ExternalAPIError(SOURCE, f"Request failed: {e}") from e

    index = parse_fear_greed(payload)
    logger.info(f"Fear & Greed Index: {index.value} ({index.classification})")
    return index
