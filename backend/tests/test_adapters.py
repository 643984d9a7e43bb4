import asyncio
import datetime as dt

import pytest
from pytest import MonkeyPatch

from btc_tracker.core.config import Settings
from btc_tracker.schemas.market import FearGreedIndex, MarketDataRequest, PricePoint
from btc_tracker.services.base import ExternalAPIError, ValidationError
from btc_tracker.services.data_ingestion import MarketDataService
from btc_tracker.services.data_ingestion import service as market_service_module
from btc_tracker.services.data_ingestion.fear_greed_adapter import parse_fear_greed
from btc_tracker.services.data_ingestion.kraken_adapter import ensure_ascending, parse_kraken_ohlc
from btc_tracker.services.data_ingestion.livecoinwatch_adapter import parse_livecoinwatch_rate

JAN_1 = 1704067200  # 2024-01-01T00:00:00Z
DAY = 86400


def _kraken_row(ts: int, close: str) -> list:
    return [ts, "42000.0", "43000.0", "41000.0", close, "42100.0", "12.5", 100]


def test_parse_kraken_ohlc() -> None:
    payload = {
        "error": [],
        "result": {
            "XXBTZUSD": [_kraken_row(JAN_1, "42500.5"), _kraken_row(JAN_1 + DAY, "43000.0")],
            "last": JAN_1 + DAY,
        },
    }
    assert parse_kraken_ohlc(payload) == [
        PricePoint(date=dt.date(2024, 1, 1), price=42500.5),
        PricePoint(date=dt.date(2024, 1, 2), price=43000.0),
    ]


def test_parse_kraken_error_response() -> None:
    with pytest.raises(ExternalAPIError):
        parse_kraken_ohlc({"error": ["EQuery:Unknown asset pair"]})


def test_parse_kraken_rejects_out_of_order_rows() -> None:
    payload = {
        "error": [],
        "result": {"XXBTZUSD": [_kraken_row(JAN_1 + DAY, "1"), _kraken_row(JAN_1, "2")]},
    }
    with pytest.raises(ValidationError):
        parse_kraken_ohlc(payload)


def test_ensure_ascending_rejects_duplicate_dates() -> None:
    day = dt.date(2024, 1, 1)
    with pytest.raises(ValidationError):
        ensure_ascending([PricePoint(date=day, price=1.0), PricePoint(date=day, price=2.0)])


def test_parse_fear_greed() -> None:
    index = parse_fear_greed(
        {"data": [{"value": "25", "value_classification": "Extreme Fear", "timestamp": str(JAN_1)}]}
    )
    assert index.value == 25
    assert index.classification == "Extreme Fear"
    assert index.timestamp == dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)


def test_parse_fear_greed_out_of_range() -> None:
    with pytest.raises(ValidationError):
        parse_fear_greed({"data": [{"value": "150", "value_classification": "?"}]})


def test_parse_fear_greed_without_data() -> None:
    with pytest.raises(ExternalAPIError):
        parse_fear_greed({"data": []})


def test_parse_livecoinwatch_rate() -> None:
    assert parse_livecoinwatch_rate({"rate": 43123.45}) == 43123.45
    with pytest.raises(ExternalAPIError):
        parse_livecoinwatch_rate({"rate": None})


def _patch_fetchers(monkeypatch: MonkeyPatch, fear_greed_error: Exception = None) -> None:
    daily = [
        PricePoint(date=dt.date(2024, 1, 1), price=42000.0),
        PricePoint(date=dt.date(2024, 1, 2), price=43000.0),
    ]

    async def fake_kraken(session, settings, pair):
        return daily

    async def fake_fear_greed(session, settings):
        if fear_greed_error:
            raise fear_greed_error
        return FearGreedIndex(value=40, classification="Fear")

    async def fake_spot(session, settings, code="BTC"):
        raise ExternalAPIError("Live Coin Watch", "HTTP 401")

    monkeypatch.setattr(market_service_module, "fetch_kraken_daily", fake_kraken)
    monkeypatch.setattr(market_service_module, "fetch_fear_greed", fake_fear_greed)
    monkeypatch.setattr(market_service_module, "fetch_livecoinwatch_price", fake_spot)


def test_market_data_falls_back_to_last_close(monkeypatch: MonkeyPatch) -> None:
    _patch_fetchers(monkeypatch)

    async def run():
        service = MarketDataService(Settings(livecoinwatch_api_key="key"))
        try:
            return await service.execute(MarketDataRequest())
        finally:
            await service.close()

    market = asyncio.run(run())
    assert market.current_price == 43000.0
    assert market.current_price_source == "Kraken (last daily close)"
    assert market.fear_greed.value == 40
    assert any("Spot price unavailable" in w for w in market.warnings)


def test_market_data_requires_fear_greed(monkeypatch: MonkeyPatch) -> None:
    _patch_fetchers(monkeypatch, fear_greed_error=ExternalAPIError("alternative.me", "HTTP 500"))

    async def run():
        service = MarketDataService(Settings(livecoinwatch_api_key=None))
        try:
            return await service.execute(MarketDataRequest())
        finally:
            await service.close()

    with pytest.raises(ExternalAPIError):
        asyncio.run(run())
