import datetime as dt
from typing import Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from btc_tracker.api.v1.endpoints.bitcoin import get_tracker_service
from btc_tracker.main import app
from btc_tracker.schemas.indicators import (
    BitcoinDataResponse,
    Crossover,
    CrossoverReport,
    CrossoverStatus,
    MovingAverageChart,
    WeeklyOverview,
)
from btc_tracker.schemas.market import FearGreedIndex, PricePoint
from btc_tracker.services.base import ExternalAPIError, PersistenceError
from btc_tracker.services.tracker.interface import TrackerServiceInterface

WEEKLY = [
    PricePoint(date=dt.date(2024, 1, 1), price=42_000.0),
    PricePoint(date=dt.date(2024, 1, 8), price=43_000.0),
]


def _response(refreshed: bool) -> BitcoinDataResponse:
    no_cross = Crossover(status=CrossoverStatus.INSUFFICIENT_DATA, short_period=50, long_period=200)
    return BitcoinDataResponse(
        current_price=43_500.0,
        fear_greed_index=FearGreedIndex(value=55, classification="Greed"),
        rsi=61.2,
        buy_signal=False,
        sell_signal=False,
        signal_explanation="Waiting for trading signals",
        crossovers=CrossoverReport(daily=no_cross, weekly=no_cross),
        historical_data=WEEKLY,
        weekly_prices=WEEKLY,
        warnings=["refreshed"] if refreshed else [],
        generated_at=dt.datetime(2024, 1, 9, tzinfo=dt.timezone.utc),
    )


class FakeTracker(TrackerServiceInterface):
    def __init__(self):
        self.error: Optional[Exception] = None

    async def execute(self, input_data: bool = False) -> BitcoinDataResponse:
        if self.error:
            raise self.error
        return _response(refreshed=input_data)

    async def refresh(self) -> BitcoinDataResponse:
        return await self.execute(True)

    async def weekly_overview(self) -> WeeklyOverview:
        if self.error:
            raise self.error
        return WeeklyOverview(weekly_prices=WEEKLY, table=[], count=len(WEEKLY))

    async def daily_chart(self) -> MovingAverageChart:
        return MovingAverageChart(granularity="daily", short_period=50, long_period=200, points=[])

    async def weekly_chart(self) -> MovingAverageChart:
        return MovingAverageChart(granularity="weekly", short_period=50, long_period=200, points=[])

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def tracker() -> Iterator[FakeTracker]:
    fake = FakeTracker()
    app.dependency_overrides[get_tracker_service] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    # No context manager: the lifespan (and its upstream refresher) stays off
    return TestClient(app)


def test_verify_moving_average(client: TestClient) -> None:
    response = client.get("/api/v1/bitcoin/verify-ma")
    assert response.status_code == 200
    assert response.json() == {"success": True, "test": 107.0}


def test_bitcoin_data(client: TestClient, tracker: FakeTracker) -> None:
    response = client.get("/api/v1/bitcoin/data")
    assert response.status_code == 200
    body = response.json()
    assert body["current_price"] == 43_500.0
    assert body["fear_greed_index"]["value"] == 55
    assert body["weekly_prices"][0] == {"date": "2024-01-01", "price": 42000.0}
    assert body["persisted"] is True
    assert body["warnings"] == []


def test_bitcoin_data_refresh_flag(client: TestClient, tracker: FakeTracker) -> None:
    response = client.get("/api/v1/bitcoin/data", params={"refresh": "true"})
    assert response.json()["warnings"] == ["refreshed"]


def test_upstream_failure_is_bad_gateway(client: TestClient, tracker: FakeTracker) -> None:
    tracker.error = ExternalAPIError("Kraken", "HTTP 503")
    response = client.get("/api/v1/bitcoin/data")
    assert response.status_code == 502
    assert "HTTP 503" in response.json()["detail"]


def test_persistence_failure_is_server_error(client: TestClient, tracker: FakeTracker) -> None:
    tracker.error = PersistenceError("JsonWeeklySeriesStore", "Cannot read weekly prices")
    response = client.get("/api/v1/bitcoin/weekly")
    assert response.status_code == 500


def test_weekly_and_charts(client: TestClient, tracker: FakeTracker) -> None:
    weekly = client.get("/api/v1/bitcoin/weekly").json()
    assert weekly["count"] == 2

    assert client.get("/api/v1/bitcoin/charts/daily").json()["granularity"] == "daily"
    assert client.get("/api/v1/bitcoin/charts/weekly").json()["granularity"] == "weekly"


def test_data_without_tracker_is_unavailable(client: TestClient) -> None:
    assert client.get("/api/v1/bitcoin/data").status_code == 503


def test_root_and_health(client: TestClient) -> None:
    assert client.get("/").json()["docs"] == "/docs"
    assert client.get("/health").status_code == 200
