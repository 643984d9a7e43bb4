"""
Bitcoin API Endpoints

Dashboard payload, weekly series and chart data.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from btc_tracker.schemas.indicators import (
    BitcoinDataResponse,
    MovingAverageChart,
    WeeklyOverview,
)
from btc_tracker.services.base import ExternalAPIError, ServiceError
from btc_tracker.services.indicators import calculate_moving_average
from btc_tracker.services.tracker.interface import TrackerServiceInterface

logger = logging.getLogger(__name__)

router = APIRouter()


def get_tracker_service(request: Request) -> TrackerServiceInterface:
    """Tracker service created in the application lifespan."""
    tracker = getattr(request.app.state, "tracker", None)
    if tracker is None:
        raise HTTPException(status_code=503, detail="Tracker service not initialized")
    return tracker


def _to_http_error(e: Exception) -> HTTPException:
    if isinstance(e, ExternalAPIError):
        return HTTPException(status_code=502, detail=f"Upstream data unavailable: {e.message}")
    if isinstance(e, ServiceError):
        return HTTPException(status_code=500, detail=e.message)
    return HTTPException(status_code=500, detail=str(e))


@router.get("/data", response_model=BitcoinDataResponse)
async def get_bitcoin_data(
    refresh: bool = Query(False, description="Force a refresh cycle instead of serving the cache"),
    tracker: TrackerServiceInterface = Depends(get_tracker_service),
):
    """
    Get the dashboard payload.

    Returns:
    - Current price and Fear & Greed index
    - Daily RSI, 50/200 day and 50/200 week moving averages
    - Buy/sell signal with an explanation
    - Last year of daily closes and the full weekly series
    """
    try:
        return await tracker.execute(refresh)
    except ServiceError as e:
        logger.error(f"Error fetching Bitcoin data: {e}")
        raise _to_http_error(e)
    except Exception as e:
        logger.exception("Unexpected error fetching Bitcoin data")
        raise _to_http_error(e)


@router.get("/weekly", response_model=WeeklyOverview)
async def get_weekly_prices(tracker: TrackerServiceInterface = Depends(get_tracker_service)):
    """Stored weekly series and the most recent weeks with their MAs."""
    try:
        return await tracker.weekly_overview()
    except ServiceError as e:
        logger.error(f"Error loading weekly prices: {e}")
        raise _to_http_error(e)


@router.get("/charts/daily", response_model=MovingAverageChart)
async def get_daily_chart(tracker: TrackerServiceInterface = Depends(get_tracker_service)):
    """Daily closes with rolling short/long moving averages."""
    try:
        return await tracker.daily_chart()
    except ServiceError as e:
        logger.error(f"Error building daily chart: {e}")
        raise _to_http_error(e)


@router.get("/charts/weekly", response_model=MovingAverageChart)
async def get_weekly_chart(tracker: TrackerServiceInterface = Depends(get_tracker_service)):
    """Weekly averages with rolling 50w/200w moving averages."""
    try:
        return await tracker.weekly_chart()
    except ServiceError as e:
        logger.error(f"Error building weekly chart: {e}")
        raise _to_http_error(e)


@router.get("/verify-ma")
async def verify_moving_average():
    """Self-check of the moving average over a known series."""
    test_series = [float(p) for p in range(100, 110)]
    result = calculate_moving_average(test_series, 5)
    return {"success": result == 107.0, "test": result}
