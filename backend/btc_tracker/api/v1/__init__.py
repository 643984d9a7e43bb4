"""
API v1 Router

All API endpoints for the dashboard.
"""

from fastapi import APIRouter

from btc_tracker.api.v1.endpoints import bitcoin

router = APIRouter()

router.include_router(bitcoin.router, prefix="/bitcoin", tags=["Bitcoin"])
