"""
BTC Tracker Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from btc_tracker.core.config import settings
from btc_tracker.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.log_level) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    from btc_tracker.services.cache import SnapshotCache, create_redis_client
    from btc_tracker.services.data_ingestion import MarketDataService
    from btc_tracker.services.storage import create_weekly_store
    from btc_tracker.services.tracker import SnapshotRefresher, TrackerService

    store = create_weekly_store(settings)

    redis_client = None
    if settings.enable_redis_cache:
        redis_client = await create_redis_client(settings.redis_url)
    if redis_client:
        logger.info("Redis cache connected")
    else:
        logger.info("Redis unavailable or disabled - using in-memory cache")

    tracker = TrackerService(
        settings,
        MarketDataService(settings),
        store,
        SnapshotCache(redis_client, ttl_seconds=settings.snapshot_cache_ttl_seconds),
    )
    app.state.tracker = tracker

    refresher = None
    if settings.enable_background_refresh:
        refresher = SnapshotRefresher(tracker, settings.refresh_interval_seconds)
        await refresher.start()
    else:
        logger.info("Background refresh disabled (enable_background_refresh=false)")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if refresher:
        await refresher.stop()
    await tracker.close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    BTC Tracker API

    ## Architecture
    - **Data Ingestion**: Daily closes from Kraken, spot price from Live Coin Watch,
      sentiment from the Fear & Greed Index
    - **Indicator Engine**: Moving averages and Wilder RSI (NumPy)
    - **Weekly Series**: Monday-aligned weekly averages, persisted and append-only
    - **Signals**: Buy/sell gate from Fear & Greed and RSI
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    tracker = getattr(app.state, "tracker", None)
    healthy = await tracker.health_check() if tracker else False
    return {
        "status": "healthy" if healthy else "degraded",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "last_refresh": tracker.last_refresh if tracker else None,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "BTC Tracker Backend API",
        "docs": "/docs",
        "health": "/health",
    }
