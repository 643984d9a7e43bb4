"""
Weekly Series Storage

Persistence collaborators for the weekly price series.
"""

import logging
import os

from btc_tracker.core.config import Settings
from btc_tracker.db.database import create_db_engine
from btc_tracker.services.storage.interface import WeeklySeriesStore
from btc_tracker.services.storage.json_store import JsonWeeklySeriesStore
from btc_tracker.services.storage.sql_store import SqlWeeklySeriesStore

logger = logging.getLogger(__name__)

# Default data directory: <repo>/backend/data
_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_DATA_DIR = os.path.join(os.path.dirname(_PACKAGE_DIR), "data")


def create_weekly_store(settings: Settings) -> WeeklySeriesStore:
    """Build the store selected by `weekly_store_backend`."""
    data_dir = settings.data_dir or DEFAULT_DATA_DIR
    backend = settings.weekly_store_backend.lower()

    if backend == "json":
        path = settings.weekly_prices_path or os.path.join(data_dir, "weekly_prices.json")
        logger.info(f"Weekly series store: JSON file {path}")
        return JsonWeeklySeriesStore(path)

    if backend == "sqlite":
        path = settings.sqlite_path or os.path.join(data_dir, "btc_tracker.db")
        logger.info(f"Weekly series store: SQLite {path}")
        return SqlWeeklySeriesStore(create_db_engine(path))

    raise ValueError(f"Unknown weekly_store_backend: {settings.weekly_store_backend}")


__all__ = [
    "WeeklySeriesStore",
    "JsonWeeklySeriesStore",
    "SqlWeeklySeriesStore",
    "create_weekly_store",
]
