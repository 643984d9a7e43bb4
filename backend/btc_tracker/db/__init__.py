"""
Database module for BTC Tracker.

Provides SQLite database connection and models.
"""

from btc_tracker.db.database import create_db_engine, init_db, make_session_factory, session_scope
from btc_tracker.db.models import Base, WeeklyPrice

__all__ = [
    "create_db_engine",
    "init_db",
    "make_session_factory",
    "session_scope",
    "Base",
    "WeeklyPrice",
]
