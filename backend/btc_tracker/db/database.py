"""
Database connection and session management.

Uses SQLite through SQLAlchemy's synchronous engine; the weekly series is
written from the refresh worker thread, one cycle at a time.
"""

import logging
import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from btc_tracker.db.models import Base

logger = logging.getLogger(__name__)


def create_db_engine(sqlite_path: str) -> Engine:
    """Create the SQLite engine, making the parent directory if needed."""
    directory = os.path.dirname(os.path.abspath(sqlite_path))
    os.makedirs(directory, exist_ok=True)

    return create_engine(
        f"sqlite:///{sqlite_path}",
        echo=False,  # Set to True for SQL debugging
        connect_args={"check_same_thread": False},
    )


def init_db(engine: Engine) -> None:
    """
    Initialize the database - create all tables.
    Called when the SQLite store is created.
    """
    try:
        Base.metadata.create_all(engine)
        logger.info(f"Database initialized at: {engine.url}")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """
    Context manager for database sessions.
    Commits on success, rolls back on any error.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
