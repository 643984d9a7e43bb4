"""
SQLite Weekly Series Store

Keeps the weekly series in the `weekly_prices` table. A save rewrites the
table inside a single transaction.
"""

import logging
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from btc_tracker.db.database import init_db, make_session_factory, session_scope
from btc_tracker.db.models import WeeklyPrice
from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.base import PersistenceError
from btc_tracker.services.storage.interface import WeeklySeriesStore

logger = logging.getLogger(__name__)


class SqlWeeklySeriesStore(WeeklySeriesStore):
    """Weekly series persisted to SQLite via SQLAlchemy."""

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = make_session_factory(engine)
        init_db(engine)

    @property
    def name(self) -> str:
        return "SqlWeeklySeriesStore"

    def load(self) -> list[PricePoint]:
        try:
            with session_scope(self._session_factory) as session:
                rows = session.execute(
                    select(WeeklyPrice).order_by(WeeklyPrice.week_date)
                ).scalars().all()
                series = [PricePoint(date=row.week_date, price=row.price) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error loading weekly prices: {e}")
            raise PersistenceError(self.name, f"Cannot read weekly prices: {e}") from e

        logger.info(f"Loaded {len(series)} weekly prices from {self._engine.url}")
        return series

    def save(self, series: Sequence[PricePoint]) -> None:
        try:
            with session_scope(self._session_factory) as session:
                session.execute(delete(WeeklyPrice))
                session.add_all(
                    WeeklyPrice(week_date=point.date, price=point.price) for point in series
                )
        except SQLAlchemyError as e:
            logger.error(f"Error saving weekly prices: {e}")
            raise PersistenceError(self.name, f"Cannot write weekly prices: {e}") from e

        logger.info(f"Saved {len(series)} weekly prices to database")

    def close(self) -> None:
        self._engine.dispose()
        logger.info("Weekly prices database closed")
