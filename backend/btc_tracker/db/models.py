"""
SQLAlchemy models for the BTC Tracker database.

Uses SQLite for local persistence of the weekly price series.
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    Integer,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class WeeklyPrice(Base):
    """
    One week of the persisted weekly series.
    `week_date` is the first observed day of the week's bucket.
    """
    __tablename__ = "weekly_prices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    week_date = Column(Date, nullable=False, unique=True, index=True)
    price = Column(Float, nullable=False)
    saved_at = Column(DateTime, default=datetime.utcnow)
