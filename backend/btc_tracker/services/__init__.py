"""
BTC Tracker Services

Service layer containing all business logic.
Each service has a defined interface (contract) and implementation.
"""

from btc_tracker.services.base import BaseService

__all__ = ["BaseService"]
