"""
Background snapshot refresher.

Runs a refresh cycle every `refresh_interval_seconds` so the dashboard
always reads a warm cache.
"""

import asyncio
import logging
from typing import Optional

from btc_tracker.services.base import ServiceError
from btc_tracker.services.tracker.interface import TrackerServiceInterface

logger = logging.getLogger(__name__)


class SnapshotRefresher:
    """
    Periodic refresh loop.

    Usage:
        refresher = SnapshotRefresher(service, interval_seconds=300)
        await refresher.start()
        ...
        await refresher.stop()
    """

    def __init__(self, service: TrackerServiceInterface, interval_seconds: float):
        self._service = service
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self._cycles = 0
        self._failures = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def failures(self) -> int:
        return self._failures

    async def start(self) -> None:
        if self._running:
            logger.warning("Snapshot refresher already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._refresh_loop())
        logger.info(f"Snapshot refresher started (every {self._interval}s)")

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Snapshot refresher stopped")

    async def _refresh_loop(self) -> None:
        while self._running:
            try:
                await self._service.refresh()
            except ServiceError as e:
                self._failures += 1
                logger.error(f"Scheduled refresh failed: {e}")
            except Exception:
                self._failures += 1
                logger.exception("Unexpected error in scheduled refresh")
            finally:
                self._cycles += 1

            await asyncio.sleep(self._interval)
