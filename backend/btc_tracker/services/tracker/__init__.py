"""
Tracker Service

CONTRACT:
    Input:  force_refresh flag
    Output: BitcoinDataResponse

RESPONSIBILITIES:
    - Load the persisted weekly series once and keep it in memory
    - Run refresh cycles one at a time (concurrent triggers are coalesced)
    - Compute the snapshot, persist weekly changes, cache the payload
"""

from btc_tracker.services.tracker.interface import TrackerServiceInterface
from btc_tracker.services.tracker.refresher import SnapshotRefresher
from btc_tracker.services.tracker.service import TrackerService
from btc_tracker.services.tracker.snapshot import SnapshotPersistenceError, compute_snapshot

__all__ = [
    "TrackerServiceInterface",
    "TrackerService",
    "SnapshotRefresher",
    "SnapshotPersistenceError",
    "compute_snapshot",
]
