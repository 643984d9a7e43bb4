"""
JSON File Weekly Series Store

Keeps the weekly series in a single pretty-printed JSON array:
[{"date": "2024-01-01", "price": 42000.5}, ...]
"""

import json
import logging
import os
import tempfile
from typing import Sequence

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.base import PersistenceError
from btc_tracker.services.storage.interface import WeeklySeriesStore

logger = logging.getLogger(__name__)

_series_adapter = TypeAdapter(list[PricePoint])


def _fsync_directory(directory: str) -> None:
    """Flush a rename in `directory` to disk (POSIX only)."""
    if os.name != "posix":
        return
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class JsonWeeklySeriesStore(WeeklySeriesStore):
    """Weekly series persisted to a JSON file with write-then-replace saves."""

    def __init__(self, path: str):
        self._path = path

    @property
    def name(self) -> str:
        return "JsonWeeklySeriesStore"

    @property
    def path(self) -> str:
        return self._path

    def load(self) -> list[PricePoint]:
        if not os.path.exists(self._path):
            logger.info(f"No weekly prices file at {self._path}, starting empty")
            return []

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            series = _series_adapter.validate_python(raw)
        except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Error loading weekly prices from {self._path}: {e}")
            raise PersistenceError(
                self.name, f"Cannot read weekly prices: {e}", {"path": self._path}
            ) from e

        logger.info(f"Loaded {len(series)} weekly prices from {self._path}")
        return series

    def save(self, series: Sequence[PricePoint]) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        payload = _series_adapter.dump_python(list(series), mode="json")

        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=".weekly_prices.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(payload, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
            tmp_path = None
            _fsync_directory(directory)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            logger.error(f"Error saving weekly prices to {self._path}: {e}")
            raise PersistenceError(
                self.name, f"Cannot write weekly prices: {e}", {"path": self._path}
            ) from e

        logger.info(f"Saved {len(payload)} weekly prices to file")
