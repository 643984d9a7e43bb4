import datetime as dt
import json
import os
import stat
from pathlib import Path

import pytest
from pytest import MonkeyPatch

from btc_tracker.core.config import Settings
from btc_tracker.db import create_db_engine
from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.base import PersistenceError
from btc_tracker.services.storage import json_store as json_store_module
from btc_tracker.services.storage import (
    JsonWeeklySeriesStore,
    SqlWeeklySeriesStore,
    create_weekly_store,
)

SERIES = [
    PricePoint(date=dt.date(2024, 1, 1), price=42_000.5),
    PricePoint(date=dt.date(2024, 1, 8), price=43_210.0),
]


def test_json_store_round_trip(tmp_path: Path) -> None:
    store = JsonWeeklySeriesStore(str(tmp_path / "data" / "weekly_prices.json"))
    store.save(SERIES)
    assert store.load() == SERIES


def test_json_store_file_format(tmp_path: Path) -> None:
    path = tmp_path / "weekly_prices.json"
    JsonWeeklySeriesStore(str(path)).save(SERIES)
    assert json.loads(path.read_text()) == [
        {"date": "2024-01-01", "price": 42000.5},
        {"date": "2024-01-08", "price": 43210.0},
    ]
    assert [p.name for p in tmp_path.iterdir()] == ["weekly_prices.json"]


def test_json_store_missing_file_is_empty(tmp_path: Path) -> None:
    assert JsonWeeklySeriesStore(str(tmp_path / "missing.json")).load() == []


def test_json_store_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "weekly_prices.json"
    path.write_text("{not json")
    with pytest.raises(PersistenceError):
        JsonWeeklySeriesStore(str(path)).load()


def test_json_store_save_failure_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = JsonWeeklySeriesStore(str(blocker / "weekly_prices.json"))
    with pytest.raises(PersistenceError):
        store.save(SERIES)


def test_sql_store_round_trip(tmp_path: Path) -> None:
    store = SqlWeeklySeriesStore(create_db_engine(str(tmp_path / "btc.db")))
    assert store.load() == []

    store.save(SERIES)
    assert store.load() == SERIES

    store.save(SERIES[:1])
    assert store.load() == SERIES[:1]
    store.close()


def test_create_weekly_store_by_backend(tmp_path: Path) -> None:
    json_store = create_weekly_store(Settings(data_dir=str(tmp_path)))
    assert isinstance(json_store, JsonWeeklySeriesStore)
    assert json_store.path == str(tmp_path / "weekly_prices.json")

    sql_store = create_weekly_store(
        Settings(data_dir=str(tmp_path), weekly_store_backend="sqlite")
    )
    assert isinstance(sql_store, SqlWeeklySeriesStore)
    sql_store.close()

    with pytest.raises(ValueError):
        create_weekly_store(Settings(weekly_store_backend="csv"))


@pytest.mark.skipif(os.name != "posix", reason="directory fsync is POSIX only")
def test_json_store_flushes_directory_after_replace(
    tmp_path: Path, monkeypatch: MonkeyPatch
) -> None:
    synced: list[str] = []
    real_fsync = os.fsync

    def recording_fsync(fd: int) -> None:
        synced.append("dir" if stat.S_ISDIR(os.fstat(fd).st_mode) else "file")
        real_fsync(fd)

    monkeypatch.setattr(json_store_module.os, "fsync", recording_fsync)
    JsonWeeklySeriesStore(str(tmp_path / "weekly_prices.json")).save(SERIES)

    assert synced == ["file", "dir"]


def test_json_store_close_keeps_file(tmp_path: Path) -> None:
    store = JsonWeeklySeriesStore(str(tmp_path / "weekly_prices.json"))
    store.save(SERIES)
    store.close()
    assert store.load() == SERIES
