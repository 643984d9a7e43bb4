import datetime as dt

from btc_tracker.schemas.market import PricePoint
from btc_tracker.services.weekly import aggregate_to_weekly, week_start
from conftest import MONDAY, make_daily


def test_week_start_is_monday() -> None:
    assert week_start(MONDAY) == MONDAY
    assert week_start(dt.date(2024, 1, 3)) == MONDAY
    # Sunday closes the week that began on the preceding Monday
    assert week_start(dt.date(2024, 1, 7)) == MONDAY
    assert week_start(dt.date(2024, 1, 8)) == dt.date(2024, 1, 8)


def test_buckets_are_dated_by_first_observed_day() -> None:
    # Wednesday through the following Tuesday
    daily = make_daily(dt.date(2024, 1, 3), [10, 20, 30, 40, 50, 100, 101])
    assert aggregate_to_weekly(daily) == [
        PricePoint(date=dt.date(2024, 1, 3), price=30.0),
        PricePoint(date=dt.date(2024, 1, 8), price=100.5),
    ]


def test_bucket_mean_is_rounded_to_cents() -> None:
    weekly = aggregate_to_weekly(make_daily(MONDAY, [1.0, 2.0, 2.0]))
    assert weekly == [PricePoint(date=MONDAY, price=1.67)]


def test_weeks_without_data_are_skipped() -> None:
    daily = [
        PricePoint(date=dt.date(2024, 1, 1), price=1.0),
        PricePoint(date=dt.date(2024, 1, 15), price=3.0),
    ]
    assert [p.date for p in aggregate_to_weekly(daily)] == [
        dt.date(2024, 1, 1),
        dt.date(2024, 1, 15),
    ]


def test_aggregation_is_deterministic() -> None:
    daily = make_daily(MONDAY, range(1, 40))
    assert aggregate_to_weekly(daily) == aggregate_to_weekly(list(daily))
    assert len(aggregate_to_weekly(daily)) == 6


def test_empty_daily_series() -> None:
    assert aggregate_to_weekly([]) == []
