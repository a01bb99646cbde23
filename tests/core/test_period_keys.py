"""Period keys: bucket identities, day bounds, and pagination arithmetic.

Tests:
    - Every day of a Monday-Sunday week maps to that Monday
    - Weekly keys cross month and year boundaries
    - Keys use the UTC calendar date regardless of input offset
    - total_pages is ceil(total / limit), 0 for no rows
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from nekolog.core.domain_types import Granularity, Period
from nekolog.core.period_keys import (
    bucket_key, day_bounds, day_key, month_key, period_to_granularity,
    to_utc, total_pages, week_key, week_start,
)


def _at(day: str, hour: int = 12) -> datetime:
    return datetime.fromisoformat(day).replace(hour=hour, tzinfo=timezone.utc)


@pytest.mark.parametrize("offset", range(7))
def test_week_2024_01_08_maps_to_its_monday(offset):
    """Every day of the week maps to its Monday."""
    day = date(2024, 1, 8) + timedelta(days=offset)
    assert week_start(day) == date(2024, 1, 8)


def test_next_monday_starts_new_week():
    """The following Monday is a new key."""
    assert week_key(_at("2024-01-15")) == "2024-01-15"


def test_sunday_at_year_end_belongs_to_previous_monday():
    """Sunday 2023-12-31 belongs to the week of 2023-12-25."""
    assert week_key(_at("2023-12-31")) == "2023-12-25"


def test_new_year_monday_is_its_own_key():
    """Monday 2024-01-01 starts its own week."""
    assert week_key(_at("2024-01-01")) == "2024-01-01"


def test_week_crosses_month_boundary():
    """A week spanning two months keys on its Monday."""
    assert week_key(_at("2024-03-02")) == "2024-02-26"


def test_keys_use_utc_date():
    """Offsets are converted to the UTC date before keying."""
    tokyo = timezone(timedelta(hours=9))
    moment = datetime(2024, 1, 1, 3, 0, tzinfo=tokyo)  # 2023-12-31 18:00 UTC
    assert day_key(moment) == "2023-12-31"
    assert month_key(moment) == "2023-12"
    assert week_key(moment) == "2023-12-25"


def test_naive_datetime_is_taken_as_utc():
    """A naive datetime is read as UTC."""
    assert to_utc(datetime(2024, 5, 1, 10)) == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)


@pytest.mark.parametrize("granularity, expected", [
    (Granularity.DAILY, "2024-02-29"),
    (Granularity.WEEKLY, "2024-02-26"),
    (Granularity.MONTHLY, "2024-02"),
])
def test_bucket_key_dispatch(granularity, expected):
    """bucket_key picks the key function by granularity."""
    assert bucket_key(granularity, _at("2024-02-29")) == expected


@pytest.mark.parametrize("period, expected", [
    (Period.TODAY, Granularity.DAILY),
    (Period.WEEK, Granularity.WEEKLY),
    (Period.MONTH, Granularity.MONTHLY),
    (None, Granularity.DAILY),
])
def test_period_to_granularity(period, expected):
    """Public periods map to granularities; None means daily."""
    assert period_to_granularity(period) == expected


def test_day_bounds_cover_whole_utc_day():
    """Day bounds run from midnight to 23:59:59.999 UTC."""
    start, end = day_bounds(date(2024, 1, 15))
    assert start == datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert end == datetime(2024, 1, 15, 23, 59, 59, 999_000, tzinfo=timezone.utc)


@pytest.mark.parametrize("total, limit, expected", [
    (45, 20, 3),
    (40, 20, 2),
    (1, 100, 1),
    (0, 20, 0),
    (0, 1, 0),
])
def test_total_pages(total, limit, expected):
    """total_pages is the ceiling of total / limit."""
    assert total_pages(total, limit) == expected
