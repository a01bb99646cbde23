"""Period Keys: canonical bucket identities and date arithmetic for statistics.

Invariants:
    - Keys are computed from the UTC calendar date of the instant
    - daily -> "YYYY-MM-DD", monthly -> "YYYY-MM",
      weekly -> "YYYY-MM-DD" of the Monday starting the ISO week
    - Weekly keys cross month and year boundaries (2023-12-31 -> "2023-12-25")
    - total_pages(0, n) == 0 for every n

Design Decisions:
    - These functions are the reference definition; the SQL expressions in
      infrastructure/period_sql.py must produce identical strings and are
      tested against them
"""

import math
from datetime import date, datetime, time, timedelta, timezone

from nekolog.core.domain_types import Granularity, Period

EPOCH_START = datetime(1970, 1, 1, tzinfo=timezone.utc)
FAR_FUTURE = datetime(9999, 12, 31, 23, 59, 59, 999_000, tzinfo=timezone.utc)


def to_utc(moment: datetime) -> datetime:
    """Normalize to aware UTC. Naive values are taken to already be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def day_key(moment: datetime) -> str:
    return to_utc(moment).date().isoformat()


def month_key(moment: datetime) -> str:
    return day_key(moment)[:7]


def week_start(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    weekday_from_sunday = day.isoweekday() % 7  # 0=Sunday .. 6=Saturday
    return day - timedelta(days=(weekday_from_sunday + 6) % 7)


def week_key(moment: datetime) -> str:
    return week_start(to_utc(moment).date()).isoformat()


def bucket_key(granularity: Granularity, moment: datetime) -> str:
    match granularity:
        case Granularity.DAILY:
            return day_key(moment)
        case Granularity.WEEKLY:
            return week_key(moment)
        case Granularity.MONTHLY:
            return month_key(moment)
    raise ValueError(f"Unknown granularity: {granularity!r}")


def period_to_granularity(period: Period | None) -> Granularity:
    """Map the public period vocabulary; anything unset means daily."""
    if period == Period.WEEK:
        return Granularity.WEEKLY
    if period == Period.MONTH:
        return Granularity.MONTHLY
    return Granularity.DAILY


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last millisecond of `day` in UTC (both inclusive)."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(day, time(23, 59, 59, 999_000), tzinfo=timezone.utc)
    return start, end


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def total_pages(total: int, limit: int) -> int:
    if total <= 0:
        return 0
    return math.ceil(total / limit)
