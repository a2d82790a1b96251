"""UTC datetime utilities."""

import calendar
from datetime import datetime, timedelta, timezone

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def add_months(moment: datetime, months: int) -> datetime:
    """Calendar month arithmetic; the day is clamped to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def hours_from(moment: datetime, hours: float) -> datetime:
    return moment + timedelta(hours=hours)


def days_between(start: datetime, end: datetime) -> int:
    """Whole days elapsed from ``start`` to ``end`` (floored, never negative)."""
    return max(0, int((end - start).total_seconds() // SECONDS_PER_DAY))


def hours_between(start: datetime, end: datetime) -> int:
    """Whole hours elapsed from ``start`` to ``end`` (floored, never negative)."""
    return max(0, int((end - start).total_seconds() // SECONDS_PER_HOUR))
