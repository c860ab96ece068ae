from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now()


def as_date(value: date | datetime) -> date:
    """Drop the time-of-day part; leave ranges are compared by date only."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    if not 1 <= int(month) <= 12:
        raise ValidationError(f"Invalid month: {month}")
    return calendar.monthrange(int(year), int(month))[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = days_in_month(year, month)
    return date(int(year), int(month), 1), date(int(year), int(month), last)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, both inclusive."""
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def inclusive_day_count(start: date | datetime, end: date | datetime) -> int:
    return (as_date(end) - as_date(start)).days + 1
