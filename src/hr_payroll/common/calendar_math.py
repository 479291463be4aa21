"""Pure calendar helpers shared by attendance, payroll and leave rules."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple

from ..core.exceptions import InvalidRangeError
from .validators import require_month

SATURDAY = 5
SUNDAY = 6


def days_in_month(year: int, month: int) -> int:
    require_month(year, month)
    return calendar.monthrange(int(year), int(month))[1]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of the month."""
    last_day = days_in_month(year, month)
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def is_weekend(d: date) -> bool:
    return d.weekday() in (SATURDAY, SUNDAY)


def inclusive_day_count(start: date, end: date) -> int:
    if end < start:
        raise InvalidRangeError(f"end date {end.isoformat()} is before start date {start.isoformat()}")
    return (end - start).days + 1


def iter_days(start: date, end: date) -> Iterator[date]:
    for offset in range(inclusive_day_count(start, end)):
        yield start + timedelta(days=offset)


def weekend_days_in_month(year: int, month: int) -> int:
    first, last = month_bounds(year, month)
    return sum(1 for d in iter_days(first, last) if is_weekend(d))


def clip_range(start: date, end: date, lower: date, upper: date) -> Optional[Tuple[date, date]]:
    """Intersect [start, end] with [lower, upper]; None when they do not meet."""
    clipped_start = max(start, lower)
    clipped_end = min(end, upper)
    if clipped_end < clipped_start:
        return None
    return clipped_start, clipped_end
