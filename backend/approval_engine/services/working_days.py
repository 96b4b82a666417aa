"""Calendar arithmetic for leave sizing and the auto-reject sweep."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

_SATURDAY = 5


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def is_weekend(day: date) -> bool:
    return day.weekday() >= _SATURDAY


def count_working_days(
    start: date | datetime,
    end: date | datetime,
    is_holiday: Callable[[date], bool] | None = None,
) -> int:
    """Count working days from ``start`` to ``end``, both inclusive.

    Datetimes are reduced to their date. Saturdays, Sundays and any day for
    which ``is_holiday`` returns True are skipped. Returns 0 when ``end`` is
    before ``start``.
    """
    current = _as_date(start)
    last = _as_date(end)
    count = 0
    while current <= last:
        if not is_weekend(current) and not (is_holiday is not None and is_holiday(current)):
            count += 1
        current += timedelta(days=1)
    return count


def calendar_days_inclusive(from_date: date, to_date: date) -> int:
    """Number of calendar days in ``[from_date, to_date]``; 0 for a backwards range."""
    if to_date < from_date:
        return 0
    return (to_date - from_date).days + 1
