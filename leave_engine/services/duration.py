from __future__ import annotations

import re
from datetime import date, timedelta
from typing import TYPE_CHECKING

from leave_engine.exceptions import InvalidDateFormat

if TYPE_CHECKING:
    from collections.abc import Iterator

HALF_DAY = 0.5

_SATURDAY = 5

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` calendar date.

    Only the extended calendar form is accepted; basic (``20260302``) and
    ISO week (``2026-W10-1``) forms are rejected.
    """
    text = value.strip() if isinstance(value, str) else ""
    if not _ISO_DATE.fullmatch(text):
        raise InvalidDateFormat(value)
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidDateFormat(value) from None


def count_weekdays(start_date: date, end_date: date) -> int:
    """Count Monday-Friday dates in the inclusive range. Empty ranges count zero."""
    if end_date < start_date:
        return 0
    total_days = (end_date - start_date).days + 1
    full_weeks, extra = divmod(total_days, 7)
    count = full_weeks * 5
    weekday = start_date.weekday()
    for offset in range(extra):
        if (weekday + offset) % 7 < _SATURDAY:
            count += 1
    return count


def iter_weekdays(start_date: date, end_date: date) -> Iterator[date]:
    """Yield each Monday-Friday date in the inclusive range."""
    current = start_date
    one_day = timedelta(days=1)
    while current <= end_date:
        if current.weekday() < _SATURDAY:
            yield current
        current += one_day


def leave_days(start_date: date, end_date: date, *, is_half_day: bool) -> float:
    """Days consumed by a request: 0.5 for a half day, else the weekday count."""
    if is_half_day:
        return HALF_DAY
    return float(count_weekdays(start_date, end_date))
