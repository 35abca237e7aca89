"""Calendar-month arithmetic used by the rent ledger.

Months are represented as ``date`` objects pinned to the first day of the
month. Normalizing before any arithmetic keeps month steps from overflowing
(adding one month to January 31 lands on February 1, never in March).
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime

from rent_ledger.exceptions import ValidationError

MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def month_start(value: date | datetime) -> date:
    """Return the first day of the month containing ``value``."""
    return date(value.year, value.month, 1)


def add_months(value: date | datetime, months: int) -> date:
    """Step ``months`` calendar months from the month containing ``value``.

    Parameters
    ----------
    value : date | datetime
        Any day in the starting month.
    months : int
        Number of months to step (may be negative).

    Returns
    -------
    date
        First day of the resulting month.
    """
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def months_between(start: date | datetime, end: date | datetime) -> int:
    """Count months in the inclusive range ``start..end`` (0 if reversed)."""
    count = (end.year * 12 + end.month) - (start.year * 12 + start.month) + 1
    return max(count, 0)


def month_range(start: date | datetime, end: date | datetime) -> list[date]:
    """List the first day of every month from ``start`` to ``end`` inclusive."""
    first = month_start(start)
    return [add_months(first, i) for i in range(months_between(start, end))]


def format_month(value: date | datetime) -> str:
    """Render a month as its ``YYYY-MM`` key."""
    return f"{value.year:04d}-{value.month:02d}"


def parse_month(key: str) -> date:
    """Parse a ``YYYY-MM`` key into the first day of that month.

    Raises
    ------
    ValidationError
        If ``key`` is not a valid month key.
    """
    match = MONTH_KEY_PATTERN.match(key.strip()) if isinstance(key, str) else None
    if match is None:
        raise ValidationError(f"Invalid month {key!r}; expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {key!r}; month must be 01-12")
    return date(year, month, 1)


def normalize_month(key: str) -> str:
    """Canonical ``YYYY-MM`` form of a month key accepted by ``parse_month``."""
    return format_month(parse_month(key))


def day_in_month(value: date | datetime, day: int) -> date:
    """Return ``day`` of the month containing ``value``, clamped to its last day."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return date(value.year, value.month, min(day, last_day))


def coerce_date(value: object) -> date | None:
    """Best-effort conversion of a stored value to a ``date``.

    Accepts ``date``, ``datetime`` and ISO-8601 strings (hosted backends
    return dates as text). Missing or malformed values yield ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def coerce_month(value: str | date | datetime | None, today: date) -> date:
    """Resolve a cutoff month argument, defaulting to the month of ``today``."""
    if value is None:
        return month_start(today)
    if isinstance(value, str):
        return parse_month(value)
    return month_start(value)
