"""Calendar-aware date helpers used by the due-date calculations."""

from datetime import date, datetime
from typing import Any, Optional

from dateutil.relativedelta import relativedelta


def parse_flexible_date(value: Any) -> Optional[date]:
    """
    Resolve a stored date value to a ``date``.

    Accepts ``date``/``datetime`` objects and ISO-8601 strings
    (``2024-01-15`` or ``2024-01-15T08:30:00``). Anything else,
    including empty or malformed strings, gives None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def add_months(start: date, months: int) -> date:
    """Add calendar months; the day is clamped to the target month's length."""
    return start + relativedelta(months=months)


def add_years(start: date, years: int) -> date:
    """Add calendar years; Feb 29 becomes Feb 28 in non-leap years."""
    return start + relativedelta(years=years)


def days_from_today(value: Any, today: Optional[date] = None) -> Optional[int]:
    """Signed days from today until ``value`` (negative = overdue)."""
    target = parse_flexible_date(value)
    if target is None:
        return None
    if today is None:
        today = date.today()
    return (target - today).days
