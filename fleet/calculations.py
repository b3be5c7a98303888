"""Helper functions for maintenance due calculations."""

import re
from datetime import date
from typing import Any, Optional

from .dates import add_months, parse_flexible_date
from .status import Status

DUE_SOON_DAYS = 30

_WHOLE_NUMBER = re.compile(r"-?[0-9]+")


def _as_months(value: Any) -> Optional[int]:
    """Validity period as whole months, or None if it can't be used."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _WHOLE_NUMBER.fullmatch(value.strip()):
        return int(value.strip())
    return None


def resolve_filter_expiry(
    install_date: Any, validity_months: Any, manual_expiry_date: Any
) -> Optional[date]:
    """
    Resolve when the installed filter expires.

    - Manual expiry date (if it parses) always wins
    - Otherwise install date + validity months (a validity of 0 or less
      means no expiry is known)
    - Otherwise None, also when the result would fall outside the
      supported date range
    """
    manual = parse_flexible_date(manual_expiry_date)
    if manual is not None:
        return manual
    installed = parse_flexible_date(install_date)
    months = _as_months(validity_months)
    if installed is None or months is None or months <= 0:
        return None
    try:
        return add_months(installed, months)
    except (ValueError, OverflowError):
        return None


def check_status(
    days_remaining: Optional[int], soon_threshold: int = DUE_SOON_DAYS
) -> Status:
    """Map days remaining onto an urgency level."""
    if days_remaining is None:
        return Status.UNKNOWN
    if days_remaining < 0:
        return Status.OVERDUE
    if days_remaining < soon_threshold:
        return Status.DUE_SOON
    return Status.OK
