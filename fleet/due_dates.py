"""
Due-date aggregation for a single vehicle record.

Takes the raw record (a Vehicle or a mapping of record keys) and derives
a days-remaining figure for every maintenance category:

- Filter replacement: manual expiry, else install date + validity months
- Annual inspection: the stored date is itself the due date
- Everything in ``SCHEDULE``: source date + fixed interval

Missing or malformed dates give None for that category only.
"""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from .calculations import DUE_SOON_DAYS, check_status, resolve_filter_expiry
from .dates import days_from_today, parse_flexible_date
from .maintenance_due import MaintenanceDue
from .schedule import SCHEDULE
from .vehicle import Vehicle

FILTER_EXPIRY_KEY = "filterExpiryDate"
FILTER_KEY = "daysToFilterReplacement"
INSPECTION_KEY = "daysToAnnualInspection"

ENRICHED_KEYS = (FILTER_EXPIRY_KEY, FILTER_KEY, INSPECTION_KEY) + tuple(
    entry.key for entry in SCHEDULE
)

RecordLike = Union[Vehicle, Mapping[str, Any]]


def _record_fields(record: RecordLike) -> Dict[str, Any]:
    """Copy of the record's fields with dates rendered as ISO strings."""
    if isinstance(record, Vehicle):
        return record.to_dict()
    fields = dict(record)
    for key, value in fields.items():
        if isinstance(value, date):
            fields[key] = value.isoformat()
    return fields


def calculate_maintenance_due(
    record: RecordLike,
    today: Optional[date] = None,
    due_soon_days: int = DUE_SOON_DAYS,
) -> List[MaintenanceDue]:
    """
    Calculate every maintenance category for one record.

    Order: filter replacement, annual inspection, then ``SCHEDULE`` order.
    ``today`` is read once so all categories agree on the same day.
    """
    if today is None:
        today = date.today()
    fields = _record_fields(record)
    results = []

    filter_expiry = resolve_filter_expiry(
        fields.get("filterInstallDate"),
        fields.get("filterValidityMonths"),
        fields.get("filterManualExpiryDate"),
    )
    filter_days = days_from_today(filter_expiry, today)
    results.append(
        MaintenanceDue(
            key=FILTER_KEY,
            label="Filter replacement",
            status=check_status(filter_days, due_soon_days),
            source_date=parse_flexible_date(fields.get("filterInstallDate")),
            due_date=filter_expiry,
            days_remaining=filter_days,
            interval=_filter_interval(fields.get("filterValidityMonths")),
        )
    )

    inspection = parse_flexible_date(fields.get("annualInspectionDate"))
    inspection_days = days_from_today(inspection, today)
    results.append(
        MaintenanceDue(
            key=INSPECTION_KEY,
            label="Annual inspection",
            status=check_status(inspection_days, due_soon_days),
            source_date=inspection,
            due_date=inspection,
            days_remaining=inspection_days,
        )
    )

    for entry in SCHEDULE:
        source = parse_flexible_date(fields.get(entry.source_field))
        due = entry.due_date(source)
        days = days_from_today(due, today)
        results.append(
            MaintenanceDue(
                key=entry.key,
                label=entry.label,
                status=check_status(days, due_soon_days),
                source_date=source,
                due_date=due,
                days_remaining=days,
                interval=entry.interval_display,
            )
        )

    return results


def _filter_interval(validity_months: Any) -> Optional[str]:
    if validity_months is None:
        return None
    return f"{validity_months} months"


def enrich_record(record: RecordLike, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Return the record's fields plus every computed due field.

    The result is a new plain dict ready for ``json.dumps``: dates are ISO
    strings, day counts are ints, and unknowns are None. The input is not
    modified.
    """
    enriched = _record_fields(record)
    dues = calculate_maintenance_due(record, today)
    filter_due = dues[0]
    enriched[FILTER_EXPIRY_KEY] = (
        filter_due.due_date.isoformat() if filter_due.due_date else None
    )
    for due in dues:
        enriched[due.key] = due.days_remaining
    return enriched
