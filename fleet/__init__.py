"""
Fleet and equipment maintenance tracking.

This package provides the records and calculations for a maintenance office:
- Firm, Location, Vehicle, ServiceOrder: persisted records
- Fleet: aggregate of all records with lookups and order summaries
- SCHEDULE: fixed recurrence intervals per maintenance category
- enrich_record / calculate_maintenance_due: derived due dates and days remaining
- Status / VehicleStatus: urgency levels and vehicle state
"""

from .status import Status, VehicleStatus
from .dates import add_months, add_years, days_from_today, parse_flexible_date
from .calculations import check_status, resolve_filter_expiry
from .schedule import SCHEDULE, IntervalUnit, MaintenanceScheduleEntry, get_entry
from .maintenance_due import MaintenanceDue
from .firm import Firm
from .location import Location
from .service_order import ServiceOrder
from .vehicle import Vehicle
from .due_dates import ENRICHED_KEYS, calculate_maintenance_due, enrich_record
from .fleet import Fleet, OrderSummary
from .errors import ConfigError, FleetError, RecordNotFoundError, RecordValidationError
from .config import Settings
from .loader import (
    load_fleet,
    create_fleet_file,
    add_firm,
    update_firm,
    delete_firm,
    add_location,
    update_location,
    delete_location,
    add_vehicle,
    update_vehicle,
    set_vehicle_field,
    delete_vehicle,
    add_service_order,
    update_service_order,
    delete_service_order,
)

__all__ = [
    "Status",
    "VehicleStatus",
    "add_months",
    "add_years",
    "days_from_today",
    "parse_flexible_date",
    "check_status",
    "resolve_filter_expiry",
    "SCHEDULE",
    "IntervalUnit",
    "MaintenanceScheduleEntry",
    "get_entry",
    "MaintenanceDue",
    "Firm",
    "Location",
    "ServiceOrder",
    "Vehicle",
    "ENRICHED_KEYS",
    "calculate_maintenance_due",
    "enrich_record",
    "Fleet",
    "OrderSummary",
    "ConfigError",
    "FleetError",
    "RecordNotFoundError",
    "RecordValidationError",
    "Settings",
    "load_fleet",
    "create_fleet_file",
    "add_firm",
    "update_firm",
    "delete_firm",
    "add_location",
    "update_location",
    "delete_location",
    "add_vehicle",
    "update_vehicle",
    "set_vehicle_field",
    "delete_vehicle",
    "add_service_order",
    "update_service_order",
    "delete_service_order",
]
