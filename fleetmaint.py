#!/usr/bin/env python3
"""
Command-line front end for the fleet maintenance office.

Commands:
  status        - Show which maintenance is overdue, due soon, or OK
  vehicles      - List vehicles with filter and inspection countdowns
  show          - Show one vehicle with every computed due field
  orders        - View service orders (with totals)
  log           - Add a service order for a vehicle
  firms         - List firms
  locations     - List locations
  schedule      - List the fixed maintenance intervals
  add-firm      - Add a firm
  add-location  - Add a location
  add-vehicle   - Add a vehicle
  set           - Set (or clear) one field of a vehicle
  delete        - Delete a firm, location, vehicle or service order
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import Dict, List, Optional

from fleet import (
    SCHEDULE,
    Firm,
    Fleet,
    FleetError,
    Location,
    MaintenanceDue,
    RecordNotFoundError,
    RecordValidationError,
    ServiceOrder,
    Settings,
    Status,
    Vehicle,
    VehicleStatus,
    add_firm,
    add_location,
    add_service_order,
    add_vehicle,
    calculate_maintenance_due,
    delete_firm,
    delete_location,
    delete_service_order,
    delete_vehicle,
    enrich_record,
    load_fleet,
    parse_flexible_date,
    set_vehicle_field,
)

_logger = logging.getLogger("fleetmaint")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_days(days: Optional[int]) -> str:
    """Format days remaining for display (e.g., '3mo 15d' or '-2mo 5d')."""
    if days is None:
        return "-"
    sign = "-" if days < 0 else ""
    days = abs(days)
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def format_money(value: Optional[float]) -> str:
    """Format a monetary value for display."""
    return f"{value:,.2f}" if value is not None else "-"


def format_date(value: Optional[date]) -> str:
    """Format a date for display."""
    return value.isoformat() if value is not None else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _find_vehicle(fleet: Fleet, ref: str) -> Vehicle:
    vehicle = fleet.find_vehicle(ref)
    if vehicle is None:
        raise RecordNotFoundError("Vehicle", ref)
    return vehicle


def _firm_name(fleet: Fleet, firm_id: Optional[int]) -> str:
    firm = fleet.get_firm(firm_id) if firm_id is not None else None
    return firm.name if firm else "-"


def _location_name(fleet: Fleet, location_id: Optional[int]) -> str:
    location = fleet.get_location(location_id) if location_id is not None else None
    return location.name if location else "-"


# =============================================================================
# Status command
# =============================================================================


def make_due_table(dues: List[MaintenanceDue]) -> List[List[str]]:
    """Convert computed maintenance categories to table rows."""
    rows = []
    for due in dues:
        rows.append(
            [
                due.label,
                format_date(due.source_date),
                due.interval or "-",
                format_date(due.due_date),
                str(due.days_remaining) if due.days_remaining is not None else "-",
                format_days(due.days_remaining),
            ]
        )
    return rows


DUE_HEADERS = ["Maintenance", "Last done", "Interval", "Due", "Days", "Remaining"]


def cmd_status(args, settings: Settings):
    """Show which maintenance is overdue, due soon, or OK."""
    fleet = load_fleet(args.fleet_file)
    today = settings.current_date()

    if args.vehicle:
        vehicles = [_find_vehicle(fleet, args.vehicle)]
    else:
        vehicles = fleet.filter_vehicles(firm_id=args.firm, location_id=args.location)

    print(f"Date: {today.isoformat()}")
    print(f"Vehicles: {len(vehicles)}")
    print()

    labels = [
        (Status.OVERDUE, "OVERDUE"),
        (Status.DUE_SOON, f"DUE SOON (within {settings.due_soon_days} days)"),
        (Status.OK, "OK"),
    ]
    for vehicle in vehicles:
        dues = calculate_maintenance_due(vehicle, today, settings.due_soon_days)
        if args.due_only:
            dues = [d for d in dues if d.is_due]
            if not dues:
                continue

        print(f"== {vehicle.display_name}")
        print(
            f"   Firm: {_firm_name(fleet, vehicle.firm_id)}"
            f" | Location: {_location_name(fleet, vehicle.location_id)}"
            f" | Status: {vehicle.status.value}"
        )
        for status, label in labels:
            group = sorted(
                [d for d in dues if d.status == status],
                key=lambda d: d.days_remaining,
            )
            if group:
                print(f"{label}:")
                rows = make_due_table(group)
                print(tabulate(rows, headers=DUE_HEADERS, tablefmt="simple"))
        unknown = [d for d in dues if d.status == Status.UNKNOWN]
        if unknown and not args.due_only:
            print("NOT SCHEDULED (no date recorded):")
            for due in unknown:
                print(f"  {due.label}")
        print()

    return 0


# =============================================================================
# Vehicle commands
# =============================================================================


def make_vehicle_table(
    fleet: Fleet, enriched: List[Dict], vehicles: List[Vehicle]
) -> List[List[str]]:
    """Convert vehicles and their enriched records to table rows."""
    rows = []
    for vehicle, record in zip(vehicles, enriched):
        rows.append(
            [
                str(vehicle.id),
                truncate(vehicle.name),
                vehicle.plate or "-",
                _firm_name(fleet, vehicle.firm_id),
                _location_name(fleet, vehicle.location_id),
                vehicle.status.value,
                record["filterExpiryDate"] or "-",
                format_days(record["daysToFilterReplacement"]),
                format_days(record["daysToAnnualInspection"]),
            ]
        )
    return rows


def cmd_vehicles(args, settings: Settings):
    """List vehicles with filter and inspection countdowns."""
    fleet = load_fleet(args.fleet_file)
    today = settings.current_date()

    status = VehicleStatus(args.status) if args.status else None
    vehicles = fleet.filter_vehicles(
        firm_id=args.firm, location_id=args.location, status=status
    )
    if not vehicles:
        print("No vehicles found.")
        return 0

    enriched = [enrich_record(v, today) for v in vehicles]
    headers = [
        "ID", "Name", "Plate", "Firm", "Location", "Status",
        "Filter expires", "Filter", "Inspection",
    ]
    rows = make_vehicle_table(fleet, enriched, vehicles)
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_show(args, settings: Settings):
    """Show one vehicle with every computed due field."""
    fleet = load_fleet(args.fleet_file)
    vehicle = _find_vehicle(fleet, args.vehicle)
    today = settings.current_date()

    if args.json:
        print(json.dumps(enrich_record(vehicle, today), indent=2, ensure_ascii=False))
        return 0

    print(f"Vehicle: {vehicle.display_name}")
    print(f"Firm: {_firm_name(fleet, vehicle.firm_id)}")
    print(f"Location: {_location_name(fleet, vehicle.location_id)}")
    print(f"Status: {vehicle.status.value}")
    if vehicle.trailer_plate:
        print(f"Trailer plate: {vehicle.trailer_plate}")
    if vehicle.vessel_plate_no:
        print(f"Vessel plate: {vehicle.vessel_plate_no}")
    if vehicle.sensor_technology:
        print(f"Sensor: {vehicle.sensor_technology}")
    if vehicle.filter_type_plate_no:
        print(f"Filter type / plate: {vehicle.filter_type_plate_no}")
    if vehicle.contact_info:
        print(f"Contact: {vehicle.contact_info}")
    if vehicle.notes:
        print(f"Notes: {vehicle.notes}")
    print()

    dues = calculate_maintenance_due(vehicle, today, settings.due_soon_days)
    print(tabulate(make_due_table(dues), headers=DUE_HEADERS, tablefmt="simple"))
    return 0


def cmd_add_vehicle(args, settings: Settings):
    """Add a vehicle."""
    vehicle = Vehicle(
        id=None,
        name=args.name,
        firm_id=args.firm,
        plate=args.plate,
        location_id=args.location,
        status=VehicleStatus(args.status),
        trailer_plate=args.trailer_plate,
        filter_install_date=args.filter_installed,
        filter_validity_months=args.filter_months,
        annual_inspection_date=args.inspection,
        notes=args.notes,
    )
    for value, label in (
        (args.filter_installed, "--filter-installed"),
        (args.inspection, "--inspection"),
    ):
        if value and parse_flexible_date(value) is None:
            print(f"Error: {label} must be a date (YYYY-MM-DD)")
            return 1

    if args.dry_run:
        print(f"Would add vehicle: {vehicle.display_name}")
        print("(dry run - no changes made)")
        return 0

    vehicle_id = add_vehicle(args.fleet_file, vehicle)
    print(f"Added vehicle {vehicle_id}: {vehicle.display_name}")
    return 0


def cmd_set(args, settings: Settings):
    """Set (or clear) one field of a vehicle."""
    fleet = load_fleet(args.fleet_file)
    vehicle = _find_vehicle(fleet, args.vehicle)
    value = args.value

    print(f"Vehicle: {vehicle.display_name}")
    print(f"  {args.field} = {value if value not in (None, '') else '(cleared)'}")

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    set_vehicle_field(args.fleet_file, vehicle.id, args.field, value)
    print("Vehicle updated.")
    return 0


# =============================================================================
# Service order commands
# =============================================================================


def make_order_table(fleet: Fleet, orders: List[ServiceOrder]) -> List[List[str]]:
    """Convert service orders to table rows."""
    rows = []
    for order in orders:
        vehicle = fleet.get_vehicle(order.vehicle_id)
        rows.append(
            [
                str(order.id),
                order.date,
                vehicle.plate if vehicle else f"#{order.vehicle_id}",
                order.order_number or "-",
                truncate(order.description),
                format_money(order.value),
                "yes" if order.working else "no",
                truncate(order.notes),
            ]
        )
    return rows


def cmd_orders(args, settings: Settings):
    """View service orders (with totals)."""
    for value, label in ((args.since, "--since"), (args.until, "--until")):
        if value and parse_flexible_date(value) is None:
            print(f"Error: {label} must be a date (YYYY-MM-DD)")
            return 1

    fleet = load_fleet(args.fleet_file)

    vehicle_id = None
    if args.vehicle:
        vehicle = _find_vehicle(fleet, args.vehicle)
        vehicle_id = vehicle.id
        print(f"Vehicle: {vehicle.display_name}")

    orders = fleet.get_orders(vehicle_id, since=args.since, until=args.until)
    summary = fleet.order_summary(vehicle_id, since=args.since, until=args.until)

    print(f"Service orders: {summary.count}")
    if args.since or args.until:
        print(f"Period: {args.since or '...'} to {args.until or '...'}")
    if summary.count:
        print(f"First: {summary.first_date}  Last: {summary.last_date}")
    if summary.total_value > 0:
        print(f"Total value: {format_money(summary.total_value)}")
    print()

    if not orders:
        print("No service orders found.")
        return 0

    headers = [
        "ID", "Date", "Vehicle", "Order no.", "Description", "Value", "Working", "Notes",
    ]
    print(tabulate(make_order_table(fleet, orders), headers=headers, tablefmt="simple"))
    return 0


def cmd_log(args, settings: Settings):
    """Add a service order for a vehicle."""
    fleet = load_fleet(args.fleet_file)
    vehicle = _find_vehicle(fleet, args.vehicle)

    order_date = args.date or settings.current_date().isoformat()
    if parse_flexible_date(order_date) is None:
        print("Error: --date must be a date (YYYY-MM-DD)")
        return 1

    order = ServiceOrder(
        id=None,
        vehicle_id=vehicle.id,
        date=order_date,
        description=args.description,
        order_number=args.order_number,
        materials=args.materials,
        value=args.value,
        working=not args.faulty,
        notes=args.notes,
    )

    print(f"Adding service order to {args.fleet_file}:")
    print(f"  Vehicle:     {vehicle.display_name}")
    print(f"  Date:        {order.date}")
    print(f"  Description: {order.description}")
    if order.order_number:
        print(f"  Order no.:   {order.order_number}")
    if order.materials:
        print(f"  Materials:   {order.materials}")
    if order.value is not None:
        print(f"  Value:       {format_money(order.value)}")
    if not order.working:
        print("  Working:     no")
    if order.notes:
        print(f"  Notes:       {order.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_service_order(args.fleet_file, order)
    print("Service order saved.")
    return 0


# =============================================================================
# Firms, locations, schedule
# =============================================================================


def cmd_firms(args, settings: Settings):
    """List firms."""
    fleet = load_fleet(args.fleet_file)
    rows = []
    for firm in sorted(fleet.firms, key=lambda f: f.name):
        count = sum(1 for v in fleet.vehicles if v.firm_id == firm.id)
        rows.append([str(firm.id), firm.name, firm.contact or "-", str(count)])
    headers = ["ID", "Firm", "Contact", "Vehicles"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_locations(args, settings: Settings):
    """List locations."""
    fleet = load_fleet(args.fleet_file)
    rows = []
    for location in sorted(fleet.locations, key=lambda loc: loc.name):
        count = sum(1 for v in fleet.vehicles if v.location_id == location.id)
        rows.append(
            [str(location.id), location.name, location.address or "-", str(count)]
        )
    headers = ["ID", "Location", "Address", "Vehicles"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_schedule(args, settings: Settings):
    """List the fixed maintenance intervals."""
    rows = [
        [
            "Filter replacement",
            "filterInstallDate",
            "filterValidityMonths (or manual expiry)",
        ],
        ["Annual inspection", "annualInspectionDate", "due on the date itself"],
    ]
    for entry in SCHEDULE:
        rows.append([entry.label, entry.source_field, entry.interval_display])
    headers = ["Maintenance", "Source field", "Interval"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_add_firm(args, settings: Settings):
    """Add a firm."""
    firm_id = add_firm(args.fleet_file, Firm(None, args.name, args.contact))
    print(f"Added firm {firm_id}: {args.name}")
    return 0


def cmd_add_location(args, settings: Settings):
    """Add a location."""
    location = Location(None, args.name, args.address)
    location_id = add_location(args.fleet_file, location)
    print(f"Added location {location_id}: {args.name}")
    return 0


def cmd_delete(args, settings: Settings):
    """Delete a firm, location, vehicle or service order."""
    handlers = {
        "firm": delete_firm,
        "location": delete_location,
        "vehicle": delete_vehicle,
        "order": delete_service_order,
    }
    if args.dry_run:
        print(f"Would delete {args.kind} {args.id}")
        print("(dry run - no changes made)")
        return 0
    handlers[args.kind](args.fleet_file, args.id)
    print(f"Deleted {args.kind} {args.id}.")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet and equipment maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/fleet.yaml status
  %(prog)s data/fleet.yaml status --due-only
  %(prog)s data/fleet.yaml vehicles --firm 1
  %(prog)s data/fleet.yaml show ZG-1234-AB --json
  %(prog)s data/fleet.yaml set ZG-1234-AB hoseHd63Date 2015-03-10
  %(prog)s data/fleet.yaml log ZG-1234-AB "Filter replaced" --value 120
  %(prog)s data/fleet.yaml orders --since 2024-01-01
  %(prog)s --today 2025-03-15 data/fleet.yaml status
""",
    )
    parser.add_argument("fleet_file", type=Path, help="Path to fleet YAML file")
    parser.add_argument(
        "--today",
        type=str,
        help="Treat this date (YYYY-MM-DD) as today (default: FLEET_TODAY or system date)",
    )
    parser.add_argument(
        "--due-soon-days",
        type=int,
        help="Days before a due date that count as due soon (default: 30)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show which maintenance is overdue, due soon, or OK"
    )
    status_parser.add_argument("--vehicle", type=str, help="Vehicle id or plate")
    status_parser.add_argument("--firm", type=int, help="Only vehicles of this firm id")
    status_parser.add_argument("--location", type=int, help="Only vehicles at this location id")
    status_parser.add_argument(
        "--due-only",
        action="store_true",
        help="Only show overdue and due-soon maintenance",
    )

    # Vehicles subcommand
    vehicles_parser = subparsers.add_parser(
        "vehicles", help="List vehicles with filter and inspection countdowns"
    )
    vehicles_parser.add_argument("--firm", type=int, help="Only vehicles of this firm id")
    vehicles_parser.add_argument("--location", type=int, help="Only vehicles at this location id")
    vehicles_parser.add_argument(
        "--status",
        choices=[s.value for s in VehicleStatus],
        help="Only vehicles with this status",
    )

    # Show subcommand
    show_parser = subparsers.add_parser(
        "show", help="Show one vehicle with every computed due field"
    )
    show_parser.add_argument("vehicle", type=str, help="Vehicle id or plate")
    show_parser.add_argument(
        "--json", action="store_true", help="Print the enriched record as JSON"
    )

    # Orders subcommand
    orders_parser = subparsers.add_parser("orders", help="View service orders")
    orders_parser.add_argument("--vehicle", type=str, help="Vehicle id or plate")
    orders_parser.add_argument("--since", type=str, help="From date (YYYY-MM-DD, inclusive)")
    orders_parser.add_argument("--until", type=str, help="To date (YYYY-MM-DD, inclusive)")

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Add a service order")
    log_parser.add_argument("vehicle", type=str, help="Vehicle id or plate")
    log_parser.add_argument("description", type=str, help="What was done")
    log_parser.add_argument("--date", type=str, help="Service date (default: today)")
    log_parser.add_argument("--order-number", type=str, help="Service order number")
    log_parser.add_argument("--materials", type=str, help="Materials used")
    log_parser.add_argument("--value", type=float, help="Value of the work")
    log_parser.add_argument(
        "--faulty",
        action="store_true",
        help="Record the equipment as not in working order",
    )
    log_parser.add_argument("--notes", type=str, help="Notes")
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Listing subcommands
    subparsers.add_parser("firms", help="List firms")
    subparsers.add_parser("locations", help="List locations")
    subparsers.add_parser("schedule", help="List the fixed maintenance intervals")

    # Add subcommands
    add_firm_parser = subparsers.add_parser("add-firm", help="Add a firm")
    add_firm_parser.add_argument("name", type=str)
    add_firm_parser.add_argument("--contact", type=str)

    add_location_parser = subparsers.add_parser("add-location", help="Add a location")
    add_location_parser.add_argument("name", type=str)
    add_location_parser.add_argument("--address", type=str)

    add_vehicle_parser = subparsers.add_parser("add-vehicle", help="Add a vehicle")
    add_vehicle_parser.add_argument("name", type=str, help="Vehicle/equipment name")
    add_vehicle_parser.add_argument("--plate", type=str, required=True)
    add_vehicle_parser.add_argument("--firm", type=int, required=True, help="Firm id")
    add_vehicle_parser.add_argument("--location", type=int, required=True, help="Location id")
    add_vehicle_parser.add_argument(
        "--status",
        choices=[s.value for s in VehicleStatus],
        default=VehicleStatus.ACTIVE.value,
    )
    add_vehicle_parser.add_argument("--trailer-plate", type=str)
    add_vehicle_parser.add_argument("--filter-installed", type=str, help="YYYY-MM-DD")
    add_vehicle_parser.add_argument("--filter-months", type=int, help="Filter validity in months")
    add_vehicle_parser.add_argument("--inspection", type=str, help="Annual inspection date")
    add_vehicle_parser.add_argument("--notes", type=str)
    add_vehicle_parser.add_argument("--dry-run", action="store_true")

    # Set subcommand
    set_parser = subparsers.add_parser("set", help="Set (or clear) one vehicle field")
    set_parser.add_argument("vehicle", type=str, help="Vehicle id or plate")
    set_parser.add_argument("field", type=str, help="Field, e.g. hoseHd63Date")
    set_parser.add_argument(
        "value", type=str, nargs="?", default="", help="New value (omit to clear)"
    )
    set_parser.add_argument("--dry-run", action="store_true")

    # Delete subcommand
    delete_parser = subparsers.add_parser("delete", help="Delete a record")
    delete_parser.add_argument("kind", choices=["firm", "location", "vehicle", "order"])
    delete_parser.add_argument("id", type=int)
    delete_parser.add_argument("--dry-run", action="store_true")

    return parser


COMMANDS = {
    "status": cmd_status,
    "vehicles": cmd_vehicles,
    "show": cmd_show,
    "orders": cmd_orders,
    "log": cmd_log,
    "firms": cmd_firms,
    "locations": cmd_locations,
    "schedule": cmd_schedule,
    "add-firm": cmd_add_firm,
    "add-location": cmd_add_location,
    "add-vehicle": cmd_add_vehicle,
    "set": cmd_set,
    "delete": cmd_delete,
}


def resolve_settings(args) -> Settings:
    """Environment settings, overridden by command-line flags."""
    settings = Settings.from_env()
    today = settings.today
    if args.today:
        today = parse_flexible_date(args.today)
        if today is None:
            raise RecordValidationError(
                f"--today must be a date (YYYY-MM-DD), got {args.today!r}"
            )
    due_soon_days = settings.due_soon_days
    if args.due_soon_days is not None:
        due_soon_days = args.due_soon_days
    log_level = "DEBUG" if args.verbose else settings.log_level
    return Settings(due_soon_days=due_soon_days, today=today, log_level=log_level)


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except FleetError as e:
        print(f"Error: {e}")
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Validate fleet file exists
    if not args.fleet_file.exists():
        print(f"Error: File not found: {args.fleet_file}")
        return 1

    _logger.debug("Running %s on %s", args.command, args.fleet_file)
    try:
        return COMMANDS[args.command](args, settings)
    except FleetError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
