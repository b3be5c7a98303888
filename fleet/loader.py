"""YAML loading and saving utilities for fleet data."""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .dates import parse_flexible_date
from .errors import RecordNotFoundError, RecordValidationError
from .firm import Firm
from .fleet import Fleet
from .location import Location
from .service_order import ServiceOrder
from .status import VehicleStatus
from .vehicle import DATE_FIELDS, RECORD_FIELDS, Vehicle, attribute_for_key

_logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SECTIONS = ("firms", "locations", "vehicles", "serviceOrders")


# =============================================================================
# Raw file access
# =============================================================================


def _read_raw(filename: PathLike) -> Dict[str, Any]:
    try:
        with open(filename, "r", encoding="utf-8") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise RecordValidationError(f"{filename}: YAML parse error: {e}") from e
    except UnicodeDecodeError as e:
        raise RecordValidationError(f"{filename}: not a UTF-8 file ({e})") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RecordValidationError(f"{filename}: top level must be a mapping")
    for section in SECTIONS:
        records = data.get(section)
        if records is None:
            data[section] = []
        elif not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise RecordValidationError(f"{filename}: {section} must be a list of records")
    return data


def _write_raw(filename: PathLike, data: Dict[str, Any]) -> None:
    with open(filename, "w", encoding="utf-8") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )
    _logger.debug("Wrote %s", filename)


def _next_id(records: List[Dict[str, Any]]) -> int:
    return max((r.get("id") or 0 for r in records), default=0) + 1


def _index_of(records: List[Dict[str, Any]], record_id: int, kind: str) -> int:
    for index, record in enumerate(records):
        if record.get("id") == record_id:
            return index
    raise RecordNotFoundError(kind, record_id)


def _iso(value: Any) -> Any:
    """Dates as ISO strings so files round-trip as quoted text."""
    if isinstance(value, date):
        return value.isoformat()
    return value


# =============================================================================
# Parsing
# =============================================================================


def _parse_firm(dct: Dict[str, Any]) -> Firm:
    return Firm(dct.get("id"), dct["name"], dct.get("contact"))


def _parse_location(dct: Dict[str, Any]) -> Location:
    return Location(dct.get("id"), dct["name"], dct.get("address"))


def _parse_vehicle(dct: Dict[str, Any]) -> Vehicle:
    try:
        return Vehicle.from_dict(dct)
    except ValueError:
        raise RecordValidationError(
            f"Vehicle {dct.get('id')!r}: unknown status {dct.get('status')!r}"
        ) from None


def _parse_service_order(dct: Dict[str, Any]) -> ServiceOrder:
    return ServiceOrder(
        dct.get("id"),
        dct.get("vehicleId"),
        _iso(dct["date"]),
        dct["description"],
        dct.get("orderNumber"),
        dct.get("materials"),
        dct.get("value"),
        dct.get("working", True),
        dct.get("notes"),
    )


def load_fleet(filename: PathLike) -> Fleet:
    """Load all records from a fleet YAML file."""
    data = _read_raw(filename)
    try:
        fleet = Fleet(
            firms=[_parse_firm(d) for d in data["firms"]],
            locations=[_parse_location(d) for d in data["locations"]],
            vehicles=[_parse_vehicle(d) for d in data["vehicles"]],
            service_orders=[_parse_service_order(d) for d in data["serviceOrders"]],
        )
    except KeyError as e:
        raise RecordValidationError(f"{filename}: missing required field {e}") from None
    _logger.debug(
        "Loaded %s: %d firms, %d locations, %d vehicles, %d service orders",
        filename,
        len(fleet.firms),
        len(fleet.locations),
        len(fleet.vehicles),
        len(fleet.service_orders),
    )
    return fleet


def create_fleet_file(filename: PathLike) -> None:
    """Create an empty fleet file."""
    _write_raw(filename, {section: [] for section in SECTIONS})


# =============================================================================
# Serialization
# =============================================================================


def _firm_to_dict(firm: Firm, firm_id: int) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": firm_id, "name": firm.name}
    if firm.contact is not None:
        d["contact"] = firm.contact
    return d


def _location_to_dict(location: Location, location_id: int) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": location_id, "name": location.name}
    if location.address is not None:
        d["address"] = location.address
    return d


def _vehicle_to_dict(vehicle: Vehicle, vehicle_id: int) -> Dict[str, Any]:
    """Serialize a Vehicle, omitting None values for cleaner YAML."""
    d: Dict[str, Any] = {}
    for key, value in vehicle.to_dict().items():
        if key == "id":
            value = vehicle_id
        if value is not None:
            d[key] = value
    return d


def _service_order_to_dict(order: ServiceOrder, order_id: int) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": order_id,
        "vehicleId": order.vehicle_id,
        "date": _iso(order.date),
        "description": order.description,
        "working": order.working,
    }
    if order.order_number is not None:
        d["orderNumber"] = order.order_number
    if order.materials is not None:
        d["materials"] = order.materials
    if order.value is not None:
        d["value"] = round(float(order.value), 2)
    if order.notes is not None:
        d["notes"] = order.notes
    return d


# =============================================================================
# Firms and locations
# =============================================================================


def add_firm(filename: PathLike, firm: Firm) -> int:
    """Append a firm and return its new id."""
    if not firm.name:
        raise RecordValidationError("Firm name is required")
    data = _read_raw(filename)
    firm_id = _next_id(data["firms"])
    data["firms"].append(_firm_to_dict(firm, firm_id))
    _write_raw(filename, data)
    _logger.info("Added firm %d (%s)", firm_id, firm.name)
    return firm_id


def update_firm(filename: PathLike, firm_id: int, firm: Firm) -> None:
    """Replace the firm with the given id."""
    data = _read_raw(filename)
    index = _index_of(data["firms"], firm_id, "Firm")
    data["firms"][index] = _firm_to_dict(firm, firm_id)
    _write_raw(filename, data)


def delete_firm(filename: PathLike, firm_id: int) -> None:
    """Remove a firm. Vehicles that reference it are left as they are."""
    data = _read_raw(filename)
    del data["firms"][_index_of(data["firms"], firm_id, "Firm")]
    _write_raw(filename, data)
    _logger.info("Deleted firm %d", firm_id)


def add_location(filename: PathLike, location: Location) -> int:
    """Append a location and return its new id."""
    if not location.name:
        raise RecordValidationError("Location name is required")
    data = _read_raw(filename)
    location_id = _next_id(data["locations"])
    data["locations"].append(_location_to_dict(location, location_id))
    _write_raw(filename, data)
    _logger.info("Added location %d (%s)", location_id, location.name)
    return location_id


def update_location(filename: PathLike, location_id: int, location: Location) -> None:
    """Replace the location with the given id."""
    data = _read_raw(filename)
    index = _index_of(data["locations"], location_id, "Location")
    data["locations"][index] = _location_to_dict(location, location_id)
    _write_raw(filename, data)


def delete_location(filename: PathLike, location_id: int) -> None:
    """Remove a location. Vehicles that reference it are left as they are."""
    data = _read_raw(filename)
    del data["locations"][_index_of(data["locations"], location_id, "Location")]
    _write_raw(filename, data)
    _logger.info("Deleted location %d", location_id)


# =============================================================================
# Vehicles
# =============================================================================


def _check_vehicle(data: Dict[str, Any], vehicle: Vehicle) -> None:
    """Required fields present, firm and location exist."""
    missing = vehicle.missing_required()
    if missing:
        raise RecordValidationError(f"Vehicle is missing: {', '.join(missing)}")
    if not any(f.get("id") == vehicle.firm_id for f in data["firms"]):
        raise RecordValidationError(f"Firm with id {vehicle.firm_id} not found")
    if not any(loc.get("id") == vehicle.location_id for loc in data["locations"]):
        raise RecordValidationError(f"Location with id {vehicle.location_id} not found")


def add_vehicle(filename: PathLike, vehicle: Vehicle) -> int:
    """Append a vehicle and return its new id."""
    data = _read_raw(filename)
    _check_vehicle(data, vehicle)
    vehicle_id = _next_id(data["vehicles"])
    data["vehicles"].append(_vehicle_to_dict(vehicle, vehicle_id))
    _write_raw(filename, data)
    _logger.info("Added vehicle %d (%s)", vehicle_id, vehicle.plate)
    return vehicle_id


def update_vehicle(filename: PathLike, vehicle_id: int, vehicle: Vehicle) -> None:
    """Replace the vehicle with the given id."""
    data = _read_raw(filename)
    index = _index_of(data["vehicles"], vehicle_id, "Vehicle")
    _check_vehicle(data, vehicle)
    data["vehicles"][index] = _vehicle_to_dict(vehicle, vehicle_id)
    _write_raw(filename, data)


def _coerce_field(attr: str, value: Any) -> Any:
    """Convert a text value (e.g. from the command line) for a vehicle field."""
    if value is None or value == "":
        return None
    if attr == "status":
        try:
            return VehicleStatus(value)
        except ValueError:
            names = ", ".join(s.value for s in VehicleStatus)
            raise RecordValidationError(
                f"Unknown status {value!r} (expected one of: {names})"
            ) from None
    if attr in ("firm_id", "location_id", "ordinal", "filter_validity_months"):
        try:
            return int(value)
        except (TypeError, ValueError):
            raise RecordValidationError(
                f"{RECORD_FIELDS[attr]} must be a whole number"
            ) from None
    if attr in DATE_FIELDS:
        parsed = parse_flexible_date(value)
        if parsed is None:
            raise RecordValidationError(
                f"{RECORD_FIELDS[attr]} must be a date (YYYY-MM-DD), got {value!r}"
            )
        return parsed.isoformat()
    return value


def set_vehicle_field(
    filename: PathLike, vehicle_id: int, field: str, value: Any
) -> None:
    """
    Update a single vehicle field.

    ``field`` may be a record key (``hoseHd63Date``) or attribute name
    (``hose_hd63_date``). An empty value clears the field.
    """
    attr = attribute_for_key(field)
    if attr is None or attr == "id":
        raise RecordValidationError(f"Unknown vehicle field '{field}'")
    data = _read_raw(filename)
    index = _index_of(data["vehicles"], vehicle_id, "Vehicle")
    vehicle = _parse_vehicle(data["vehicles"][index])
    setattr(vehicle, attr, _coerce_field(attr, value))
    _check_vehicle(data, vehicle)
    data["vehicles"][index] = _vehicle_to_dict(vehicle, vehicle_id)
    _write_raw(filename, data)
    _logger.info("Vehicle %d: set %s", vehicle_id, RECORD_FIELDS[attr])


def delete_vehicle(filename: PathLike, vehicle_id: int) -> None:
    """Remove a vehicle. Its service orders are left as they are."""
    data = _read_raw(filename)
    del data["vehicles"][_index_of(data["vehicles"], vehicle_id, "Vehicle")]
    _write_raw(filename, data)
    _logger.info("Deleted vehicle %d", vehicle_id)


# =============================================================================
# Service orders
# =============================================================================


def _resolve_vehicle_id(
    data: Dict[str, Any], vehicle_id: Optional[int], plate: Optional[str]
) -> int:
    """Vehicle id from either an id or a plate (exactly one)."""
    if vehicle_id is not None and plate:
        raise RecordValidationError("Give either a vehicle id or a plate, not both")
    if vehicle_id is not None:
        _index_of(data["vehicles"], vehicle_id, "Vehicle")
        return vehicle_id
    if plate:
        wanted = "".join(plate.split()).upper()
        for record in data["vehicles"]:
            stored = "".join(str(record.get("plate") or "").split()).upper()
            if stored == wanted:
                return record["id"]
        raise RecordNotFoundError(
            "Vehicle", plate, f"Vehicle with plate '{plate}' not found"
        )
    raise RecordValidationError("A vehicle id or plate is required")


def add_service_order(
    filename: PathLike, order: ServiceOrder, plate: Optional[str] = None
) -> int:
    """
    Append a service order and return its new id.

    The vehicle is taken from ``order.vehicle_id`` or looked up by
    ``plate``; exactly one of the two must be given.
    """
    if not order.date or not order.description:
        raise RecordValidationError("Service order needs a date and a description")
    data = _read_raw(filename)
    order.vehicle_id = _resolve_vehicle_id(data, order.vehicle_id, plate)
    order_id = _next_id(data["serviceOrders"])
    data["serviceOrders"].append(_service_order_to_dict(order, order_id))
    _write_raw(filename, data)
    _logger.info("Added service order %d for vehicle %d", order_id, order.vehicle_id)
    return order_id


def update_service_order(filename: PathLike, order_id: int, order: ServiceOrder) -> None:
    """Replace a service order; the vehicle it belongs to cannot change."""
    if not order.date or not order.description:
        raise RecordValidationError("Service order needs a date and a description")
    data = _read_raw(filename)
    index = _index_of(data["serviceOrders"], order_id, "Service order")
    order.vehicle_id = data["serviceOrders"][index].get("vehicleId")
    data["serviceOrders"][index] = _service_order_to_dict(order, order_id)
    _write_raw(filename, data)


def delete_service_order(filename: PathLike, order_id: int) -> None:
    """Remove a service order."""
    data = _read_raw(filename)
    del data["serviceOrders"][_index_of(data["serviceOrders"], order_id, "Service order")]
    _write_raw(filename, data)
    _logger.info("Deleted service order %d", order_id)
