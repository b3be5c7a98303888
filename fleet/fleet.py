"""Fleet class - the main aggregate of firms, locations, vehicles and service orders."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Union

from .dates import parse_flexible_date
from .due_dates import enrich_record
from .errors import RecordValidationError
from .firm import Firm
from .location import Location
from .service_order import ServiceOrder
from .status import VehicleStatus
from .vehicle import Vehicle


def _normalize_plate(plate: str) -> str:
    return "".join(plate.split()).upper()


def _date_bound(value: Union[str, date, None], name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    bound = parse_flexible_date(value)
    if bound is None:
        raise RecordValidationError(f"{name} must be a date (YYYY-MM-DD), got {value!r}")
    return bound


def _in_period(value: Any, start: Optional[date], end: Optional[date]) -> bool:
    """Orders without a usable date fall outside every period."""
    order_date = parse_flexible_date(value)
    if order_date is None:
        return False
    if start is not None and order_date < start:
        return False
    return end is None or order_date <= end


@dataclass
class OrderSummary:
    """Totals over a set of service orders."""

    count: int
    total_value: float
    first_date: Optional[str] = None
    last_date: Optional[str] = None


class Fleet:
    """All records held by a maintenance office."""

    def __init__(
        self,
        firms: Optional[List[Firm]] = None,
        locations: Optional[List[Location]] = None,
        vehicles: Optional[List[Vehicle]] = None,
        service_orders: Optional[List[ServiceOrder]] = None,
    ):
        self.firms = firms or []
        self.locations = locations or []
        self.vehicles = vehicles or []
        self.service_orders = service_orders or []

    def get_firm(self, firm_id: int) -> Optional[Firm]:
        for firm in self.firms:
            if firm.id == firm_id:
                return firm
        return None

    def get_location(self, location_id: int) -> Optional[Location]:
        for location in self.locations:
            if location.id == location_id:
                return location
        return None

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    def get_vehicle_by_plate(self, plate: str) -> Optional[Vehicle]:
        """Find a vehicle by plate, ignoring case and whitespace."""
        wanted = _normalize_plate(plate)
        for vehicle in self.vehicles:
            if vehicle.plate and _normalize_plate(vehicle.plate) == wanted:
                return vehicle
        return None

    def find_vehicle(self, ref: Union[int, str]) -> Optional[Vehicle]:
        """Find a vehicle by numeric id or by plate."""
        if isinstance(ref, int):
            return self.get_vehicle(ref)
        text = str(ref).strip()
        if text.isdigit():
            vehicle = self.get_vehicle(int(text))
            if vehicle is not None:
                return vehicle
        return self.get_vehicle_by_plate(text)

    def get_service_order(self, order_id: int) -> Optional[ServiceOrder]:
        for order in self.service_orders:
            if order.id == order_id:
                return order
        return None

    def vehicles_sorted(self) -> List[Vehicle]:
        """Vehicles ordered by name, then plate."""
        return sorted(self.vehicles, key=lambda v: (v.name or "", v.plate or ""))

    def filter_vehicles(
        self,
        firm_id: Optional[int] = None,
        location_id: Optional[int] = None,
        status: Optional[VehicleStatus] = None,
    ) -> List[Vehicle]:
        """Vehicles (sorted by name) matching every filter given."""
        vehicles = self.vehicles_sorted()
        if firm_id is not None:
            vehicles = [v for v in vehicles if v.firm_id == firm_id]
        if location_id is not None:
            vehicles = [v for v in vehicles if v.location_id == location_id]
        if status is not None:
            vehicles = [v for v in vehicles if v.status == status]
        return vehicles

    def get_orders(
        self,
        vehicle_id: Optional[int] = None,
        since: Union[str, date, None] = None,
        until: Union[str, date, None] = None,
    ) -> List[ServiceOrder]:
        """
        Service orders, newest first.

        Args:
            vehicle_id: Only orders for this vehicle
            since: Inclusive lower bound (date or YYYY-MM-DD)
            until: Inclusive upper bound (date or YYYY-MM-DD)

        Raises:
            RecordValidationError: If a bound is not a date
        """
        start = _date_bound(since, "since")
        end = _date_bound(until, "until")
        orders = self.service_orders
        if vehicle_id is not None:
            orders = [o for o in orders if o.vehicle_id == vehicle_id]
        if start is not None or end is not None:
            orders = [o for o in orders if _in_period(o.date, start, end)]
        return sorted(orders, key=lambda o: (str(o.date), o.id or 0), reverse=True)

    def order_summary(
        self,
        vehicle_id: Optional[int] = None,
        since: Union[str, date, None] = None,
        until: Union[str, date, None] = None,
    ) -> OrderSummary:
        """Count, total value and date span of the selected orders."""
        orders = self.get_orders(vehicle_id, since, until)
        total = sum(o.value for o in orders if o.value is not None)
        return OrderSummary(
            count=len(orders),
            total_value=round(total, 2),
            first_date=str(orders[-1].date) if orders else None,
            last_date=str(orders[0].date) if orders else None,
        )

    def enriched_vehicles(self, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Every vehicle (sorted by name) with its computed due fields."""
        if today is None:
            today = date.today()
        return [enrich_record(v, today) for v in self.vehicles_sorted()]

