"""ServiceOrder class for work performed on a vehicle."""
from typing import Optional


class ServiceOrder:
    """A record of service work performed on a vehicle or piece of equipment."""

    def __init__(
            self,
            id: Optional[int],
            vehicle_id: Optional[int],
            date: str,
            description: str,
            order_number: Optional[str] = None,
            materials: Optional[str] = None,
            value: Optional[float] = None,
            working: bool = True,
            notes: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.date = date
        self.description = description
        self.order_number = order_number
        self.materials = materials
        self.value = value
        self.working = True if working is None else working
        self.notes = notes
