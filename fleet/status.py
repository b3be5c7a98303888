"""Status enums for maintenance urgency and vehicle state."""

from enum import Enum


class Status(Enum):
    """Maintenance urgency categories. Lower value = more urgent."""

    OVERDUE = 1
    DUE_SOON = 2
    OK = 3
    UNKNOWN = 4  # No usable source date


class VehicleStatus(Enum):
    """Operational state of a vehicle or piece of equipment."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    IN_SERVICE = "In service"
    AWAITING_PARTS = "Awaiting parts"


DEFAULT_VEHICLE_STATUS = VehicleStatus.ACTIVE
