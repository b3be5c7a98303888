"""Exception hierarchy for the fleet maintenance tracker."""

from typing import Optional


class FleetError(Exception):
    """Base exception for all fleet errors."""


class ConfigError(FleetError):
    """Invalid configuration value."""


class RecordNotFoundError(FleetError):
    """A firm, location, vehicle or service order does not exist."""

    def __init__(
        self, kind: str, record_id: Optional[object] = None, message: str = ""
    ) -> None:
        self.kind = kind
        self.record_id = record_id
        if not message:
            if record_id is None:
                message = f"{kind} not found"
            else:
                message = f"{kind} {record_id!r} not found"
        super().__init__(message)


class RecordValidationError(FleetError):
    """A record is missing required data or references something unknown."""
