"""MaintenanceDue dataclass for one computed maintenance category."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .status import Status


@dataclass
class MaintenanceDue:
    """Calculated due information for one maintenance category."""

    key: str
    label: str
    status: Status
    source_date: Optional[date] = None
    due_date: Optional[date] = None
    days_remaining: Optional[int] = None
    interval: Optional[str] = None

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.DUE_SOON)
