"""Fixed maintenance schedule: which date feeds each category and how often it recurs."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from .dates import add_months, add_years


class IntervalUnit(Enum):
    MONTHS = "months"
    YEARS = "years"


@dataclass(frozen=True)
class MaintenanceScheduleEntry:
    """One recurring maintenance category."""

    key: str
    label: str
    source_field: str
    interval_value: int
    interval_unit: IntervalUnit

    def due_date(self, last_done: Optional[date]) -> Optional[date]:
        """Next due date after ``last_done``; None without a date or past ``date.max``."""
        if last_done is None:
            return None
        try:
            if self.interval_unit is IntervalUnit.YEARS:
                return add_years(last_done, self.interval_value)
            return add_months(last_done, self.interval_value)
        except (ValueError, OverflowError):
            return None

    @property
    def interval_display(self) -> str:
        value = self.interval_value
        if self.interval_unit is IntervalUnit.YEARS:
            return f"{value} year" if value == 1 else f"{value} years"
        return f"{value} month" if value == 1 else f"{value} months"


# Volumetric, manometer and HECPV/ILCPV intervals are working assumptions,
# not confirmed regulatory values.
SCHEDULE: Tuple[MaintenanceScheduleEntry, ...] = (
    MaintenanceScheduleEntry(
        "daysToHoseHd63Replacement", "Hose HD-63 replacement", "hoseHd63Date",
        10, IntervalUnit.YEARS,
    ),
    MaintenanceScheduleEntry(
        "daysToHoseHd38Replacement", "Hose HD-38 replacement", "hoseHd38Date",
        10, IntervalUnit.YEARS,
    ),
    MaintenanceScheduleEntry(
        "daysToHoseTw75Replacement", "Hose TW-75 replacement", "hoseTw75Date",
        10, IntervalUnit.YEARS,
    ),
    MaintenanceScheduleEntry(
        "daysToHoseLeakTest", "Hose leak test", "hoseLeakTestDate",
        6, IntervalUnit.MONTHS,
    ),
    MaintenanceScheduleEntry(
        "daysToSensorCalibration", "Sensor calibration", "sensorServiceDate",
        1, IntervalUnit.YEARS,
    ),
    MaintenanceScheduleEntry(
        "daysToVolumetricCalibration", "Volumetric calibration",
        "volumetricCalibrationDate", 1, IntervalUnit.YEARS,
    ),
    MaintenanceScheduleEntry(
        "daysToManometerCalibration", "Manometer calibration",
        "manometerCalibrationDate", 1, IntervalUnit.YEARS,
    ),
    MaintenanceScheduleEntry(
        "daysToHecpvIlcpvTest", "HECPV/ILCPV test", "hecpvIlcpvTestDate",
        5, IntervalUnit.YEARS,
    ),
)


def get_entry(key: str) -> Optional[MaintenanceScheduleEntry]:
    """Find a schedule entry by its output key."""
    for entry in SCHEDULE:
        if entry.key == key:
            return entry
    return None
