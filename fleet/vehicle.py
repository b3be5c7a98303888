"""Vehicle class - a vehicle or piece of equipment and its maintenance dates."""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from .status import DEFAULT_VEHICLE_STATUS, VehicleStatus

# Python attribute -> record key, in record order
RECORD_FIELDS = {
    "id": "id",
    "ordinal": "ordinal",
    "status": "status",
    "name": "name",
    "firm_id": "firmId",
    "plate": "plate",
    "trailer_plate": "trailerPlate",
    "location_id": "locationId",
    "vessel_plate_no": "vesselPlateNo",
    "filter_install_date": "filterInstallDate",
    "filter_validity_months": "filterValidityMonths",
    "annual_inspection_date": "annualInspectionDate",
    "filter_manual_expiry_date": "filterManualExpiryDate",
    "sensor_technology": "sensorTechnology",
    "sensor_service_date": "sensorServiceDate",
    "hose_hd63_date": "hoseHd63Date",
    "hose_hd38_date": "hoseHd38Date",
    "hose_tw75_date": "hoseTw75Date",
    "hose_leak_test_date": "hoseLeakTestDate",
    "volumetric_calibration_date": "volumetricCalibrationDate",
    "manometer_calibration_date": "manometerCalibrationDate",
    "hecpv_ilcpv_test_date": "hecpvIlcpvTestDate",
    "filter_type_plate_no": "filterTypePlateNo",
    "contact_info": "contactInfo",
    "notes": "notes",
}

REQUIRED_FIELDS = ("name", "firm_id", "plate", "location_id")

DATE_FIELDS = (
    "filter_install_date",
    "annual_inspection_date",
    "filter_manual_expiry_date",
    "sensor_service_date",
    "hose_hd63_date",
    "hose_hd38_date",
    "hose_tw75_date",
    "hose_leak_test_date",
    "volumetric_calibration_date",
    "manometer_calibration_date",
    "hecpv_ilcpv_test_date",
)


def attribute_for_key(key: str) -> Optional[str]:
    """Map a record key (camelCase) or attribute name to the attribute name."""
    if key in RECORD_FIELDS:
        return key
    for attr, record_key in RECORD_FIELDS.items():
        if record_key == key:
            return attr
    return None


class Vehicle:
    """
    A vehicle or piece of equipment as persisted.

    Date attributes keep whatever the record source stored (ISO string,
    date, or None). Due dates are never stored here; they are derived
    on every read by ``fleet.due_dates``.
    """

    def __init__(
        self,
        id: Optional[int],
        name: str,
        firm_id: int,
        plate: str,
        location_id: int,
        status: VehicleStatus = DEFAULT_VEHICLE_STATUS,
        ordinal: Optional[int] = None,
        trailer_plate: Optional[str] = None,
        vessel_plate_no: Optional[str] = None,
        filter_install_date: Any = None,
        filter_validity_months: Optional[int] = None,
        annual_inspection_date: Any = None,
        filter_manual_expiry_date: Any = None,
        sensor_technology: Optional[str] = None,
        sensor_service_date: Any = None,
        hose_hd63_date: Any = None,
        hose_hd38_date: Any = None,
        hose_tw75_date: Any = None,
        hose_leak_test_date: Any = None,
        volumetric_calibration_date: Any = None,
        manometer_calibration_date: Any = None,
        hecpv_ilcpv_test_date: Any = None,
        filter_type_plate_no: Optional[str] = None,
        contact_info: Optional[str] = None,
        notes: Optional[str] = None,
    ):
        self.id = id
        self.ordinal = ordinal
        self.status = status or DEFAULT_VEHICLE_STATUS
        self.name = name
        self.firm_id = firm_id
        self.plate = plate
        self.trailer_plate = trailer_plate
        self.location_id = location_id
        self.vessel_plate_no = vessel_plate_no
        self.filter_install_date = filter_install_date
        self.filter_validity_months = filter_validity_months
        self.annual_inspection_date = annual_inspection_date
        self.filter_manual_expiry_date = filter_manual_expiry_date
        self.sensor_technology = sensor_technology
        self.sensor_service_date = sensor_service_date
        self.hose_hd63_date = hose_hd63_date
        self.hose_hd38_date = hose_hd38_date
        self.hose_tw75_date = hose_tw75_date
        self.hose_leak_test_date = hose_leak_test_date
        self.volumetric_calibration_date = volumetric_calibration_date
        self.manometer_calibration_date = manometer_calibration_date
        self.hecpv_ilcpv_test_date = hecpv_ilcpv_test_date
        self.filter_type_plate_no = filter_type_plate_no
        self.contact_info = contact_info
        self.notes = notes

    @property
    def display_name(self) -> str:
        """Human-readable name with plate, e.g. 'Fuel truck (ZG-1234-AB)'."""
        return f"{self.name} ({self.plate})" if self.plate else self.name

    def to_dict(self) -> Dict[str, Any]:
        """Record keys with JSON-ready values (enum by value, dates as ISO)."""
        data: Dict[str, Any] = {}
        for attr, key in RECORD_FIELDS.items():
            value = getattr(self, attr)
            if isinstance(value, VehicleStatus):
                value = value.value
            elif isinstance(value, date):
                value = value.isoformat()
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Vehicle":
        """Build a Vehicle from a mapping of record keys."""
        kwargs: Dict[str, Any] = {}
        for attr, key in RECORD_FIELDS.items():
            if key in data:
                kwargs[attr] = data[key]
        status = kwargs.get("status")
        kwargs["status"] = VehicleStatus(status) if status else DEFAULT_VEHICLE_STATUS
        for attr in REQUIRED_FIELDS:
            kwargs.setdefault(attr, None)
        kwargs.setdefault("id", None)
        return cls(**kwargs)

    def missing_required(self) -> List[str]:
        """Record keys of required fields that are empty."""
        return [
            RECORD_FIELDS[attr]
            for attr in REQUIRED_FIELDS
            if getattr(self, attr) in (None, "")
        ]
