from __future__ import annotations

from enum import Enum

"""CanonicalField enum: the closed set of vehicle attributes an import produces.

Each member carries the wire name used by the vehicle API (camelCase) and a
display name for preview tables. Adding a field means extending this enum and
the synonym table in vehicle_import.mapping.synonyms.
"""

__all__ = [
    "CanonicalField",
]


class CanonicalField(Enum):
    """Target vehicle attribute.

    value: wire name sent to the persistence boundary
    """
    LICENSE_PLATE = "licensePlate"
    BRAND = "brand"
    MODEL = "model"
    BRAND_AND_MODEL = "brandAndModel"  # split into brand/model by the mapper
    VEHICLE_TYPE = "vehicleType"
    FUEL = "fuel"
    COMPANY = "company"
    REGISTERED_TO = "registeredTo"
    REGISTRATION_DATE = "registrationDate"
    CHASSIS_NUMBER = "chassisNumber"
    APK_DATE = "apkDate"
    PRODUCTION_DATE = "productionDate"
    GPS = "gps"
    EURO_ZONE = "euroZone"
    ROADSIDE_ASSISTANCE = "roadsideAssistance"
    SPARE_KEY = "spareKey"
    WINTER_TIRES = "winterTires"
    TIRE_SIZE = "tireSize"
    INTERNAL_NOTES = "internalAppointments"
    REMARKS = "remarks"
    GENERAL_INFO = "generalInfo"

    @property
    def wire_name(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_wire_name(cls, name: str) -> CanonicalField:
        """Look up a member by wire name. Raises ValueError when unknown."""
        return cls(name)


_DISPLAY_NAMES: dict[CanonicalField, str] = {
    CanonicalField.LICENSE_PLATE: "License Plate",
    CanonicalField.BRAND: "Brand",
    CanonicalField.MODEL: "Model",
    CanonicalField.BRAND_AND_MODEL: "Brand & Model",
    CanonicalField.VEHICLE_TYPE: "Vehicle Type",
    CanonicalField.FUEL: "Fuel",
    CanonicalField.COMPANY: "Company",
    CanonicalField.REGISTERED_TO: "BV/Opnaam",
    CanonicalField.REGISTRATION_DATE: "Registration Date",
    CanonicalField.CHASSIS_NUMBER: "Chassis Number",
    CanonicalField.APK_DATE: "APK Date",
    CanonicalField.PRODUCTION_DATE: "Production Date",
    CanonicalField.GPS: "GPS",
    CanonicalField.EURO_ZONE: "EuroZone",
    CanonicalField.ROADSIDE_ASSISTANCE: "Roadside Assistance",
    CanonicalField.SPARE_KEY: "Spare Key",
    CanonicalField.WINTER_TIRES: "Winter Tires",
    CanonicalField.TIRE_SIZE: "Tire Size",
    CanonicalField.INTERNAL_NOTES: "Internal Notes",
    CanonicalField.REMARKS: "Remarks",
    CanonicalField.GENERAL_INFO: "General Info",
}
