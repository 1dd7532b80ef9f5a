from __future__ import annotations

from types import MappingProxyType

from ..models.fields import CanonicalField as F

"""Static header synonym table (normalized header -> CanonicalField).

Keys are lowercased and trimmed. The table is many-to-one and covers the
Dutch and English spellings seen in fleet spreadsheets. Matching is exact
lookup only; there is no fuzzy matching.
"""

__all__ = [
    "HEADER_SYNONYMS",
    "normalize_header",
    "lookup_field",
]


def normalize_header(header: object) -> str:
    """Normalization applied to every raw header before lookup."""
    if header is None:
        return ""
    return str(header).strip().lower()


_SYNONYMS: dict[str, F] = {
    # License plate
    "kenteken": F.LICENSE_PLATE,
    "kent": F.LICENSE_PLATE,
    "license plate": F.LICENSE_PLATE,
    "licenseplate": F.LICENSE_PLATE,
    "nummerplaat": F.LICENSE_PLATE,
    "registratie": F.LICENSE_PLATE,
    "reg": F.LICENSE_PLATE,
    "plate": F.LICENSE_PLATE,
    # Brand + model in one column (split by the mapper)
    "merk & type": F.BRAND_AND_MODEL,
    "merk en type": F.BRAND_AND_MODEL,
    "merk/type": F.BRAND_AND_MODEL,
    "merk en model": F.BRAND_AND_MODEL,
    "merk & model": F.BRAND_AND_MODEL,
    # Brand
    "merk": F.BRAND,
    "brand": F.BRAND,
    "fabrikant": F.BRAND,
    "make": F.BRAND,
    # Model
    "model": F.MODEL,
    "type": F.MODEL,
    "uitvoering": F.MODEL,
    # Vehicle type
    "voertuigsoort": F.VEHICLE_TYPE,
    "vehicle type": F.VEHICLE_TYPE,
    "vehicletype": F.VEHICLE_TYPE,
    "soort": F.VEHICLE_TYPE,
    "voertuig": F.VEHICLE_TYPE,
    "categorie": F.VEHICLE_TYPE,
    # Fuel
    "brandstof": F.FUEL,
    "fuel": F.FUEL,
    "brandstofsoort": F.FUEL,
    "diesel/benzine": F.FUEL,
    "diesel / benzine": F.FUEL,
    # Company
    "bedrijf": F.COMPANY,
    "company": F.COMPANY,
    "firma": F.COMPANY,
    "bv": F.COMPANY,
    "onderneming": F.COMPANY,
    # Registered to
    "bv / opnaam": F.REGISTERED_TO,
    "bv/opnaam": F.REGISTERED_TO,
    "bv /opnaam": F.REGISTERED_TO,
    "op naam": F.REGISTERED_TO,
    "opnaam": F.REGISTERED_TO,
    "op_naam": F.REGISTERED_TO,
    "registered to": F.REGISTERED_TO,
    "registeredto": F.REGISTERED_TO,
    "tenaamstelling": F.REGISTERED_TO,
    # Registration date
    "bv /opnaam datum": F.REGISTRATION_DATE,
    "bv/opnaam datum": F.REGISTRATION_DATE,
    "bv / opnaam datum": F.REGISTRATION_DATE,
    "registratie datum": F.REGISTRATION_DATE,
    "registration date": F.REGISTRATION_DATE,
    # Chassis number
    "chassisnummer": F.CHASSIS_NUMBER,
    "chassis": F.CHASSIS_NUMBER,
    "vin": F.CHASSIS_NUMBER,
    "chassis number": F.CHASSIS_NUMBER,
    "chassisnr": F.CHASSIS_NUMBER,
    # APK (periodic inspection) date
    "apk tot": F.APK_DATE,
    "apk": F.APK_DATE,
    "apk datum": F.APK_DATE,
    "apk date": F.APK_DATE,
    "apk vervaldatum": F.APK_DATE,
    # Production date
    "productie datum": F.PRODUCTION_DATE,
    "productiedatum": F.PRODUCTION_DATE,
    "production date": F.PRODUCTION_DATE,
    "productiondate": F.PRODUCTION_DATE,
    "bouwjaar": F.PRODUCTION_DATE,
    "bouw jaar": F.PRODUCTION_DATE,
    "jaar": F.PRODUCTION_DATE,
    "year": F.PRODUCTION_DATE,
    "datum eerste toelating": F.PRODUCTION_DATE,
    "eerste toelating": F.PRODUCTION_DATE,
    # Equipment
    "gps": F.GPS,
    "pechhulp": F.ROADSIDE_ASSISTANCE,
    "roadside assistance": F.ROADSIDE_ASSISTANCE,
    "wegenwacht": F.ROADSIDE_ASSISTANCE,
    "reservesleutel": F.SPARE_KEY,
    "spare key": F.SPARE_KEY,
    "extra sleutel": F.SPARE_KEY,
    "winter b.": F.WINTER_TIRES,
    "winterbanden": F.WINTER_TIRES,
    "winter tires": F.WINTER_TIRES,
    "winterbanden aanwezig": F.WINTER_TIRES,
    "bandenmaat": F.TIRE_SIZE,
    "tire size": F.TIRE_SIZE,
    "tiresize": F.TIRE_SIZE,
    "banden maat": F.TIRE_SIZE,
    # Emission zone
    "eurozone": F.EURO_ZONE,
    "euro zone": F.EURO_ZONE,
    "euro": F.EURO_ZONE,
    # Free text
    "afspraken intern.": F.INTERNAL_NOTES,
    "afspraken intern": F.INTERNAL_NOTES,
    "interne afspraken": F.INTERNAL_NOTES,
    "internal appointments": F.INTERNAL_NOTES,
    "internal notes": F.INTERNAL_NOTES,
    "notes": F.REMARKS,
    "opmerkingen": F.REMARKS,
    "remarks": F.REMARKS,
    "notities": F.REMARKS,
    "algemene info per auto": F.GENERAL_INFO,
    "general info": F.GENERAL_INFO,
}

HEADER_SYNONYMS = MappingProxyType(_SYNONYMS)


def lookup_field(header: object) -> F | None:
    """CanonicalField for a raw header, or None when no synonym matches."""
    return HEADER_SYNONYMS.get(normalize_header(header))
