from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Protocol

import httpx

from ..models.fields import CanonicalField

"""Vehicle registry lookup (license plate -> vehicle attributes).

RdwRegistry queries the Dutch RDW open-data API:
    GET https://opendata.rdw.nl/resource/m9d7-ebf2.json?kenteken=<PLATE>

Failures are typed so the plate-list import can report a reason per plate:
not found, timeout, or any other upstream problem.
"""

__all__ = [
    "RegistryError",
    "RegistryNotFoundError",
    "RegistryTimeoutError",
    "RegistryUpstreamError",
    "VehicleRegistry",
    "RdwRegistry",
    "normalize_plate",
    "format_plate",
    "map_rdw_vehicle",
]

logger = logging.getLogger(__name__)

DEFAULT_RDW_URL = "https://opendata.rdw.nl/resource/m9d7-ebf2.json"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")

_VEHICLE_TYPES = {
    "Personenauto": "Sedan",
    "Bedrijfsauto": "Van",
    "Motorfiets": "Motorcycle",
    "Bromfiets": "Scooter",
    "Aanhangwagen": "Trailer",
    "Oplegger": "Truck",
}

_FUEL_TYPES = {
    "Benzine": "Gasoline",
    "Diesel": "Diesel",
    "Elektriciteit": "Electric",
    "Hybride": "Hybrid",
    "LPG": "LPG",
    "Waterstof": "Hydrogen",
}


class RegistryError(Exception):
    code = "REGISTRY_ERROR"


class RegistryNotFoundError(RegistryError):
    code = "NOT_FOUND"

    def __init__(self, license_plate: str) -> None:
        super().__init__(f"No vehicle data found for license plate: {license_plate}")
        self.license_plate = license_plate


class RegistryTimeoutError(RegistryError):
    code = "TIMEOUT"

    def __init__(self) -> None:
        super().__init__("RDW API request timed out")


class RegistryUpstreamError(RegistryError):
    code = "UPSTREAM_ERROR"

    def __init__(self, status: int | None, detail: str) -> None:
        prefix = f"RDW API error: {status} " if status is not None else "RDW API error: "
        super().__init__(f"{prefix}{detail}".rstrip())
        self.status = status


class VehicleRegistry(Protocol):
    def lookup(self, license_plate: str) -> dict[CanonicalField, str]:
        """Vehicle attributes for `license_plate`; raises RegistryError on failure."""
        ...


def normalize_plate(license_plate: str) -> str:
    """Strip separators and upper-case: "ab-12-cd" -> "AB12CD"."""
    return _NON_ALNUM.sub("", license_plate).upper()


def format_plate(normalized: str) -> str:
    """Dashed display form for 6/7/8 character plates; others are returned as is."""
    n = len(normalized)
    if n == 6:
        return f"{normalized[0:2]}-{normalized[2:4]}-{normalized[4:6]}"
    if n == 7:
        return f"{normalized[0:2]}-{normalized[2:5]}-{normalized[5:7]}"
    if n == 8:
        return f"{normalized[0:2]}-{normalized[2:4]}-{normalized[4:8]}"
    return normalized


def _rdw_date(value: Any) -> str | None:
    """RDW dates are YYYYMMDD strings; returns ISO date or None."""
    if not value or not isinstance(value, str) or len(value) != 8 or not value.isdigit():
        return None
    try:
        return date(int(value[0:4]), int(value[4:6]), int(value[6:8])).isoformat()
    except ValueError:
        return None


def map_rdw_vehicle(normalized_plate: str, rdw: dict[str, Any]) -> dict[CanonicalField, str]:
    """Translate one RDW record into canonical fields (absent values left out)."""
    registration_date = _rdw_date(rdw.get("datum_tenaamstelling"))
    emission = rdw.get("emissiecode_omschrijving")
    values: dict[CanonicalField, str | None] = {
        CanonicalField.LICENSE_PLATE: format_plate(normalized_plate),
        CanonicalField.BRAND: rdw.get("merk") or None,
        CanonicalField.MODEL: rdw.get("handelsbenaming") or None,
        CanonicalField.VEHICLE_TYPE: _VEHICLE_TYPES.get(rdw.get("voertuigsoort") or ""),
        CanonicalField.CHASSIS_NUMBER: rdw.get("chassis") or None,
        CanonicalField.FUEL: _FUEL_TYPES.get(rdw.get("brandstof_omschrijving") or ""),
        CanonicalField.EURO_ZONE: emission if emission and "Euro" in emission else None,
        CanonicalField.APK_DATE: _rdw_date(rdw.get("vervaldatum_apk")),
        CanonicalField.PRODUCTION_DATE: _rdw_date(rdw.get("datum_eerste_toelating")),
        CanonicalField.REGISTERED_TO: "true" if registration_date else "false",
        CanonicalField.REGISTRATION_DATE: registration_date,
    }
    return {f: str(v) for f, v in values.items() if v is not None}


class RdwRegistry:
    """Synchronous RDW client. Use as a context manager or call close()."""

    def __init__(
        self,
        url: str = DEFAULT_RDW_URL,
        timeout_seconds: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout_seconds))

    def lookup(self, license_plate: str) -> dict[CanonicalField, str]:
        normalized = normalize_plate(license_plate)
        if not normalized:
            raise RegistryNotFoundError(license_plate)
        try:
            response = self._client.get(
                self._url,
                params={"kenteken": normalized},
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise RegistryTimeoutError() from e
        except httpx.HTTPError as e:
            raise RegistryUpstreamError(None, str(e)) from e

        if response.status_code >= 400:
            raise RegistryUpstreamError(response.status_code, response.reason_phrase)
        try:
            data = response.json()
        except ValueError as e:
            raise RegistryUpstreamError(response.status_code, f"invalid JSON: {e}") from e

        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            raise RegistryNotFoundError(license_plate)
        logger.debug("registry hit plate=%s", normalized)
        return map_rdw_vehicle(normalized, data[0])

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> RdwRegistry:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
