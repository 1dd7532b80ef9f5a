"""External vehicle registry lookup (RDW)."""

from .rdw import (
    RdwRegistry,
    RegistryError,
    RegistryNotFoundError,
    RegistryTimeoutError,
    RegistryUpstreamError,
    VehicleRegistry,
    format_plate,
    map_rdw_vehicle,
    normalize_plate,
)

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
