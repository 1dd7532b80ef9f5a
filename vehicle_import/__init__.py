"""Bulk vehicle import: CSV / Excel tables and RDW plate lists."""

from .exceptions import (
    BatchSubmissionError,
    BoundaryUnavailableError,
    DecodeError,
    NoImportableDataError,
    VehicleImportError,
)
from .models import CandidateRecord, CanonicalField, ImportOutcome
from .services import import_plates, import_table, preview_table

__version__ = "0.1.0"

__all__ = [
    "CanonicalField",
    "CandidateRecord",
    "ImportOutcome",
    "VehicleImportError",
    "DecodeError",
    "NoImportableDataError",
    "BoundaryUnavailableError",
    "BatchSubmissionError",
    "preview_table",
    "import_table",
    "import_plates",
]
