from __future__ import annotations

"""Exception hierarchy shared by the import pipeline stages.

Only operation-level failures are raised. Row-level problems never surface
as exceptions; they are reported inside ImportOutcome.failed instead.
"""

__all__ = [
    "VehicleImportError",
    "DecodeError",
    "NoImportableDataError",
    "BoundaryUnavailableError",
    "BatchSubmissionError",
]


class VehicleImportError(Exception):
    """Base class for operation-level import failures."""


class DecodeError(VehicleImportError):
    """Raised when input bytes cannot be decoded into a table at all."""


class NoImportableDataError(VehicleImportError):
    """Raised when a decoded table holds no header or no data rows."""


class BoundaryUnavailableError(VehicleImportError):
    """Raised by a persistence boundary that cannot process the batch at all."""


class BatchSubmissionError(VehicleImportError):
    """Raised when the batch submission failed as a whole; retry the operation."""
