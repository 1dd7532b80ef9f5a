from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .outcome import FailedItem

"""ErrorRecord model for the structured failure log.

One record per failed row, written as JSON Lines by
vehicle_import.logging.error_log.ErrorLogBuffer. Operation-level failures (bad config,
unreadable input) are only logged to stdout and never produce a record.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: input file name, or "<plates>" for plate-list imports
        row: 1-based data row number
        license_plate: plate of the failed row when known
        error_type: classification in UPPER_SNAKE_CASE
        message: human-readable reason
    """
    timestamp: str
    source: str
    row: int
    license_plate: str | None
    error_type: str
    message: str

    @staticmethod
    def create(
        source: str,
        row: int,
        error_type: str,
        message: str,
        license_plate: str | None = None,
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            row=row,
            license_plate=license_plate,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_failed_item(source: str, item: FailedItem) -> ErrorRecord:
        """Build a record from an outcome failure; error_type derives from the stage."""
        return ErrorRecord.create(
            source=source,
            row=item.source.row_number,
            error_type=f"{item.stage.value.upper()}_FAILED",
            message=item.reason,
            license_plate=item.source.license_plate,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
