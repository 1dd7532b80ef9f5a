from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord
from ..models.outcome import ImportOutcome

"""Failure log for one import operation.

Failed rows are buffered as ErrorRecords and written as JSON Lines to
`<logs_dir>/errors-YYYYMMDD-HHMMSS.log` (UTC). The file is only created when
there is something to write.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

DEFAULT_LOGS_DIR = Path("logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Collects ErrorRecords in memory; flush() appends them to the log file.

    Not thread-safe. The file name is fixed on first flush, so repeated
    flushes of one buffer append to the same file.
    """

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self.logs_dir = Path(logs_dir) if logs_dir is not None else DEFAULT_LOGS_DIR
        self._pending: list[ErrorRecord] = []
        self._path: Path | None = None

    def __len__(self) -> int:
        return len(self._pending)

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def record_outcome(self, source: str, outcome: ImportOutcome) -> int:
        """Buffer one record per failed row of `outcome`; returns how many were added."""
        records = [ErrorRecord.from_failed_item(source, item) for item in outcome.failed]
        self._pending.extend(records)
        return len(records)

    def _target(self) -> Path:
        if self._path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            self._path = self.logs_dir / f"errors-{stamp}.log"
        return self._path

    def flush(self) -> Path | None:
        """Write pending records. Returns the log path, or None if nothing was pending."""
        if not self._pending:
            return None
        path = self._target()
        with path.open("a", encoding="utf-8") as f:
            f.writelines(r.to_json_line() + "\n" for r in self._pending)
        self._pending.clear()
        return path
