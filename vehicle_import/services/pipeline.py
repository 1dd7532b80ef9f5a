from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, replace

from ..exceptions import NoImportableDataError
from ..mapping.headers import HeaderMapping, build_header_mapping
from ..mapping.heuristics import DEFAULT_DERIVERS, Deriver
from ..mapping.record_mapper import map_records
from ..models.candidate import CandidateRecord
from ..models.outcome import ImportOutcome
from ..tabular.reader import decode_table
from ..validation.validator import DEFAULT_RULES, Rule, validate_records
from .committer import PersistenceBoundary, commit

"""Tabular import orchestration.

decode -> normalize headers -> map -> validate -> partition/commit, run
sequentially for one operation. preview_table stops before submission so a
user can look at row N of the file as candidate N.
"""

__all__ = [
    "TablePreview",
    "preview_table",
    "import_table",
]

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = (
    "No valid vehicle data found. Make sure the first row contains headers "
    "and subsequent rows contain data."
)


@dataclass(frozen=True)
class TablePreview:
    """Validated candidates of one file, not yet submitted."""
    header_mapping: HeaderMapping
    candidates: list[CandidateRecord]

    @property
    def valid_count(self) -> int:
        return sum(1 for c in self.candidates if c.is_valid)

    @property
    def invalid_count(self) -> int:
        return len(self.candidates) - self.valid_count


def preview_table(
    data: bytes,
    filename: str | None = None,
    fmt: str | None = None,
    derivers: Iterable[Deriver] = DEFAULT_DERIVERS,
    rules: Iterable[Rule] = DEFAULT_RULES,
) -> TablePreview:
    """Decode, map and validate `data` without submitting anything.

    Raises:
        NoImportableDataError: no header, no data rows, or only blank rows
        DecodeError: unknown format hint or undecodable text
    """
    table = decode_table(data, filename=filename, hint=fmt)
    if table.is_empty:
        raise NoImportableDataError(NO_DATA_MESSAGE)

    mapping = build_header_mapping(table.headers)
    candidates = validate_records(map_records(table, mapping, derivers), rules)
    if not candidates:
        raise NoImportableDataError(NO_DATA_MESSAGE)

    preview = TablePreview(header_mapping=mapping, candidates=candidates)
    logger.info(
        "loaded %s: %d rows, %d valid, %d with errors",
        filename or "table",
        len(candidates),
        preview.valid_count,
        preview.invalid_count,
    )
    return preview


def import_table(
    data: bytes,
    boundary: PersistenceBoundary,
    filename: str | None = None,
    fmt: str | None = None,
    derivers: Iterable[Deriver] = DEFAULT_DERIVERS,
    rules: Iterable[Rule] = DEFAULT_RULES,
) -> ImportOutcome:
    """Run the full tabular import and return its outcome.

    Raises:
        NoImportableDataError / DecodeError: input unusable, nothing submitted
        BatchSubmissionError: the boundary failed as a whole; retry the operation
    """
    started = time.perf_counter()
    preview = preview_table(data, filename=filename, fmt=fmt, derivers=derivers, rules=rules)
    outcome = commit(preview.candidates, boundary)
    return replace(outcome, elapsed_seconds=time.perf_counter() - started)
