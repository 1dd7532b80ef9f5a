from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models.candidate import CandidateRecord
from ..models.fields import CanonicalField
from ..models.raw_table import RawTable
from .headers import HeaderMapping, build_header_mapping
from .heuristics import DEFAULT_DERIVERS, Deriver, derive_missing_fields

"""Record mapper: RawTable rows -> CandidateRecord sequence.

Steps per row, in source order:
1. direct mapping of resolved columns (trimmed, empty -> absent)
2. unmatched columns collected into `extras` under their raw label, or
   "column N" (1-based) when the header cell is blank
3. derivation heuristics (brand/model split, tire size from free text)

Fully blank rows are dropped here and never reach validation. Output is a
pure function of the table and the mapping.
"""

__all__ = [
    "map_row",
    "map_records",
]

logger = logging.getLogger(__name__)


def _clean(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def map_row(
    row_number: int,
    cells: tuple[str | None, ...],
    mapping: HeaderMapping,
    derivers: Iterable[Deriver] = DEFAULT_DERIVERS,
) -> CandidateRecord | None:
    """Map one raw row. Returns None for a blank row."""
    fields: dict[CanonicalField, str] = {}
    extras: dict[str, str] = {}

    for column in mapping.columns:
        if column.index >= len(cells):
            break
        value = _clean(cells[column.index])
        if value is None:
            continue
        if column.field is not None:
            fields[column.field] = value  # later columns overwrite earlier ones
        else:
            extras[column.label or f"column {column.index + 1}"] = value

    if not fields and not extras:
        return None

    fields = derive_missing_fields(fields, derivers)
    return CandidateRecord(row_number=row_number, fields=fields, extras=extras)


def map_records(
    table: RawTable,
    mapping: HeaderMapping | None = None,
    derivers: Iterable[Deriver] = DEFAULT_DERIVERS,
) -> list[CandidateRecord]:
    """Map every non-blank row of `table`, preserving order.

    row_number is the 1-based position of the row among the table's data rows,
    so it points back at the source row even when blank rows are skipped.
    """
    if mapping is None:
        mapping = build_header_mapping(table.headers)
    derivers = tuple(derivers)

    candidates: list[CandidateRecord] = []
    skipped = 0
    for i, cells in enumerate(table.rows, start=1):
        record = map_row(i, cells, mapping, derivers)
        if record is None:
            skipped += 1
            continue
        candidates.append(record)
    logger.debug(
        "mapped rows=%d candidates=%d blank_skipped=%d", len(table.rows), len(candidates), skipped
    )
    return candidates
