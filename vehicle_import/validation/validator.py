from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from ..models.candidate import CandidateRecord
from ..models.fields import CanonicalField

"""Record validator: seals each CandidateRecord with is_valid and errors.

Rules here only decide what is worth sending. Plate format, date parsing and
duplicate detection belong to the persistence boundary, which reports its
own per-item errors. Invalid records are kept: the output has the same
length and order as the input.
"""

__all__ = [
    "Rule",
    "MISSING_LICENSE_PLATE",
    "require_license_plate",
    "DEFAULT_RULES",
    "validate_record",
    "validate_records",
]

logger = logging.getLogger(__name__)

Rule = Callable[[CandidateRecord], str | None]

MISSING_LICENSE_PLATE = "Missing license plate"


def require_license_plate(record: CandidateRecord) -> str | None:
    plate = record.fields.get(CanonicalField.LICENSE_PLATE)
    if plate is None or not plate.strip():
        return MISSING_LICENSE_PLATE
    return None


DEFAULT_RULES: tuple[Rule, ...] = (require_license_plate,)


def validate_record(record: CandidateRecord, rules: Iterable[Rule] = DEFAULT_RULES) -> CandidateRecord:
    """Return `record` sealed with the messages of every failing rule."""
    errors = [msg for msg in (rule(record) for rule in rules) if msg]
    return record.sealed(errors)


def validate_records(
    records: Sequence[CandidateRecord], rules: Iterable[Rule] = DEFAULT_RULES
) -> list[CandidateRecord]:
    rules = tuple(rules)
    sealed = [validate_record(r, rules) for r in records]
    invalid = sum(1 for r in sealed if not r.is_valid)
    if invalid:
        logger.debug("validation: %d of %d candidates invalid", invalid, len(sealed))
    return sealed
