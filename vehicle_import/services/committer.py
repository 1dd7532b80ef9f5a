from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from ..exceptions import BatchSubmissionError
from ..models.candidate import CandidateRecord
from ..models.outcome import FailedItem, FailureStage, ImportedItem, ImportOutcome

"""Import partitioner / committer.

Splits validated candidates into valid and invalid, submits the valid ones to
the persistence boundary in one call, and merges the per-item response into
an ImportOutcome. No business validation happens here.

Every submitted candidate ends up in exactly one of `imported` / `failed`.
If that cannot be guaranteed (the boundary raised, or answered with the wrong
number of results) the whole operation fails with BatchSubmissionError and no
partial outcome is returned.
"""

__all__ = [
    "Created",
    "Rejected",
    "BoundaryResult",
    "PersistenceBoundary",
    "partition",
    "commit",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Created:
    """Boundary accepted the item; `entity` holds at least an `id`."""
    entity: Mapping[str, Any]


@dataclass(frozen=True)
class Rejected:
    """Boundary refused the item (duplicate plate, lookup failure, ...)."""
    reason: str


BoundaryResult = Created | Rejected


class PersistenceBoundary(Protocol):
    """External collaborator that creates vehicle records.

    Returns one result per input item, in input order.
    """

    def create_vehicles(self, vehicles: Sequence[Mapping[str, str]]) -> Sequence[BoundaryResult]:
        ...


def partition(
    candidates: Iterable[CandidateRecord],
) -> tuple[list[CandidateRecord], list[CandidateRecord]]:
    """Split sealed candidates into (valid, invalid), each in input order."""
    valid: list[CandidateRecord] = []
    invalid: list[CandidateRecord] = []
    for c in candidates:
        if not c.is_sealed:
            raise ValueError(f"candidate row {c.row_number} has not been validated")
        (valid if c.is_valid else invalid).append(c)
    return valid, invalid


def _validation_failure(record: CandidateRecord) -> FailedItem:
    return FailedItem(
        source=record,
        reason="; ".join(record.errors) or "invalid record",
        stage=FailureStage.VALIDATION,
    )


def commit(
    candidates: Sequence[CandidateRecord],
    boundary: PersistenceBoundary,
    prior_failures: Iterable[FailedItem] = (),
) -> ImportOutcome:
    """Submit the valid candidates and build the merged outcome.

    Args:
        candidates: validated candidates in source order
        boundary: persistence boundary receiving one batch call
        prior_failures: failures from earlier stages (registry lookups) to merge in

    Raises:
        BatchSubmissionError: the batch failed as a whole
    """
    valid, invalid = partition(candidates)
    failed: list[FailedItem] = list(prior_failures)
    failed.extend(_validation_failure(r) for r in invalid)
    imported: list[ImportedItem] = []

    if valid:
        payloads = [c.to_payload() for c in valid]
        logger.debug("submitting batch size=%d", len(payloads))
        try:
            results = list(boundary.create_vehicles(payloads))
        except Exception as e:
            raise BatchSubmissionError(f"batch submission failed: {e}") from e
        if len(results) != len(valid):
            raise BatchSubmissionError(
                f"boundary returned {len(results)} results for {len(valid)} submitted vehicles"
            )

        for record, result in zip(valid, results):
            if isinstance(result, Created):
                imported.append(ImportedItem(source=record, entity=result.entity))
            elif isinstance(result, Rejected):
                failed.append(
                    FailedItem(source=record, reason=result.reason, stage=FailureStage.PERSISTENCE)
                )
            else:
                raise BatchSubmissionError(
                    f"unexpected boundary result for row {record.row_number}: {result!r}"
                )
    else:
        logger.debug("no valid candidates, boundary not called")

    failed.sort(key=lambda f: f.source.row_number)
    return ImportOutcome(imported=imported, failed=failed)
