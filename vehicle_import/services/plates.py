from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable, Sequence
from dataclasses import replace

from ..exceptions import NoImportableDataError
from ..models.candidate import CandidateRecord
from ..models.fields import CanonicalField
from ..models.outcome import FailedItem, FailureStage, ImportOutcome
from ..registry.rdw import RegistryError, VehicleRegistry
from ..validation.validator import DEFAULT_RULES, Rule, validate_records
from .committer import PersistenceBoundary, commit
from .progress import ProgressTracker

"""Plate-list import.

Each plate is resolved individually through the vehicle registry; plates the
registry cannot resolve fail at the LOOKUP stage. Resolved vehicles are then
validated and submitted in one batch through the same committer as the
tabular path.
"""

__all__ = [
    "parse_plate_list",
    "lookup_plates",
    "import_plates",
]

logger = logging.getLogger(__name__)

_PLATE_SEPARATORS = re.compile(r"[\n,]")


def parse_plate_list(text: str) -> list[str]:
    """Split free text on newlines and commas; trims and drops blanks."""
    return [p.strip() for p in _PLATE_SEPARATORS.split(text) if p.strip()]


def lookup_plates(
    plates: Sequence[str],
    registry: VehicleRegistry,
    show_progress: bool | None = None,
) -> tuple[list[CandidateRecord], list[FailedItem]]:
    """Resolve every plate. Returns (candidates, lookup failures), both in input order.

    row_number is the 1-based position of the plate in `plates`.
    """
    candidates: list[CandidateRecord] = []
    failures: list[FailedItem] = []
    with ProgressTracker(len(plates), enabled=show_progress) as progress:
        for i, plate in enumerate(progress.iterate(plates), start=1):
            try:
                attributes = registry.lookup(plate)
            except RegistryError as e:
                logger.debug("lookup failed plate=%s code=%s: %s", plate, e.code, e)
                failures.append(
                    FailedItem(
                        source=CandidateRecord(
                            row_number=i, fields={CanonicalField.LICENSE_PLATE: plate}
                        ),
                        reason=str(e),
                        stage=FailureStage.LOOKUP,
                    )
                )
            else:
                candidates.append(CandidateRecord(row_number=i, fields=dict(attributes)))
            progress.set_postfix(found=len(candidates), failed=len(failures))
    return candidates, failures


def import_plates(
    plates: Iterable[str],
    registry: VehicleRegistry,
    boundary: PersistenceBoundary,
    rules: Iterable[Rule] = DEFAULT_RULES,
    show_progress: bool | None = None,
) -> ImportOutcome:
    """Look up each plate and submit the found vehicles in one batch.

    Raises:
        NoImportableDataError: no plate given
        BatchSubmissionError: the boundary failed as a whole
    """
    plate_list = [p.strip() for p in plates if p and p.strip()]
    if not plate_list:
        raise NoImportableDataError("Please enter at least one valid license plate.")

    started = time.perf_counter()
    candidates, failures = lookup_plates(plate_list, registry, show_progress=show_progress)
    logger.info("registry lookup: %d found, %d failed", len(candidates), len(failures))
    outcome = commit(validate_records(candidates, rules), boundary, prior_failures=failures)
    return replace(outcome, elapsed_seconds=time.perf_counter() - started)
