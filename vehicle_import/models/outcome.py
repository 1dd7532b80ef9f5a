from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .candidate import CandidateRecord

"""Import outcome models returned to the caller of one import operation.

ImportOutcome is caller-owned: each operation builds and returns its own
instance, nothing is kept between operations.
"""

__all__ = [
    "FailureStage",
    "ImportedItem",
    "FailedItem",
    "ImportOutcome",
]


class FailureStage(Enum):
    """Where a row dropped out of the import.

    - VALIDATION: rejected locally before submission (no network attempt)
    - LOOKUP: registry lookup failed (plate-list path only)
    - PERSISTENCE: rejected by the persistence boundary
    """
    VALIDATION = "validation"
    LOOKUP = "lookup"
    PERSISTENCE = "persistence"


@dataclass(frozen=True)
class ImportedItem:
    source: CandidateRecord
    entity: Mapping[str, Any]  # created-entity descriptor from the boundary

    @property
    def entity_id(self) -> Any:
        return self.entity.get("id")


@dataclass(frozen=True)
class FailedItem:
    source: CandidateRecord
    reason: str
    stage: FailureStage


@dataclass(frozen=True)
class ImportOutcome:
    """Imported vs failed rows of one operation, each bucket in source row order."""
    imported: list[ImportedItem] = field(default_factory=list)
    failed: list[FailedItem] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def imported_count(self) -> int:
        return len(self.imported)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def total(self) -> int:
        return self.imported_count + self.failed_count

    @property
    def invalid_count(self) -> int:
        """Rows that never reached the boundary because validation rejected them."""
        return sum(1 for f in self.failed if f.stage is FailureStage.VALIDATION)

    @property
    def all_imported(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        """Plain structure for rendering in a review list (JSON-safe)."""
        return {
            "imported": [
                {"row": item.source.row_number, "entity": dict(item.entity)}
                for item in self.imported
            ],
            "failed": [
                {
                    "row": item.source.row_number,
                    "licensePlate": item.source.license_plate,
                    "stage": item.stage.value,
                    "reason": item.reason,
                }
                for item in self.failed
            ],
            "counts": {
                "imported": self.imported_count,
                "failed": self.failed_count,
                "invalid": self.invalid_count,
            },
        }
