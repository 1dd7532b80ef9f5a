from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .fields import CanonicalField

"""CandidateRecord model: one source row's worth of mapped vehicle data.

Lifecycle: built by the record mapper (is_valid=None), sealed once by the
validator (is_valid/errors set), then only read.
"""

__all__ = [
    "CandidateRecord",
]


@dataclass(frozen=True)
class CandidateRecord:
    """Mapped, not yet persisted vehicle row.

    Attributes:
        row_number: 1-based data row number in the source (header excluded)
        fields: canonical field -> trimmed, non-empty value (model may be "")
        extras: raw header label ("column N" when blank) -> value for columns
            with no canonical field
        is_valid: None until validated
        errors: validation messages in rule order
    """
    row_number: int
    fields: Mapping[CanonicalField, str] = field(default_factory=dict)
    extras: Mapping[str, str] = field(default_factory=dict)
    is_valid: bool | None = None
    errors: tuple[str, ...] = ()

    def get(self, name: CanonicalField) -> str | None:
        return self.fields.get(name)

    @property
    def license_plate(self) -> str | None:
        return self.fields.get(CanonicalField.LICENSE_PLATE)

    @property
    def is_sealed(self) -> bool:
        return self.is_valid is not None

    def sealed(self, errors: list[str] | tuple[str, ...]) -> CandidateRecord:
        """Return a copy annotated with the validation result."""
        return replace(self, is_valid=not errors, errors=tuple(errors))

    def to_payload(self) -> dict[str, str]:
        """Wire-name mapping handed to the persistence boundary."""
        return {f.wire_name: value for f, value in self.fields.items()}

    def to_preview_row(self) -> dict[str, Any]:
        """Display-name row for review lists, including validation state."""
        row: dict[str, Any] = {"row": self.row_number}
        for f in CanonicalField:
            if f in self.fields:
                row[f.display_name] = self.fields[f]
        row["valid"] = self.is_valid
        row["errors"] = list(self.errors)
        return row
