from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from ..models.fields import CanonicalField
from .synonyms import HEADER_SYNONYMS, normalize_header

"""Header normalizer: raw header row -> HeaderMapping.

Each header is trimmed and lowercased, then looked up in the synonym table.
Headers with no synonym are not errors; they stay available under their raw
label so derivation heuristics and previews can still see their values.

When two columns resolve to the same field, the later column wins for any
row where it holds a value. The field is listed in `ambiguous` and a warning
is logged, so the overwrite is never silent.
"""

__all__ = [
    "ColumnMapping",
    "HeaderMapping",
    "build_header_mapping",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnMapping:
    index: int
    label: str  # raw header, trimmed
    normalized: str
    field: CanonicalField | None


@dataclass(frozen=True)
class HeaderMapping:
    columns: tuple[ColumnMapping, ...]
    ambiguous: tuple[CanonicalField, ...] = ()

    @property
    def by_header(self) -> Mapping[str, CanonicalField]:
        """Normalized header -> field, for resolved headers only."""
        return MappingProxyType(
            {c.normalized: c.field for c in self.columns if c.field is not None}
        )

    @property
    def fields(self) -> tuple[CanonicalField, ...]:
        """Resolved fields in first-column order, without duplicates."""
        seen: dict[CanonicalField, None] = {}
        for c in self.columns:
            if c.field is not None:
                seen.setdefault(c.field, None)
        return tuple(seen)

    @property
    def unmatched(self) -> tuple[str, ...]:
        """Raw labels of non-empty headers with no canonical field."""
        return tuple(c.label for c in self.columns if c.field is None and c.label)

    @property
    def is_ambiguous(self) -> bool:
        return bool(self.ambiguous)


def build_header_mapping(
    headers: Sequence[str | None],
    synonyms: Mapping[str, CanonicalField] = HEADER_SYNONYMS,
) -> HeaderMapping:
    """Resolve every header position against the synonym table."""
    columns: list[ColumnMapping] = []
    for index, raw in enumerate(headers):
        label = "" if raw is None else str(raw).strip()
        normalized = normalize_header(label)
        columns.append(
            ColumnMapping(
                index=index,
                label=label,
                normalized=normalized,
                field=synonyms.get(normalized),
            )
        )

    counts = Counter(c.field for c in columns if c.field is not None)
    ambiguous = tuple(f for f, n in counts.items() if n > 1)
    for f in ambiguous:
        labels = [c.label for c in columns if c.field is f]
        logger.warning(
            "header mapping ambiguity: field=%s claimed by columns %s (last non-empty value wins)",
            f.wire_name,
            labels,
        )
    unmatched = [c.label for c in columns if c.field is None and c.label]
    if unmatched:
        logger.debug("unmatched headers kept as raw labels: %s", unmatched)

    return HeaderMapping(columns=tuple(columns), ambiguous=ambiguous)
