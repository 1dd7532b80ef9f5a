from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping

from ..models.fields import CanonicalField

"""Best-effort derivation of missing fields from other fields.

This layer runs after direct header mapping and never touches it. Each
deriver takes the current field mapping and returns a new one; a deriver
only fills fields that are absent, so running them in any order gives the
same result for the shipped set.
"""

__all__ = [
    "Deriver",
    "TIRE_SIZE_PATTERN",
    "split_brand_model",
    "extract_tire_size",
    "DEFAULT_DERIVERS",
    "derive_missing_fields",
]

logger = logging.getLogger(__name__)

Deriver = Callable[[Mapping[CanonicalField, str]], dict[CanonicalField, str]]

# 165/65/R14, 205/55R16, 185/60 R15, 165/65R14 ...
TIRE_SIZE_PATTERN = re.compile(r"\b(\d{3}/\d{2,3}\s*/?R?\s*\d{2})\b", re.IGNORECASE)

_TIRE_SIZE_SOURCES = (
    CanonicalField.REMARKS,
    CanonicalField.GENERAL_INFO,
    CanonicalField.INTERNAL_NOTES,
)
_WHITESPACE = re.compile(r"\s+")


def split_brand_model(fields: Mapping[CanonicalField, str]) -> dict[CanonicalField, str]:
    """Split a combined "brand model" value when no direct brand exists.

    "Volkswagen Golf GTI" -> brand "Volkswagen", model "Golf GTI".
    A single token becomes the brand and model is set to "" (tried, nothing found).
    """
    out = dict(fields)
    combined = out.get(CanonicalField.BRAND_AND_MODEL)
    if not combined or out.get(CanonicalField.BRAND):
        return out

    parts = _WHITESPACE.split(combined.strip(), maxsplit=1)
    if len(parts) == 2:
        out[CanonicalField.BRAND] = parts[0]
        out[CanonicalField.MODEL] = parts[1]
    else:
        out[CanonicalField.BRAND] = combined.strip()
        out[CanonicalField.MODEL] = ""
    return out


def extract_tire_size(fields: Mapping[CanonicalField, str]) -> dict[CanonicalField, str]:
    """Find a tire size in the free-text fields when no tire size column is set."""
    out = dict(fields)
    if out.get(CanonicalField.TIRE_SIZE):
        return out

    text = " ".join(out[f] for f in _TIRE_SIZE_SOURCES if out.get(f))
    if not text:
        return out
    match = TIRE_SIZE_PATTERN.search(text)
    if match:
        size = _WHITESPACE.sub("", match.group(1)).upper()
        logger.debug("extracted tire size %r from free text", size)
        out[CanonicalField.TIRE_SIZE] = size
    return out


DEFAULT_DERIVERS: tuple[Deriver, ...] = (
    split_brand_model,
    extract_tire_size,
)


def derive_missing_fields(
    fields: Mapping[CanonicalField, str],
    derivers: Iterable[Deriver] = DEFAULT_DERIVERS,
) -> dict[CanonicalField, str]:
    """Apply each deriver in turn and return the enriched mapping."""
    out = dict(fields)
    for derive in derivers:
        out = derive(out)
    return out
