"""Header normalization, record mapping and field derivation."""

from .headers import ColumnMapping, HeaderMapping, build_header_mapping
from .heuristics import DEFAULT_DERIVERS, derive_missing_fields, extract_tire_size, split_brand_model
from .record_mapper import map_records, map_row
from .synonyms import HEADER_SYNONYMS, lookup_field, normalize_header

__all__ = [
    "HEADER_SYNONYMS",
    "normalize_header",
    "lookup_field",
    "ColumnMapping",
    "HeaderMapping",
    "build_header_mapping",
    "DEFAULT_DERIVERS",
    "derive_missing_fields",
    "split_brand_model",
    "extract_tire_size",
    "map_row",
    "map_records",
]
