from .validator import (
    DEFAULT_RULES,
    MISSING_LICENSE_PLATE,
    Rule,
    require_license_plate,
    validate_record,
    validate_records,
)

__all__ = [
    "Rule",
    "DEFAULT_RULES",
    "MISSING_LICENSE_PLATE",
    "require_license_plate",
    "validate_record",
    "validate_records",
]
