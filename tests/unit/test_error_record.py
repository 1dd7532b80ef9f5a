from __future__ import annotations

import json
from datetime import datetime

from vehicle_import.models.candidate import CandidateRecord
from vehicle_import.models.error_record import ErrorRecord
from vehicle_import.models.fields import CanonicalField as F
from vehicle_import.models.outcome import FailedItem, FailureStage


def test_create_stamps_utc_with_z_suffix():
    record = ErrorRecord.create("fleet.csv", 4, "VALIDATION_FAILED", "Missing license plate")
    assert record.timestamp.endswith("Z")
    datetime.fromisoformat(record.timestamp.replace("Z", "+00:00"))
    assert record.license_plate is None


def test_to_json_line_has_fixed_keys():
    record = ErrorRecord(
        timestamp="2026-01-02T03:04:05Z",
        source="fleet.csv",
        row=4,
        license_plate="AA-11-BB",
        error_type="PERSISTENCE_FAILED",
        message="duplicate license plate: AA-11-BB",
    )
    data = json.loads(record.to_json_line())
    assert list(data) == ["timestamp", "source", "row", "license_plate", "error_type", "message"]
    assert "\n" not in record.to_json_line()


def test_to_json_line_keeps_non_ascii():
    record = ErrorRecord.create("wagenpark.csv", 1, "LOOKUP_FAILED", "geen voertuig gevonden: één")
    assert "één" in record.to_json_line()


def test_from_failed_item_uses_stage_for_error_type():
    item = FailedItem(
        source=CandidateRecord(7, {F.LICENSE_PLATE: "ZZ-99-ZZ"}),
        reason="RDW API request timed out",
        stage=FailureStage.LOOKUP,
    )
    record = ErrorRecord.from_failed_item("<plates>", item)
    assert record.row == 7
    assert record.error_type == "LOOKUP_FAILED"
    assert record.license_plate == "ZZ-99-ZZ"
    assert record.message == "RDW API request timed out"
