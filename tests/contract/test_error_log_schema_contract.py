from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from vehicle_import.cli import main as cli_main
from vehicle_import.models.error_record import ErrorRecord

"""Error log JSON Lines contract: fixed keys, no extras."""

ERROR_LOG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "required": ["timestamp", "source", "row", "license_plate", "error_type", "message"],
    "properties": {
        "timestamp": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$"},
        "source": {"type": "string", "minLength": 1},
        "row": {"type": "integer", "minimum": 1},
        "license_plate": {"type": ["string", "null"]},
        "error_type": {"type": "string", "pattern": "^[A-Z_]+$"},
        "message": {"type": "string"},
    },
}


def test_error_record_matches_schema():
    record = ErrorRecord.create("fleet.csv", 2, "PERSISTENCE_FAILED", "duplicate", license_plate="AA-11-BB")
    jsonschema.validate(json.loads(record.to_json_line()), ERROR_LOG_SCHEMA)


def test_schema_rejects_extra_key():
    record = json.loads(ErrorRecord.create("fleet.csv", 2, "VALIDATION_FAILED", "x").to_json_line())
    record["sheet"] = "not allowed"
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, ERROR_LOG_SCHEMA)


def test_cli_error_log_lines_match_schema(temp_workdir: Path, write_config, clean_env, fresh_logging, capsys):
    data = temp_workdir / "data" / "fleet.csv"
    data.write_text("Kenteken,Merk\nAA-11-BB,Toyota\n,Ford\naa11bb,Toyota\n", encoding="utf-8")

    assert cli_main(["table", str(data)]) == 2

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    records = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    for r in records:
        jsonschema.validate(r, ERROR_LOG_SCHEMA)
    assert [(r["row"], r["error_type"]) for r in records] == [
        (2, "VALIDATION_FAILED"),
        (3, "PERSISTENCE_FAILED"),
    ]
    assert "error log:" in capsys.readouterr().out


def test_no_error_log_when_everything_imports(temp_workdir: Path, write_config, clean_env, fresh_logging, capsys):
    data = temp_workdir / "data" / "fleet.csv"
    data.write_text("Kenteken\nAA-11-BB\n", encoding="utf-8")

    assert cli_main(["table", str(data)]) == 0
    assert list((temp_workdir / "logs").glob("errors-*.log")) == []
