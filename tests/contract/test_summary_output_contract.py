from __future__ import annotations

import re
from pathlib import Path

from vehicle_import.cli import main as cli_main

"""SUMMARY output contract: exactly one line, last on stdout, fixed key order."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY rows=(\d+) imported=(\d+) failed=(\d+) invalid=(\d+) elapsed_sec=(\d+(?:\.\d+)?)$"
)


def test_summary_line_format_and_position(temp_workdir: Path, write_config, clean_env, fresh_logging, capsys):
    data = temp_workdir / "data" / "fleet.csv"
    data.write_text("Kenteken,Merk\nAA-11-BB,Toyota\n,Ford\nCC-22-DD,Opel\n", encoding="utf-8")

    cli_main(["table", str(data)])
    lines = capsys.readouterr().out.strip().splitlines()

    summary_lines = [line for line in lines if line.startswith("SUMMARY")]
    assert len(summary_lines) == 1
    assert lines[-1] == summary_lines[0]
    m = SUMMARY_PATTERN.match(summary_lines[0])
    assert m is not None
    rows, imported, failed, invalid, _ = m.groups()
    assert (rows, imported, failed, invalid) == ("3", "2", "1", "1")


def test_every_line_is_labeled(temp_workdir: Path, write_config, clean_env, fresh_logging, capsys):
    data = temp_workdir / "data" / "fleet.csv"
    data.write_text("Kenteken,Opmerkingen,Notes\nAA-11-BB,a,b\n,c,d\n", encoding="utf-8")

    cli_main(["table", str(data)])
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines
    assert all(re.match(r"^(INFO|WARN|ERROR|SUMMARY) ", line) for line in lines)
    # duplicate header mapping is surfaced, never silent
    assert any(line.startswith("WARN header mapping ambiguity") for line in lines)
