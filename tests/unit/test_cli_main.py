from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from vehicle_import.cli import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL, main as cli_main
from vehicle_import.db.vehicle_store import InMemoryVehicleStore
from vehicle_import.exceptions import BoundaryUnavailableError
from vehicle_import.models.fields import CanonicalField as F
from vehicle_import.registry.rdw import RegistryNotFoundError

"""CLI wiring: subcommands, persistence selection, .env handling."""


@pytest.fixture()
def csv_file(temp_workdir: Path) -> Path:
    path = temp_workdir / "data" / "fleet.csv"
    path.write_text("Kenteken,Merk,Model\nAA-11-BB,Toyota,Corolla\nCC-22-DD,Ford,Focus\n", encoding="utf-8")
    return path


@contextmanager
def _fake_pg(seen: dict):
    @contextmanager
    def fake_connection(dsn):
        seen["dsn"] = dsn
        yield MagicMock()

    with patch("vehicle_import.cli.main.pg_connection", fake_connection), \
         patch("vehicle_import.cli.main.PostgresVehicleStore") as store_cls:
        store_cls.side_effect = lambda conn, table: seen.setdefault("store", InMemoryVehicleStore())
        yield


def test_table_import_mock_mode(csv_file, clean_env, fresh_logging, capsys):
    code = cli_main(["table", str(csv_file)])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS_ALL
    assert "INFO loaded fleet.csv: 2 rows, 2 valid, 0 with errors" in out
    assert "SUMMARY rows=2 imported=2 failed=0 invalid=0" in out


def test_table_preview_does_not_import(csv_file, clean_env, fresh_logging, capsys):
    seen: dict = {}
    with _fake_pg(seen):
        code = cli_main(["table", str(csv_file), "--preview"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS_ALL
    assert "Kenteken->licensePlate" in out
    assert "SUMMARY rows=2 valid=2 invalid=0" in out
    assert seen == {}


def test_table_format_hint(temp_workdir, clean_env, fresh_logging, capsys):
    path = temp_workdir / "data" / "export.dat"
    path.write_text("Kenteken;Merk\nAA-11-BB;Toyota\n", encoding="utf-8")
    assert cli_main(["table", str(path), "--format", "csv"]) == EXIT_SUCCESS_ALL


def test_unknown_format_hint_is_fatal(csv_file, clean_env, fresh_logging, capsys):
    code = cli_main(["table", str(csv_file), "--format", "pdf"])
    assert code == EXIT_FATAL
    assert "ERROR import: unknown table format" in capsys.readouterr().out


def test_missing_input_file_is_fatal(temp_workdir, clean_env, fresh_logging, capsys):
    code = cli_main(["table", str(temp_workdir / "data" / "missing.csv")])
    assert code == EXIT_FATAL
    assert "ERROR input:" in capsys.readouterr().out
    assert list((temp_workdir / "logs").glob("errors-*.log")) == []


def test_explicit_missing_config_is_fatal(csv_file, clean_env, fresh_logging, capsys):
    code = cli_main(["--config", "config/other.yml", "table", str(csv_file)])
    assert code == EXIT_FATAL
    assert "ERROR config: config file not found" in capsys.readouterr().out


def test_debug_flag_enables_debug_lines(csv_file, clean_env, fresh_logging, capsys):
    cli_main(["--debug", "table", str(csv_file)])
    assert "DEBUG persistence=mock" in capsys.readouterr().out


def test_postgres_mode_uses_resolved_dsn(csv_file, write_config, clean_env, monkeypatch, fresh_logging, capsys):
    monkeypatch.delenv("DISABLE_DB_CONNECT")
    text = write_config.read_text(encoding="utf-8").replace("persistence: mock", "persistence: postgres")
    write_config.write_text(text, encoding="utf-8")

    seen: dict = {}
    with _fake_pg(seen):
        code = cli_main(["table", str(csv_file)])
    assert code == EXIT_SUCCESS_ALL
    assert seen["dsn"] == "host=localhost port=5432 user=fleet dbname=fleetdb password=secret"
    assert len(seen["store"].vehicles) == 2


def test_disable_db_connect_forces_mock(csv_file, write_config, clean_env, fresh_logging, capsys):
    text = write_config.read_text(encoding="utf-8").replace("persistence: mock", "persistence: postgres")
    write_config.write_text(text, encoding="utf-8")

    seen: dict = {}
    with _fake_pg(seen):
        code = cli_main(["table", str(csv_file)])
    assert code == EXIT_SUCCESS_ALL
    assert seen == {}


def test_dotenv_overrides_process_environment(temp_workdir, csv_file, write_config, clean_env, monkeypatch, fresh_logging, capsys):
    monkeypatch.delenv("DISABLE_DB_CONNECT")
    monkeypatch.setenv("DATABASE_URL", "postgresql://process/db")
    (temp_workdir / ".env").write_text("DATABASE_URL=postgresql://dotenv/db\n", encoding="utf-8")
    text = write_config.read_text(encoding="utf-8").replace("persistence: mock", "persistence: postgres")
    write_config.write_text(text, encoding="utf-8")

    seen: dict = {}
    with _fake_pg(seen):
        cli_main(["table", str(csv_file)])
    assert seen["dsn"] == "postgresql://dotenv/db"


def test_database_unreachable_is_fatal(csv_file, write_config, clean_env, monkeypatch, fresh_logging, capsys):
    monkeypatch.delenv("DISABLE_DB_CONNECT")
    text = write_config.read_text(encoding="utf-8").replace("persistence: mock", "persistence: postgres")
    write_config.write_text(text, encoding="utf-8")

    @contextmanager
    def unreachable(dsn):
        raise BoundaryUnavailableError("database connection failed: could not connect")
        yield  # pragma: no cover

    with patch("vehicle_import.cli.main.pg_connection", unreachable):
        code = cli_main(["table", str(csv_file)])
    assert code == EXIT_FATAL
    assert "ERROR import: database connection failed" in capsys.readouterr().out


class FakeRegistry:
    def __init__(self, *args, **kwargs):
        self.kwargs = kwargs

    def lookup(self, plate):
        if plate.startswith("ZZ"):
            raise RegistryNotFoundError(plate)
        return {F.LICENSE_PLATE: plate, F.BRAND: "TOYOTA"}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None


def test_plates_command_partial_failure(temp_workdir, write_config, clean_env, fresh_logging, capsys):
    plate_file = temp_workdir / "data" / "plates.txt"
    plate_file.write_text("CC-22-DD\nZZ-99-ZZ\n", encoding="utf-8")

    with patch("vehicle_import.cli.main.RdwRegistry", FakeRegistry):
        code = cli_main(["plates", "AA-11-BB,EE-33-FF", "--file", str(plate_file)])
    out = capsys.readouterr().out
    assert code == EXIT_PARTIAL_FAILURE
    assert "WARN row 4 lookup: No vehicle data found for license plate: ZZ-99-ZZ" in out
    assert "SUMMARY rows=4 imported=3 failed=1 invalid=0" in out


def test_plates_command_without_plates_is_fatal(temp_workdir, clean_env, fresh_logging, capsys):
    with patch("vehicle_import.cli.main.RdwRegistry", FakeRegistry):
        code = cli_main(["plates"])
    assert code == EXIT_FATAL
    assert "ERROR import: Please enter at least one valid license plate." in capsys.readouterr().out


def test_subcommand_is_required(fresh_logging):
    with pytest.raises(SystemExit):
        cli_main([])


def test_debug_flag_after_subcommand(csv_file, clean_env, fresh_logging, capsys):
    cli_main(["table", str(csv_file), "--debug"])
    assert "DEBUG persistence=mock" in capsys.readouterr().out
