# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from vehicle_import.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """persistence: mock
table: vehicles
error_log_dir: ./logs
registry:
  url: https://rdw.test/resource/vehicles.json
  timeout_seconds: 2
database:
  host: localhost
  port: 5432
  user: fleet
  password: secret
  database: fleetdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def clean_env(monkeypatch):
    for key in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DISABLE_DB_CONNECT", "1")


@pytest.fixture()
def fresh_logging():
    # the stdout handler binds sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


def make_workbook(rows: list[list[object]]) -> bytes:
    """xlsx bytes with `rows` on the first sheet (first row = header)."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, index=False, header=False, sheet_name="Vehicles")
    return buf.getvalue()


@pytest.fixture()
def workbook_factory():
    return make_workbook
