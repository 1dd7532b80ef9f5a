from __future__ import annotations

from pathlib import Path

import pytest

from vehicle_import.config.loader import (
    DEFAULT_REGISTRY_URL,
    ConfigError,
    DatabaseConfig,
    ImportConfig,
    load_config,
    resolve_dsn,
)


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.persistence == "mock"
    assert cfg.table == "vehicles"
    assert cfg.error_log_dir == "./logs"
    assert cfg.registry.url == "https://rdw.test/resource/vehicles.json"
    assert cfg.registry.timeout_seconds == 2.0
    assert cfg.database.user == "fleet"
    assert cfg.database.port == 5432


def test_load_config_defaults_for_missing_keys(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("persistence: postgres\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.persistence == "postgres"
    assert cfg.table == "vehicles"
    assert cfg.registry.url == DEFAULT_REGISTRY_URL
    assert cfg.database == DatabaseConfig()


def test_load_config_empty_file_is_defaults(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ImportConfig()


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(missing)


def test_load_config_missing_file_optional(temp_workdir: Path):
    assert load_config(temp_workdir / "nope.yml", required=False) == ImportConfig()


def test_load_config_invalid_yaml(temp_workdir: Path):
    path = temp_workdir / "config" / "import.yml"
    path.write_text("table: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(path)


def test_load_config_extra_field(write_config: Path):
    # additionalProperties: false
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_rejects_unknown_persistence(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("persistence: mock", "persistence: mysql")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_rejects_unsafe_table_name(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("table: vehicles", 'table: "vehicles; drop"')
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_resolve_dsn_prefers_environment(monkeypatch, clean_env):
    monkeypatch.setenv("DATABASE_URL", "postgresql://env/db")
    assert resolve_dsn(DatabaseConfig(dsn="postgresql://cfg/db")) == "postgresql://env/db"


def test_resolve_dsn_config_dsn(clean_env):
    assert resolve_dsn(DatabaseConfig(dsn="postgresql://cfg/db")) == "postgresql://cfg/db"


def test_resolve_dsn_from_parts(monkeypatch, clean_env):
    monkeypatch.setenv("PGHOST", "db.internal")
    dsn = resolve_dsn(DatabaseConfig(host="ignored", port=6543, user="fleet", password="pw", database="fleetdb"))
    assert dsn == "host=db.internal port=6543 user=fleet dbname=fleetdb password=pw"


def test_resolve_dsn_defaults(clean_env):
    assert resolve_dsn(DatabaseConfig()) == "host=localhost port=5432 user=postgres dbname=postgres"
