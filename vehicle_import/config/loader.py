from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML (default config/import.yml)
- Validate against the bundled config_schema.json
- Apply defaults (mock persistence, `vehicles` table, RDW registry URL)
- Resolve the database DSN, environment variables first
"""

__all__ = [
    "ConfigError",
    "DatabaseConfig",
    "RegistryConfig",
    "ImportConfig",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "resolve_dsn",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")

DEFAULT_REGISTRY_URL = "https://opendata.rdw.nl/resource/m9d7-ebf2.json"
DEFAULT_REGISTRY_TIMEOUT = 5.0


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    """Database fallback settings. Environment variables take precedence."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class RegistryConfig:
    url: str = DEFAULT_REGISTRY_URL
    timeout_seconds: float = DEFAULT_REGISTRY_TIMEOUT


@dataclass(frozen=True)
class ImportConfig:
    persistence: str = "mock"  # mock | postgres
    table: str = "vehicles"
    error_log_dir: str = "logs"
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None, *, required: bool = True) -> ImportConfig:
    """Load and validate the YAML config.

    With required=False a missing file yields the defaults instead of an error.
    """
    path = path or DEFAULT_CONFIG_PATH
    if not path.exists():
        if not required:
            return ImportConfig()
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    reg_raw = data.get("registry") or {}
    db_raw = data.get("database") or {}
    return ImportConfig(
        persistence=data.get("persistence", "mock"),
        table=data.get("table", "vehicles"),
        error_log_dir=data.get("error_log_dir", "logs"),
        registry=RegistryConfig(
            url=reg_raw.get("url", DEFAULT_REGISTRY_URL),
            timeout_seconds=float(reg_raw.get("timeout_seconds", DEFAULT_REGISTRY_TIMEOUT)),
        ),
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
    )


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Build the libpq DSN.

    Priority:
        1. DATABASE_URL / PGDSN
        2. database.dsn from the config file
        3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, falling back to
           the individual config values
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn
