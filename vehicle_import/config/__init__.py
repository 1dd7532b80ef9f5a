from .loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    DatabaseConfig,
    ImportConfig,
    RegistryConfig,
    load_config,
    resolve_dsn,
)

__all__ = [
    "ConfigError",
    "DatabaseConfig",
    "RegistryConfig",
    "ImportConfig",
    "DEFAULT_CONFIG_PATH",
    "load_config",
    "resolve_dsn",
]
