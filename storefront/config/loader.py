from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, ImportSettings, StoreConfig

"""Config loader.

Responsibilities:
- Load the YAML config (default ``config/storefront.yml``)
- Validate it against the packaged JSON schema (unknown keys are rejected)
- Apply defaults for every optional key

Environment overrides for the database connection are applied later, when
the store is opened (see ``storefront.store.factory``).
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/storefront.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or unreadable, or the data
            violates it (missing required keys, wrong types, unknown keys).
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


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    _validate_config_schema(data)

    store_raw = data["store"]
    store = StoreConfig(
        backend=store_raw["backend"],
        dsn=store_raw.get("dsn"),
        host=store_raw.get("host"),
        port=store_raw.get("port"),
        user=store_raw.get("user"),
        password=store_raw.get("password"),
        database=store_raw.get("database"),
        table=store_raw.get("table", "catalog_documents"),
    )

    import_raw = data.get("import", {})
    defaults = ImportSettings()
    import_settings = ImportSettings(
        auto_accept_confidence=import_raw.get("auto_accept_confidence", defaults.auto_accept_confidence),
        refresh_counts=import_raw.get("refresh_counts", defaults.refresh_counts),
        detect_duplicates=import_raw.get("detect_duplicates", defaults.detect_duplicates),
        error_csv_directory=import_raw.get("error_csv_directory", defaults.error_csv_directory),
    )

    return AppConfig(
        store=store,
        import_settings=import_settings,
        logs_directory=data.get("logs_directory", "./logs"),
    )
