from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DatabaseConfig, FileMappingConfig, ImportConfig, StoreConfig
from ..models.import_schema import EntityKind

"""Config loader.

Responsibilities:
- Load YAML config/import.yml
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults (encoding=utf-8-sig, store backend=json) and build the
  ImportConfig domain model
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: Any) -> None:
    """Validate raw config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the data
            violates the schema (missing required keys, wrong types,
            unknown keys)
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


def _file_mappings(raw: dict[str, dict[str, Any]]) -> list[FileMappingConfig]:
    # YAML の記述順 = マッチ優先順
    return [
        FileMappingConfig(
            pattern=pattern,
            kind=EntityKind.parse(entry["schema"]),
            sheet=entry.get("sheet", 0),
        )
        for pattern, entry in raw.items()
    ]


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    store_raw = data.get("store") or {}
    defaults = StoreConfig()
    store = StoreConfig(
        backend=store_raw.get("backend", defaults.backend),
        path=store_raw.get("path", defaults.path),
        key_prefix=store_raw.get("key_prefix", defaults.key_prefix),
    )
    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return ImportConfig(
        source_directory=data["source_directory"],
        file_mappings=_file_mappings(data["file_mappings"]),
        encoding=data.get("encoding", "utf-8-sig"),
        store=store,
        database=db,
    )
