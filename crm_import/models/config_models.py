from __future__ import annotations

from dataclasses import dataclass, field

from .import_schema import EntityKind

"""Config dataclasses for the CRM import tool.

Domain view of config/import.yml after the loader has validated it against
the JSON schema. Environment variables take precedence over DatabaseConfig
values when the CLI opens a PostgreSQL connection.
"""


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration (fallback for PG* env vars)."""
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class StoreConfig:
    """Where accepted records are persisted.

    backend:
      - memory: in-process only (mock mode, nothing survives the run)
      - json: local key-value JSON file (one key per entity kind)
      - postgres: contacts/deals/offers tables via psycopg2
    """
    backend: str = "json"
    path: str = "./store/crm.json"
    key_prefix: str = "reality_mark_"


@dataclass(frozen=True)
class FileMappingConfig:
    """Maps import files (fnmatch pattern on file name) to an entity kind."""
    pattern: str
    kind: EntityKind
    sheet: str | int = 0  # workbook input only


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    source_directory: str
    file_mappings: list[FileMappingConfig]
    encoding: str = "utf-8-sig"
    store: StoreConfig = field(default_factory=StoreConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
