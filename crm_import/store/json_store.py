from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..mapping.schemas import get_schema
from ..models.import_schema import EntityKind
from .base import StoreError

"""Local key-value store backed by one JSON file.

Mirrors the browser CRM's storage layout: one key per entity kind
(``<prefix>contacts``, ``<prefix>deals``, ``<prefix>offers``) holding a JSON
array of records. Browser-written records (camelCase keys) are read as
well; records are written with snake_case field names. A record that cannot
be rebuilt raises StoreError. Writes replace the whole file atomically (temp file +
os.replace) so a crash mid-write never leaves a truncated store.
"""

__all__ = [
    "JsonFileStore",
]


class JsonFileStore:
    def __init__(self, path: Path | str, key_prefix: str = "reality_mark_") -> None:
        self.path = Path(path)
        self.key_prefix = key_prefix

    def key_for(self, kind: EntityKind) -> str:
        return f"{self.key_prefix}{get_schema(kind).table_name}"

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"store {self.path} is not a JSON object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise StoreError(f"cannot write store {self.path}: {e}") from e

    def list_existing(self, kind: EntityKind) -> list[Any]:
        record_type = get_schema(kind).record_type
        key = self.key_for(kind)
        items = self._load().get(key, [])
        if not isinstance(items, list):
            raise StoreError(f"store {self.path}: {key} is not a JSON array")
        records = []
        for pos, item in enumerate(items):
            if not isinstance(item, dict):
                continue
            try:
                records.append(record_type.from_dict(item))
            except (TypeError, ValueError) as e:
                raise StoreError(f"store {self.path}: bad record {key}[{pos}]: {e}") from e
        return records

    def append_batch(self, kind: EntityKind, records: Sequence[Any]) -> int:
        if not records:
            return 0
        data = self._load()
        items = data.setdefault(self.key_for(kind), [])
        items.extend(r.to_dict() for r in records)
        self._save(data)
        return len(records)
