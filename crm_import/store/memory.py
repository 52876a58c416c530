from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.import_schema import EntityKind


class InMemoryStore:
    """Process-local store used in mock mode and tests."""

    def __init__(self, seed: dict[EntityKind, list[Any]] | None = None) -> None:
        self._records: dict[EntityKind, list[Any]] = {k: list(v) for k, v in (seed or {}).items()}
        self.append_calls = 0

    def list_existing(self, kind: EntityKind) -> list[Any]:
        return list(self._records.get(kind, []))

    def append_batch(self, kind: EntityKind, records: Sequence[Any]) -> int:
        self.append_calls += 1
        self._records.setdefault(kind, []).extend(records)
        return len(records)
