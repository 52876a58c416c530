from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..models.import_schema import ImportSchema

"""Duplicate detection against persisted records and the current batch.

Identity keys come from ``ImportSchema.dedup_field``. Contacts use the email,
compared case-insensitively; an empty email is never a duplicate of anything.
Kinds without a dedup field (Deals, Offers) are always accepted: re-importing
an MLS feed creates fresh rows.
"""

__all__ = [
    "EXISTING",
    "BATCH",
    "identity_key",
    "Deduplicator",
]

EXISTING = "existing"
BATCH = "batch"


def _value(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def identity_key(record: Any, schema: ImportSchema) -> str | None:
    """Normalized identity key, None when the record cannot collide."""
    if schema.dedup_field is None:
        return None
    value = _value(record, schema.dedup_field)
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    return key or None


class Deduplicator:
    """Existing keys are collected once per import, batch keys as rows are accepted."""

    def __init__(self, schema: ImportSchema, existing: Iterable[Any] = ()) -> None:
        self.schema = schema
        self._existing: set[str] = set()
        self._batch: set[str] = set()
        if schema.dedup_field is not None:
            for rec in existing:
                key = identity_key(rec, schema)
                if key is not None:
                    self._existing.add(key)

    def check(self, record: Any) -> str | None:
        """Return EXISTING / BATCH for a duplicate, None when unique."""
        key = identity_key(record, self.schema)
        if key is None:
            return None
        if key in self._existing:
            return EXISTING
        if key in self._batch:
            return BATCH
        return None

    def accept(self, record: Any) -> None:
        key = identity_key(record, self.schema)
        if key is not None:
            self._batch.add(key)
