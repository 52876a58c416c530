from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from ..models.import_schema import EntityKind

"""Persistence collaborator interface.

The import pipeline only reads existing records (once per import, for
duplicate detection) and appends the accepted batch. Existing records are
never mutated.
"""

__all__ = [
    "StoreError",
    "RecordStore",
]


class StoreError(Exception):
    """Raised when the persistence backend cannot be read or written."""


@runtime_checkable
class RecordStore(Protocol):
    def list_existing(self, kind: EntityKind) -> list[Any]:
        """All persisted records of ``kind``."""
        ...

    def append_batch(self, kind: EntityKind, records: Sequence[Any]) -> int:
        """Append records; return the number written."""
        ...
