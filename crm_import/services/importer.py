from __future__ import annotations

import threading
from collections.abc import Sequence

from ..models.import_outcome import ImportOutcome
from ..models.import_schema import EntityKind
from ..store.base import RecordStore
from .pipeline import run_import, run_import_rows

"""Import call-site: pipeline + persistence store.

Queries the store once for existing records, runs the pipeline, and appends
the accepted batch once. A ParseError propagates before anything is written.
At most one import may be in flight per Importer; the store's read/write pair
is assumed not to change underneath a running import.
"""

__all__ = [
    "ImportInProgressError",
    "Importer",
]


class ImportInProgressError(RuntimeError):
    """Another import is already running on this Importer."""


class Importer:
    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self._lock = threading.Lock()

    def _guard(self) -> None:
        if not self._lock.acquire(blocking=False):
            raise ImportInProgressError("an import is already in progress")

    def _persist(self, outcome: ImportOutcome) -> ImportOutcome:
        if outcome.accepted:
            self.store.append_batch(outcome.kind, outcome.accepted)
        return outcome

    def import_text(self, text: str, kind: EntityKind | str) -> ImportOutcome:
        kind = EntityKind.parse(kind)
        self._guard()
        try:
            existing = self.store.list_existing(kind)
            return self._persist(run_import(text, kind, existing))
        finally:
            self._lock.release()

    def import_rows(self, rows: Sequence[Sequence[str]], kind: EntityKind | str) -> ImportOutcome:
        kind = EntityKind.parse(kind)
        self._guard()
        try:
            existing = self.store.list_existing(kind)
            return self._persist(run_import_rows(rows, kind, existing))
        finally:
            self._lock.release()
