from __future__ import annotations

from dataclasses import dataclass, field

from .import_schema import EntityKind, FieldMap
from .records import CandidateRecord

"""Per-import result models.

ImportOutcome is the contract returned to the caller of one import run:
the accepted records to persist plus the duplicate and skip tallies.
SkippedRow carries the audit trail for every row that was not accepted.
"""

__all__ = [
    "SKIPPED_ROW",
    "DUPLICATE_ROW",
    "SkippedRow",
    "ImportOutcome",
]

SKIPPED_ROW = "SKIPPED_ROW"
DUPLICATE_ROW = "DUPLICATE_ROW"


@dataclass(frozen=True)
class SkippedRow:
    """A data row that was counted but not accepted."""
    row_number: int  # 1-based line in the file, header = 1
    reason: str
    error_type: str = SKIPPED_ROW  # SKIPPED_ROW | DUPLICATE_ROW


@dataclass(frozen=True)
class ImportOutcome:
    """accepted / duplicate / skipped tally of one import run.

    Invariant: len(accepted) + duplicate_count + skipped_count == rows_considered
    """
    kind: EntityKind
    accepted: list[CandidateRecord]
    duplicate_count: int
    skipped_count: int
    field_map: FieldMap = field(default_factory=dict)
    delimiter: str | None = None  # None for workbook input
    rejections: list[SkippedRow] = field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    @property
    def rows_considered(self) -> int:
        return self.accepted_count + self.duplicate_count + self.skipped_count
