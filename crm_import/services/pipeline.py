from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..mapping.header_mapper import build_field_map
from ..mapping.schemas import get_schema
from ..models.import_outcome import DUPLICATE_ROW, ImportOutcome, SkippedRow
from ..models.import_schema import EntityKind
from ..models.records import CandidateRecord
from ..tabular.delimiter import detect_delimiter
from ..tabular.tokenizer import is_blank_row, tokenize
from .dedup import Deduplicator
from .validator import validate_row

"""Import pipeline for one file.

detect delimiter -> tokenize -> drop blank rows -> sanity gates -> map header
-> validate/coerce each data row -> dedup -> ImportOutcome

Pure computation over an in-memory string: no I/O, no logging, no shared
state between calls. Structural problems raise ParseError; bad rows are only
counted.
"""

__all__ = [
    "ParseError",
    "EMPTY_FILE_MESSAGE",
    "NO_COLUMNS_MESSAGE",
    "run_import",
    "run_import_rows",
]

EMPTY_FILE_MESSAGE = "File appears to be empty or missing headers"
NO_COLUMNS_MESSAGE = (
    "Could not detect columns. Check that the file is comma, semicolon or tab separated."
)

_BOM = "\ufeff"


class ParseError(Exception):
    """Whole file unusable; nothing from it may be persisted."""


def _import_rows(
    rows: Sequence[Sequence[str]],
    kind: EntityKind | str,
    existing: Iterable[Any],
    delimiter: str | None,
) -> ImportOutcome:
    schema = get_schema(kind)
    # 行番号はファイル上の位置 (1-based) を保持
    numbered = [(i + 1, row) for i, row in enumerate(rows) if not is_blank_row(row)]
    if len(numbered) < 2:
        raise ParseError(EMPTY_FILE_MESSAGE)
    _, header = numbered[0]
    if len(header) <= 1:
        raise ParseError(NO_COLUMNS_MESSAGE)

    field_map = build_field_map(header, schema)
    dedup = Deduplicator(schema, existing)

    accepted: list[CandidateRecord] = []
    rejections: list[SkippedRow] = []
    duplicate_count = 0
    skipped_count = 0

    for row_number, row in numbered[1:]:
        result = validate_row(row, field_map, schema, row_number)
        if isinstance(result, SkippedRow):
            skipped_count += 1
            rejections.append(result)
            continue
        verdict = dedup.check(result)
        if verdict is not None:
            duplicate_count += 1
            rejections.append(
                SkippedRow(
                    row_number=row_number,
                    reason=f"duplicate of {verdict} record",
                    error_type=DUPLICATE_ROW,
                )
            )
            continue
        dedup.accept(result)
        accepted.append(result)

    return ImportOutcome(
        kind=schema.kind,
        accepted=accepted,
        duplicate_count=duplicate_count,
        skipped_count=skipped_count,
        field_map=field_map,
        delimiter=delimiter,
        rejections=rejections,
    )


def run_import(text: str, kind: EntityKind | str, existing: Iterable[Any] = ()) -> ImportOutcome:
    """Import decoded file text as ``kind``.

    Args:
        text: whole file contents (already decoded)
        kind: contact / deal / offer
        existing: persisted records of the same kind, for duplicate detection

    Raises:
        ParseError: empty/header-only file, or header row with a single column
    """
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    delimiter = detect_delimiter(text)
    rows = tokenize(text, delimiter)
    return _import_rows(rows, kind, existing, delimiter)


def run_import_rows(
    rows: Sequence[Sequence[str]],
    kind: EntityKind | str,
    existing: Iterable[Any] = (),
) -> ImportOutcome:
    """Import rows that were already split into fields (workbook input)."""
    return _import_rows(rows, kind, existing, None)
