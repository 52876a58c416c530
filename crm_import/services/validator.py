from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import fields as dc_fields
from datetime import UTC, datetime
from typing import Any

import pandas as pd

from ..models.import_outcome import SKIPPED_ROW, SkippedRow
from ..models.import_schema import ABSENT, Coerce, FieldMap, FieldRule, ImportSchema
from ..models.records import CandidateRecord

"""Row validation and coercion.

One data row + FieldMap + ImportSchema -> a typed CandidateRecord, or a
SkippedRow when the schema's required-field policy fails. A rejected row is
counted, never raised: one malformed row must not block the rest of the file.
"""

__all__ = [
    "UNKNOWN_NAME",
    "cell",
    "coerce_number",
    "coerce_date",
    "coerce_email",
    "validate_row",
]

UNKNOWN_NAME = "Unknown"

_NUMBER_JUNK = re.compile(r"[^0-9.]")


def cell(row: Sequence[str], index: int) -> str:
    """Raw cell text, "" when the field is absent or the row is short."""
    if index == ABSENT or index < 0 or index >= len(row):
        return ""
    return (row[index] or "").strip()


def coerce_number(raw: str) -> float:
    """Keep digits and dots only ("$450,000" -> 450000.0); 0 when unparsable."""
    cleaned = _NUMBER_JUNK.sub("", raw or "")
    if not cleaned:
        return 0.0
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def coerce_email(raw: str) -> str:
    """An email lacking "@" is not an email: cleared, not imported verbatim."""
    value = (raw or "").strip()
    return value if "@" in value else ""


def coerce_date(raw: str) -> str | None:
    """ISO-8601 string for a parseable date, None otherwise."""
    if not raw:
        return None
    try:
        ts = pd.to_datetime(raw, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.isoformat()


def _coerce(rule: FieldRule, raw: str) -> Any:
    if not raw and rule.default is not None:
        return rule.default
    if rule.coerce is Coerce.NUMBER:
        return coerce_number(raw)
    if rule.coerce is Coerce.EMAIL:
        return coerce_email(raw)
    if rule.coerce is Coerce.CATEGORY and rule.category is not None:
        if not raw and rule.keep_blank:
            return ""
        return rule.category.match(raw)
    if rule.coerce is Coerce.DATE:
        parsed = coerce_date(raw)
        if parsed is not None:
            return parsed
        return rule.default if rule.default is not None else datetime.now(UTC).isoformat()
    return raw


def _is_filled(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None


def _synthesize_name(values: dict[str, Any], schema: ImportSchema) -> str:
    email = values.get(schema.name_email_field, "") if schema.name_email_field else ""
    if email:
        return email.split("@", 1)[0] or UNKNOWN_NAME
    return UNKNOWN_NAME


def validate_row(
    row: Sequence[str],
    field_map: FieldMap,
    schema: ImportSchema,
    row_number: int = 0,
) -> CandidateRecord | SkippedRow:
    """Validate and coerce one data row.

    Steps:
    1. extract raw cells via the FieldMap
    2. coerce per field rule (number / email / category / date / text)
    3. assemble composite fields (first + last name)
    4. apply the required-field policy -> SkippedRow on failure
    5. synthesize a missing name from the email local part, or "Unknown"
    """
    raw = {name: cell(row, field_map.get(name, ABSENT)) for name in schema.field_names}
    values: dict[str, Any] = {rule.name: _coerce(rule, raw[rule.name]) for rule in schema.fields}

    for comp in schema.composites:
        if not _is_filled(values.get(comp.target)):
            parts = [values[p] for p in comp.parts if _is_filled(values.get(p))]
            values[comp.target] = " ".join(parts)

    filled_cells = sum(1 for c in row if c and c.strip())
    if filled_cells < schema.min_filled_cells:
        return SkippedRow(
            row_number=row_number,
            reason=f"only {filled_cells} non-empty cell(s), need {schema.min_filled_cells}",
            error_type=SKIPPED_ROW,
        )
    if schema.accept_if_any and not any(_is_filled(values.get(n)) for n in schema.accept_if_any):
        return SkippedRow(
            row_number=row_number,
            reason="missing " + " and ".join(schema.accept_if_any),
            error_type=SKIPPED_ROW,
        )

    if schema.name_field and not _is_filled(values.get(schema.name_field)):
        values[schema.name_field] = _synthesize_name(values, schema)

    record_names = {f.name for f in dc_fields(schema.record_type)} - {"id"}
    return schema.record_type(**{k: v for k, v in values.items() if k in record_names})
