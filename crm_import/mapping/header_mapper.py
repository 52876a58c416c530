from __future__ import annotations

import re
from collections.abc import Sequence

from ..models.import_schema import ABSENT, FieldMap, ImportSchema

"""Header normalization and column mapping.

Turns the header row of an import file into a FieldMap (logical field ->
column index, -1 when absent) in four ordered steps:

1. normalize every header cell two ways (compact: lowercase alphanumerics,
   lowered: lowercase only)
2. keyword rules: first header containing an include keyword and none of the
   field's avoid keywords
3. schema overrides: preferred two-keyword columns, then composite fields
   (parts only kept while the target itself has no column)
4. positional fallback to the schema template when the identity-critical
   fields could not be mapped at all

Mapping never raises; an unmapped field is left for validation to default
or reject.
"""

__all__ = [
    "normalize_header",
    "build_field_map",
    "mapped_fields",
]

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_header(cell: str) -> tuple[str, str]:
    """Return (compact, lowered) forms of one header cell."""
    lowered = (cell or "").strip().lower()
    return _NON_ALNUM.sub("", lowered), lowered


def _keyword_pass(compact: Sequence[str], schema: ImportSchema) -> FieldMap:
    field_map: FieldMap = {}
    for rule in schema.fields:
        field_map[rule.name] = ABSENT
        for idx, header in enumerate(compact):
            if rule.matches(header):
                field_map[rule.name] = idx
                break
    return field_map


def _apply_overrides(field_map: FieldMap, lowered: Sequence[str], schema: ImportSchema) -> None:
    for pref in schema.preferred:
        for idx, header in enumerate(lowered):
            if pref.matches(header):
                field_map[pref.field] = idx
                break
    for comp in schema.composites:
        if field_map.get(comp.target, ABSENT) != ABSENT:
            # 単一の name 列があれば分割列は使わない
            for part in comp.parts:
                field_map[part] = ABSENT


def _needs_positional_fallback(field_map: FieldMap, schema: ImportSchema) -> bool:
    trigger = schema.fallback_trigger or schema.field_names
    return all(field_map.get(name, ABSENT) == ABSENT for name in trigger)


def _positional_map(width: int, schema: ImportSchema) -> FieldMap:
    field_map: FieldMap = {name: ABSENT for name in schema.field_names}
    for idx, name in enumerate(schema.template):
        if idx < width:
            field_map[name] = idx
    return field_map


def build_field_map(header: Sequence[str], schema: ImportSchema) -> FieldMap:
    """Resolve every logical field of ``schema`` to a column index or -1."""
    normalized = [normalize_header(cell) for cell in header]
    compact = [c for c, _ in normalized]
    lowered = [lw for _, lw in normalized]

    field_map = _keyword_pass(compact, schema)
    _apply_overrides(field_map, lowered, schema)

    if _needs_positional_fallback(field_map, schema):
        return _positional_map(len(header), schema)
    return field_map


def mapped_fields(field_map: FieldMap) -> dict[str, int]:
    """Only the fields that resolved to a column (for display / debug)."""
    return {name: idx for name, idx in field_map.items() if idx != ABSENT}
