from __future__ import annotations

from ..mapping.schemas import get_schema
from ..models.import_schema import EntityKind
from ..tabular.tokenizer import format_row

"""Downloadable CSV templates, one per entity kind.

The header row lists the human labels in the schema's template order, so a
filled-in template maps back onto the positional order exactly.
"""

__all__ = ["render_template", "template_file_name"]


def template_file_name(kind: EntityKind | str) -> str:
    return f"{EntityKind.parse(kind).value}s_template.csv"


def render_template(kind: EntityKind | str) -> str:
    schema = get_schema(kind)
    lines = [format_row(schema.template_labels), format_row(schema.template_example)]
    return "\n".join(lines) + "\n"
