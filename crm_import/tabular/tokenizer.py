from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

"""Quoted-field tokenizer.

Two-state scanner (NORMAL, IN_QUOTE) over the whole text:

- ``"`` inside a quote followed by another ``"`` -> literal quote, both consumed
- any other ``"`` toggles NORMAL <-> IN_QUOTE
- delimiter in NORMAL closes the (trimmed) field
- ``\\r``, ``\\n`` or ``\\r\\n`` in NORMAL closes the field and the row
- everything else, including delimiters and line breaks IN_QUOTE, is literal

Unbalanced quotes are not an error: scanning continues to end of text in
whatever state it is in and rejection is left to row validation.
Rows may have different field counts.
"""

__all__ = [
    "tokenize",
    "format_row",
    "is_blank_row",
]

QUOTE = '"'


class _State(Enum):
    NORMAL = 0
    IN_QUOTE = 1


def tokenize(text: str, delimiter: str) -> list[list[str]]:
    """Split ``text`` into rows of trimmed string fields."""
    rows: list[list[str]] = []
    row: list[str] = []
    buf: list[str] = []
    state = _State.NORMAL
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch == QUOTE:
            if state is _State.IN_QUOTE and i + 1 < n and text[i + 1] == QUOTE:
                buf.append(QUOTE)
                i += 2
                continue
            state = _State.IN_QUOTE if state is _State.NORMAL else _State.NORMAL
        elif state is _State.NORMAL and ch == delimiter:
            row.append("".join(buf).strip())
            buf = []
        elif state is _State.NORMAL and ch in "\r\n":
            row.append("".join(buf).strip())
            rows.append(row)
            row = []
            buf = []
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
        else:
            buf.append(ch)
        i += 1

    # 末尾の改行なし最終行
    pending = "".join(buf)
    if pending or row:
        row.append(pending.strip())
        rows.append(row)
    return rows


def is_blank_row(row: Sequence[str]) -> bool:
    return all(not cell.strip() for cell in row)


def _needs_quotes(value: str, delimiter: str) -> bool:
    return any(c in value for c in (delimiter, QUOTE, "\r", "\n"))


def format_row(fields: Sequence[str], delimiter: str = ",") -> str:
    """Inverse of tokenize for a single row (no trailing line break).

    Fields containing the delimiter, quotes or line breaks are quoted with
    inner quotes doubled. Edge whitespace is not preserved: tokenize trims.
    """
    out = []
    for value in fields:
        value = "" if value is None else str(value)
        if _needs_quotes(value, delimiter):
            value = QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
        out.append(value)
    return delimiter.join(out)
