from __future__ import annotations

"""Delimiter detection for CSV-like CRM exports.

Only the first line is inspected: header lines are the most reliable single
line to sniff, quoted content deeper in the file is not.
"""

__all__ = [
    "COMMA",
    "SEMICOLON",
    "TAB",
    "detect_delimiter",
]

COMMA = ","
SEMICOLON = ";"
TAB = "\t"


def first_line(text: str) -> str:
    line = text.split("\n", 1)[0]
    return line.rstrip("\r")


def detect_delimiter(text: str) -> str:
    """Pick comma, semicolon or tab from the first line. Never fails.

    >>> detect_delimiter("a;b;c\\n1;2;3")
    ';'
    >>> detect_delimiter("a,b;c")
    ','
    """
    line = first_line(text)
    if TAB in line:
        return TAB
    if SEMICOLON in line and COMMA not in line:
        return SEMICOLON
    return COMMA
