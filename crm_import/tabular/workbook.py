from __future__ import annotations

import zipfile
from pathlib import Path

import pandas as pd

"""Workbook reader for .xlsx CRM exports.

Address-book and MLS tools often hand out spreadsheets instead of CSV text.
The sheet is read without a header and every cell is turned into a trimmed
string, so the result has the same shape as tokenizer output and enters the
import pipeline right after the tokenizing stage.
"""

__all__ = [
    "WorkbookReadError",
    "read_workbook_rows",
]


class WorkbookReadError(Exception):
    """Raised when the workbook or the requested sheet cannot be read."""


def _cell_to_str(value: object) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    if isinstance(value, float) and value.is_integer():
        # 数値セル 450000.0 -> "450000"
        return str(int(value))
    return str(value).strip()


def read_workbook_rows(path: Path, sheet: str | int = 0) -> list[list[str]]:
    """Read one sheet as rows of strings (first row is the header row).

    Parameters
    ----------
    path: workbook path
    sheet: sheet name or 0-based index
    """
    try:
        df = pd.read_excel(path, sheet_name=sheet, header=None, dtype=object)
    except (OSError, ValueError, KeyError, zipfile.BadZipFile) as e:
        raise WorkbookReadError(f"cannot read workbook {Path(path).name}: {e}") from e

    rows: list[list[str]] = []
    for raw in df.itertuples(index=False, name=None):
        rows.append([_cell_to_str(v) for v in raw])
    return rows
