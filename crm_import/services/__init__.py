"""Import services: pipeline stages, importer and directory orchestration."""

from .importer import ImportInProgressError, Importer
from .pipeline import ParseError, run_import, run_import_rows

__all__ = [
    "ImportInProgressError",
    "Importer",
    "ParseError",
    "run_import",
    "run_import_rows",
]
