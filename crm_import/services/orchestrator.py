from __future__ import annotations

import fnmatch
import logging
from datetime import UTC, datetime
from pathlib import Path

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import FileMappingConfig, ImportConfig
from ..models.import_outcome import ImportOutcome
from ..models.import_schema import EntityKind
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from ..store.base import RecordStore, StoreError
from ..tabular.workbook import WorkbookReadError, read_workbook_rows
from .importer import Importer
from .pipeline import ParseError
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Directory-level orchestration of CRM imports.

Each file in ``source_directory`` is matched against ``file_mappings`` to find
its entity kind, read (text or workbook), run through the Importer and
recorded as a FileStat. A failing file never stops the others; row-level
rejections and file-level failures go to the JSON Lines error log, flushed
once at the end of the run.
"""

__all__ = [
    "ProcessingError",
    "TEXT_SUFFIXES",
    "WORKBOOK_SUFFIXES",
    "scan_import_files",
    "resolve_mapping",
    "resolve_kind",
    "process_file",
    "process_all",
]

TEXT_SUFFIXES = frozenset({".csv", ".tsv", ".txt"})
WORKBOOK_SUFFIXES = frozenset({".xlsx"})

# file-level error types (row = -1 in the error log)
READ_ERROR = "READ_ERROR"
PARSE_ERROR = "PARSE_ERROR"
STORE_ERROR = "STORE_ERROR"


class ProcessingError(Exception):
    """Fatal error that prevents the run from starting (e.g. missing directory)."""


def scan_import_files(directory: Path) -> list[Path]:
    """List importable files in ``directory`` (non-recursive, sorted by name).

    Raises:
        ProcessingError: directory missing, not a directory, or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    suffixes = TEXT_SUFFIXES | WORKBOOK_SUFFIXES
    try:
        files = [p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in suffixes]
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e
    return sorted(files, key=lambda p: p.name)


def resolve_mapping(file_name: str, config: ImportConfig) -> FileMappingConfig | None:
    """First file mapping whose pattern matches ``file_name`` (case-insensitive)."""
    lowered = file_name.lower()
    for mapping in config.file_mappings:
        if fnmatch.fnmatch(lowered, mapping.pattern.lower()):
            return mapping
    return None


def resolve_kind(file_name: str, config: ImportConfig) -> EntityKind | None:
    mapping = resolve_mapping(file_name, config)
    return mapping.kind if mapping is not None else None


def _run_importer(importer: Importer, path: Path, mapping: FileMappingConfig, encoding: str) -> ImportOutcome:
    if path.suffix.lower() in WORKBOOK_SUFFIXES:
        rows = read_workbook_rows(path, sheet=mapping.sheet)
        return importer.import_rows(rows, mapping.kind)
    text = path.read_text(encoding=encoding)
    return importer.import_text(text, mapping.kind)


def process_file(
    path: Path,
    config: ImportConfig,
    importer: Importer,
    error_log: ErrorLogBuffer,
) -> FileStat:
    """Import one file and describe the result. Never raises for file-level problems."""
    start = datetime.now(UTC)
    mapping = resolve_mapping(path.name, config)
    if mapping is None:
        logger.warning("no file mapping for %s, skipped", path.name)
        return FileStat(file_name=path.name, kind=None, status=FileStatus.SKIPPED)

    kind = mapping.kind.value

    def failed(error_type: str, message: str) -> FileStat:
        error_log.add_file_error(path.name, kind, error_type, message)
        logger.error("file=%s schema=%s %s: %s", path.name, kind, error_type, message)
        return FileStat(
            file_name=path.name,
            kind=kind,
            status=FileStatus.FAILED,
            elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
            error=message,
        )

    try:
        outcome = _run_importer(importer, path, mapping, config.encoding)
    except ParseError as e:
        return failed(PARSE_ERROR, str(e))
    except (OSError, UnicodeDecodeError, WorkbookReadError) as e:
        return failed(READ_ERROR, str(e))
    except StoreError as e:
        return failed(STORE_ERROR, str(e))

    error_log.add_rejections(path.name, kind, outcome.rejections)
    logger.debug(
        "file=%s delimiter=%r field_map=%s",
        path.name,
        outcome.delimiter,
        outcome.field_map,
    )
    logger.info(
        "file=%s schema=%s accepted=%d duplicates=%d skipped=%d",
        path.name,
        kind,
        outcome.accepted_count,
        outcome.duplicate_count,
        outcome.skipped_count,
    )
    return FileStat(
        file_name=path.name,
        kind=kind,
        status=FileStatus.SUCCESS,
        accepted=outcome.accepted_count,
        duplicates=outcome.duplicate_count,
        skipped_rows=outcome.skipped_count,
        elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
    )


def process_all(
    config: ImportConfig,
    store: RecordStore,
    *,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Import every file in the configured source directory.

    Args:
        config: validated import configuration
        store: persistence target, also the source of existing records for dedup
        error_log: buffer for rejections and file errors (default: ./logs)

    Raises:
        ProcessingError: source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    file_paths = scan_import_files(Path(config.source_directory))
    importer = Importer(store)

    file_stats: list[FileStat] = []
    with ProgressTracker(len(file_paths)) as progress:
        for path in file_paths:
            progress.start_file(path)
            stat = process_file(path, config, importer, error_log)
            file_stats.append(stat)
            progress.set_postfix(
                accepted=sum(s.accepted for s in file_stats),
                failed=sum(1 for s in file_stats if s.status is FileStatus.FAILED),
            )
            progress.finish_file()

    # 1 回だけ書き出す
    log_path = error_log.flush()
    if log_path is not None:
        logger.info("error log written: %s", log_path)

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    rows = sum(s.rows_considered for s in file_stats)
    return ProcessingResult(
        success_files=sum(1 for s in file_stats if s.status is FileStatus.SUCCESS),
        failed_files=sum(1 for s in file_stats if s.status is FileStatus.FAILED),
        skipped_files=sum(1 for s in file_stats if s.status is FileStatus.SKIPPED),
        total_accepted=sum(s.accepted for s in file_stats),
        total_duplicates=sum(s.duplicates for s in file_stats),
        total_skipped_rows=sum(s.skipped_rows for s in file_stats),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=rows / elapsed if elapsed > 0 else 0.0,
        file_stats=file_stats,
    )
