from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models for the CRM import tool.

FileStat records what happened to one import file; ProcessingResult
aggregates every file of a run and feeds the SUMMARY line.
"""


class FileStatus(Enum):
    """Status of one import file.

    - SUCCESS: file parsed and its accepted records were persisted
    - FAILED: fatal parse or store error, nothing persisted for the file
    - SKIPPED: no file mapping matched the file name
    """
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    kind: str | None  # contact/deal/offer, None when unmapped
    status: FileStatus
    accepted: int = 0
    duplicates: int = 0
    skipped_rows: int = 0
    elapsed_seconds: float = 0.0
    error: str | None = None  # 失敗理由 (FAILED のみ)

    @property
    def rows_considered(self) -> int:
        return self.accepted + self.duplicates + self.skipped_rows


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results and summary output for one run."""
    success_files: int
    failed_files: int
    skipped_files: int
    total_accepted: int
    total_duplicates: int
    total_skipped_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # rows considered / elapsed
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files + self.skipped_files
