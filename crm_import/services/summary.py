from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format (single line, space separated key=value pairs):
SUMMARY files={total}/{total} success={n} failed={n} skipped_files={n}
accepted={n} duplicates={n} skipped_rows={n} elapsed_sec={s} throughput_rps={r}
"""

__all__ = [
    "format_number",
    "render_summary_line",
]


def format_number(value: float) -> str:
    """Integral values without decimals, tiny values without scientific notation.

    >>> format_number(2.0)
    '2'
    >>> format_number(0.0005)
    '0.0005'
    >>> format_number(1.5)
    '1.5'
    """
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line for a finished run.

    Args:
        total_files: number of import files detected in the source directory
        result: aggregated run metrics

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, skipped_files=0,
        ...     total_accepted=8, total_duplicates=1, total_skipped_rows=1,
        ...     start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_rows_per_sec=5.0,
        ... )
        >>> render_summary_line(1, result)  # doctest: +ELLIPSIS
        'SUMMARY files=1/1 success=1 failed=0 skipped_files=0 accepted=8 duplicates=1 ...'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"skipped_files={result.skipped_files} "
        f"accepted={result.total_accepted} "
        f"duplicates={result.total_duplicates} "
        f"skipped_rows={result.total_skipped_rows} "
        f"elapsed_sec={format_number(result.elapsed_seconds)} "
        f"throughput_rps={format_number(result.throughput_rows_per_sec)}"
    )
