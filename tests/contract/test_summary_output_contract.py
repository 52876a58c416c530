from __future__ import annotations

import re
from pathlib import Path

from crm_import.cli import main as cli_main

"""SUMMARY 行フォーマット契約テスト.

最終行は常に SUMMARY 行で、キー順・数値表記が固定されていること。
"""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"skipped_files=([0-9]+)\s+accepted=([0-9]+)\s+duplicates=([0-9]+)\s+"
    r"skipped_rows=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)\s+"
    r"throughput_rps=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = (
        "SUMMARY files=3/3 success=2 failed=1 skipped_files=0 accepted=40 duplicates=2 "
        "skipped_rows=1 elapsed_sec=0.84 throughput_rps=51.19"
    )
    assert SUMMARY_PATTERN.match(line)


def test_summary_pattern_rejects_old_keys():
    line = "SUMMARY files=1/1 success=1 failed=0 rows=4 skipped_sheets=0 elapsed_sec=1 throughput_rps=4"
    assert not SUMMARY_PATTERN.match(line)


def test_cli_last_line_is_summary(write_config, data_files, temp_workdir: Path, capsys):
    (temp_workdir / "data" / "unmapped.csv").write_text("a,b\n1,2\n", encoding="utf-8")
    cli_main([])
    lines = capsys.readouterr().out.strip().splitlines()
    m = SUMMARY_PATTERN.match(lines[-1])
    assert m, lines[-1]
    files, _, success, failed, skipped_files, accepted, duplicates, skipped_rows = m.groups()[:8]
    assert (files, success, failed, skipped_files) == ("4", "3", "0", "1")
    assert (accepted, duplicates, skipped_rows) == ("7", "1", "2")
