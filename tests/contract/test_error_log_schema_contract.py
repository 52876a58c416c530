from __future__ import annotations

import json
import re
from pathlib import Path

from crm_import.cli import main as cli_main

"""Error log contract: logs/errors-YYYYMMDD-HHMMSS.log, JSON Lines, fixed keys."""

FILE_PATTERN = re.compile(r"^errors-\d{8}-\d{6}\.log$")
KEYS = {"timestamp", "file", "schema", "row", "error_type", "message"}
ERROR_TYPES = {"SKIPPED_ROW", "DUPLICATE_ROW", "PARSE_ERROR", "READ_ERROR", "STORE_ERROR"}


def test_error_log_written_once_per_run(write_config, data_files, temp_workdir: Path, capsys):
    (temp_workdir / "data" / "deals_broken.csv").write_text("Address\n", encoding="utf-8")
    cli_main([])
    logs = list((temp_workdir / "logs").iterdir())
    assert len(logs) == 1
    assert FILE_PATTERN.match(logs[0].name)

    for raw in logs[0].read_text(encoding="utf-8").splitlines():
        obj = json.loads(raw)
        assert set(obj) == KEYS
        assert obj["error_type"] in ERROR_TYPES
        assert obj["schema"] in {"contact", "deal", "offer"}
        assert isinstance(obj["row"], int)
        assert obj["row"] == -1 or obj["row"] >= 2
        assert obj["timestamp"].endswith("Z")


def test_no_error_log_when_everything_is_clean(write_config, temp_workdir: Path, capsys):
    (temp_workdir / "data" / "contacts_ok.csv").write_text("Name,Email\nJane,j@x.io\n", encoding="utf-8")
    assert cli_main([]) == 0
    assert list((temp_workdir / "logs").iterdir()) == []
