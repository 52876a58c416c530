from __future__ import annotations

import json
from pathlib import Path

import pytest

from crm_import.config.loader import load_config
from crm_import.logging.error_log import ErrorLogBuffer
from crm_import.models.import_schema import EntityKind
from crm_import.models.processing_result import FileStatus
from crm_import.services.importer import Importer
from crm_import.services.orchestrator import (
    ProcessingError,
    process_all,
    process_file,
    resolve_kind,
    scan_import_files,
)
from crm_import.store.base import StoreError
from crm_import.store.json_store import JsonFileStore
from crm_import.store.memory import InMemoryStore


def test_scan_import_files_filters_and_sorts(temp_workdir: Path):
    data = temp_workdir / "data"
    for name in ["b.csv", "a.TSV", "c.xlsx", "notes.md", "d.txt"]:
        (data / name).write_text("x", encoding="utf-8")
    (data / "sub").mkdir()
    assert [p.name for p in scan_import_files(data)] == ["a.TSV", "b.csv", "c.xlsx", "d.txt"]


def test_scan_missing_directory(temp_workdir: Path):
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_import_files(temp_workdir / "nope")


def test_resolve_kind_first_match_wins(write_config: Path):
    cfg = load_config(write_config)
    assert resolve_kind("Contacts_2024.CSV", cfg) is EntityKind.CONTACT
    assert resolve_kind("deals_q1.xlsx", cfg) is EntityKind.DEAL
    assert resolve_kind("random.csv", cfg) is None


def test_process_all_mixed_files(write_config: Path, data_files: list[Path]):
    cfg = load_config(write_config)
    store = InMemoryStore()
    result = process_all(cfg, store)

    assert result.success_files == 3
    assert result.failed_files == 0
    assert result.total_accepted == 7
    assert result.total_duplicates == 1
    assert result.total_skipped_rows == 2
    assert [s.file_name for s in result.file_stats] == ["contacts_2024.csv", "deals_q1.csv", "google_export.csv"]
    assert len(store.list_existing(EntityKind.CONTACT)) == 5
    assert len(store.list_existing(EntityKind.DEAL)) == 2


def test_failing_file_does_not_stop_others(write_config: Path, data_files: list[Path], temp_workdir: Path):
    (temp_workdir / "data" / "contacts_empty.csv").write_text("Name,Email\n", encoding="utf-8")
    (temp_workdir / "data" / "unmapped.csv").write_text("a,b\n1,2\n", encoding="utf-8")
    cfg = load_config(write_config)
    result = process_all(cfg, InMemoryStore())

    assert result.success_files == 3
    assert result.failed_files == 1
    assert result.skipped_files == 1
    failed = next(s for s in result.file_stats if s.status is FileStatus.FAILED)
    assert failed.file_name == "contacts_empty.csv"
    assert failed.error == "File appears to be empty or missing headers"

    (log_file,) = (temp_workdir / "logs").glob("errors-*.log")
    records = [json.loads(x) for x in log_file.read_text(encoding="utf-8").splitlines()]
    parse_errors = [r for r in records if r["error_type"] == "PARSE_ERROR"]
    assert parse_errors == [
        {**parse_errors[0], "file": "contacts_empty.csv", "schema": "contact", "row": -1}
    ]
    # 行単位の棄却も同じログに出る
    assert {r["error_type"] for r in records} >= {"SKIPPED_ROW", "DUPLICATE_ROW"}


def test_undecodable_text_is_read_error(write_config: Path, temp_workdir: Path):
    (temp_workdir / "data" / "contacts_bin.csv").write_bytes(b"Name,Email\n\xff\xfe\xfa,x\n")
    cfg = load_config(write_config)
    buf = ErrorLogBuffer()
    stat = process_file(temp_workdir / "data" / "contacts_bin.csv", cfg, Importer(InMemoryStore()), buf)
    assert stat.status is FileStatus.FAILED
    assert len(buf) == 1


class _BrokenStore(InMemoryStore):
    def append_batch(self, kind, records):
        raise StoreError("disk full")


def test_store_error_marks_file_failed(write_config: Path, data_files: list[Path]):
    cfg = load_config(write_config)
    result = process_all(cfg, _BrokenStore())
    assert result.failed_files == 3
    assert result.total_accepted == 0
    assert all(s.error == "disk full" for s in result.file_stats)


def test_empty_directory(write_config: Path):
    result = process_all(load_config(write_config), InMemoryStore())
    assert result.total_files == 0
    assert result.throughput_rows_per_sec >= 0


def test_unreadable_store_record_fails_only_that_file(write_config: Path, data_files: list[Path], temp_workdir: Path):
    store_path = temp_workdir / "store" / "crm.json"
    store_path.parent.mkdir()
    store_path.write_text(json.dumps({"reality_mark_deals": [{"id": "d1", "notes": "no address"}]}), encoding="utf-8")
    store = JsonFileStore(store_path)

    result = process_all(load_config(write_config), store)

    assert result.success_files == 2
    assert result.failed_files == 1
    (failed,) = [s for s in result.file_stats if s.status is FileStatus.FAILED]
    assert failed.file_name == "deals_q1.csv"
    assert result.total_accepted == 5
    assert len(store.list_existing(EntityKind.CONTACT)) == 5
    # 壊れた deal はそのまま、追記もされない
    assert json.loads(store_path.read_text(encoding="utf-8"))["reality_mark_deals"] == [
        {"id": "d1", "notes": "no address"}
    ]

    (log_file,) = (temp_workdir / "logs").glob("errors-*.log")
    records = [json.loads(x) for x in log_file.read_text(encoding="utf-8").splitlines()]
    store_errors = [r for r in records if r["error_type"] == "STORE_ERROR"]
    assert [(r["file"], r["schema"], r["row"]) for r in store_errors] == [("deals_q1.csv", "deal", -1)]
