# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from crm_import.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handler は setup 時点の sys.stdout を掴むので capsys 用に毎回作り直す
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
file_mappings:
  "contacts*.csv":
    schema: contact
  "google*.csv":
    schema: contact
  "deals*":
    schema: deal
  "offers*":
    schema: offer
encoding: utf-8-sig
store:
  backend: json
  path: ./store/crm.json
  key_prefix: reality_mark_
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: crmdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def contacts_csv_text() -> str:
    return (
        "Name,Email,Phone,Type,Notes\n"
        "Jane Doe,jane@example.com,555-0100,Buyer,Pre-approved\n"
        ",bob@example.com,555-0101,Seller,\n"
        "Ann Lee,not-an-email,555-0102,vendor,\n"
        ",,555-0103,Lead,no identity\n"
        "Jane D.,JANE@example.com,,,dup of row 2\n"
    )


@pytest.fixture()
def google_csv_text() -> str:
    return (
        "Given Name,Family Name,E-mail 1 - Type,E-mail 1 - Value,Phone 1 - Type,Phone 1 - Value\n"
        "Ada,Lovelace,* Home,ada@example.com,Mobile,555-1111\n"
        "Alan,Turing,Work,alan@example.com,Work,555-2222\n"
    )


@pytest.fixture()
def deals_csv_text() -> str:
    return (
        "MLS Number;Address;Client Name;Price;Type;Status;Commission Rate;Notes\n"
        "ML1;124 Maple Ave;Sarah Jenkins;$450,000;Sale;Active;2.5;\n"
        "ML2;9 Oak St;;N/A;For Lease;under contract;3%;\n"
        ";;;;;;;\n"
        "ML3;;;;;;;\n"
    )


@pytest.fixture()
def data_files(temp_workdir: Path, contacts_csv_text: str, google_csv_text: str, deals_csv_text: str) -> list[Path]:
    files = []
    for name, text in [
        ("contacts_2024.csv", contacts_csv_text),
        ("google_export.csv", google_csv_text),
        ("deals_q1.csv", deals_csv_text),
    ]:
        f = temp_workdir / "data" / name
        f.write_text(text, encoding="utf-8")
        files.append(f)
    return files
