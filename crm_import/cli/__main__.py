from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from dotenv import load_dotenv

from crm_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from crm_import.logging.init import log_summary, setup_logging
from crm_import.mapping.header_mapper import build_field_map
from crm_import.mapping.schemas import get_schema
from crm_import.models.config_models import ImportConfig
from crm_import.services.orchestrator import (
    WORKBOOK_SUFFIXES,
    ProcessingError,
    process_all,
    resolve_mapping,
    scan_import_files,
)
from crm_import.services.summary import render_summary_line
from crm_import.services.templates import render_template, template_file_name
from crm_import.store import InMemoryStore, JsonFileStore, RecordStore, StoreError
from crm_import.tabular.delimiter import detect_delimiter
from crm_import.tabular.tokenizer import is_blank_row, tokenize
from crm_import.tabular.workbook import WorkbookReadError, read_workbook_rows

"""CLI entrypoint.

Flow:
- Load .env (overrides existing environment) and config/import.yml
- Open the configured store (memory / json / postgres)
- Import every mapped file in source_directory
- Print the SUMMARY line and exit 0 (all ok), 2 (some file failed), 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _postgres_dsn(cfg: ImportConfig) -> str:
    """Resolve connection info.

    優先順位:
        1. DATABASE_URL / PGDSN (.env は main() 冒頭で上書きロード済み)
        2. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        3. config/import.yml の database セクション (不足分のフォールバック)
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[object]:  # pragma: no cover (needs a server)
    """psycopg2 connection + cursor; PostgresStore issues BEGIN/COMMIT itself."""
    import psycopg2

    conn = psycopg2.connect(_postgres_dsn(cfg))
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            yield cur
    finally:
        conn.close()


@contextmanager
def _open_store(cfg: ImportConfig, logger) -> Iterator[RecordStore]:
    # テスト等で DB を完全に無効化したい場合 DISABLE_DB_CONNECT=1
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DISABLE_DB_CONNECT=1 -> in-memory store (mock mode)")
        yield InMemoryStore()
        return
    backend = cfg.store.backend
    if backend == "memory":
        yield InMemoryStore()
    elif backend == "json":
        yield JsonFileStore(Path(cfg.store.path), key_prefix=cfg.store.key_prefix)
    else:
        from crm_import.store.postgres import PostgresStore

        with _db_connection(cfg) as cur:
            store = PostgresStore(cur)
            store.ensure_tables()
            yield store


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; its values win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="CSV / workbook -> CRM contacts, deals and offers importer")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to import.yml")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print each file's delimiter, header and resolved field map then exit",
    )
    p.add_argument(
        "--template",
        metavar="KIND",
        choices=["contact", "deal", "offer"],
        help="Write the CSV template for KIND then exit",
    )
    p.add_argument("--output", type=Path, help="Template output path (default: <kind>s_template.csv)")
    return p.parse_args(argv)


def _write_template(kind: str, output: Path | None, logger) -> int:
    target = output or Path(template_file_name(kind))
    try:
        target.write_text(render_template(kind), encoding="utf-8")
    except OSError as e:
        logger.error(f"template: {e}")
        return EXIT_FATAL
    logger.info(f"template written: {target}")
    return EXIT_SUCCESS_ALL


def _inspect_data(cfg: ImportConfig) -> int:
    try:
        files = scan_import_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no import files")
        return EXIT_SUCCESS_ALL
    for f in files:
        mapping = resolve_mapping(f.name, cfg)
        if mapping is None:
            print(f"FILE: {f.name} schema=<unmapped>")
            continue
        print(f"FILE: {f.name} schema={mapping.kind.value}")
        try:
            if f.suffix.lower() in WORKBOOK_SUFFIXES:
                delimiter = None
                rows = read_workbook_rows(f, sheet=mapping.sheet)
            else:
                text = f.read_text(encoding=cfg.encoding)
                delimiter = detect_delimiter(text)
                rows = tokenize(text, delimiter)
        except (OSError, UnicodeDecodeError, WorkbookReadError) as e:
            print(f"  read_error: {e}")
            continue
        rows = [r for r in rows if not is_blank_row(r)]
        if not rows:
            print("  <empty>")
            continue
        header = rows[0]
        print(f"  delimiter={delimiter!r} columns={header}")
        print(f"  field_map={build_field_map(header, get_schema(mapping.kind))}")
        print(f"  data_rows={len(rows) - 1}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # 空リスト [] はそのまま使う (None のときのみ sys.argv を読む)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    if args.template:
        return _write_template(args.template, args.output, logger)

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"Processing files from: {directory}")
    try:
        with _open_store(cfg, logger) as store:
            logger.info(f"store={type(store).__name__}")
            result = process_all(cfg, store)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL
    except StoreError as e:
        logger.error(f"store: {e}")
        return EXIT_FATAL
    except Exception as e:  # psycopg2.OperationalError など接続失敗
        logger.error(f"store connection failed: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result.total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
