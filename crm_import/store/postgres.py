from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, fields
from typing import Any

from psycopg2.extras import execute_values

from ..mapping.schemas import get_schema
from ..models.import_schema import EntityKind
from ..models.records import record_field_names
from .base import StoreError

"""PostgreSQL persistence for imported CRM records.

One table per entity kind (contacts / deals / offers) whose columns are the
record dataclass fields. Existing records are read with a single SELECT per
import; the accepted batch is written with psycopg2.extras.execute_values in
its own transaction, so a failed write leaves nothing behind.
"""

__all__ = [
    "BatchInsertError",
    "BatchMetrics",
    "InsertResult",
    "batch_insert",
    "PostgresStore",
]


class BatchInsertError(StoreError):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Metrics data for a single batch insert operation."""
    batch_size: int  # Number of rows in this batch
    elapsed_seconds: float  # Time spent on execute_values call
    start_time: float  # Start timestamp (time.time())
    end_time: float  # End timestamp (time.time())


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    """Perform batched INSERT using psycopg2.extras.execute_values.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: 対象テーブル名 (スキーマ定数由来)
    columns: 挿入列
    rows: 行シーケンス
    page_size: execute_values の page_size (性能調整)
    metrics_callback: receives BatchMetrics after the execute_values call.
        Not invoked when ``rows`` is empty (early return).
    """
    rows_list = list(rows)
    if not rows_list:
        return InsertResult(inserted_rows=0)

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"

    start_time = time.time()
    try:
        execute_values(cursor, sql, rows_list, page_size=page_size)
    except Exception as e:
        raise BatchInsertError(str(e)) from e
    finally:
        end_time = time.time()
        if metrics_callback is not None:
            metrics_callback(
                BatchMetrics(
                    batch_size=len(rows_list),
                    elapsed_seconds=end_time - start_time,
                    start_time=start_time,
                    end_time=end_time,
                )
            )
    return InsertResult(inserted_rows=len(rows_list))


def _column_sql_type(py_type: Any) -> str:
    # from __future__ annotations -> 型は文字列
    return "DOUBLE PRECISION" if str(py_type) == "float" else "TEXT"


class PostgresStore:
    """RecordStore over a psycopg2 cursor (connection owned by the caller)."""

    def __init__(
        self,
        cursor: Any,
        page_size: int = 1000,
        metrics_callback: Callable[[BatchMetrics], None] | None = None,
    ) -> None:
        self.cursor = cursor
        self.page_size = page_size
        self.metrics_callback = metrics_callback

    def ensure_tables(self) -> None:
        """CREATE TABLE IF NOT EXISTS for every entity kind."""
        for kind in EntityKind:
            schema = get_schema(kind)
            cols = []
            for f in fields(schema.record_type):
                if f.name == "id":
                    cols.append('"id" TEXT PRIMARY KEY')
                else:
                    cols.append(f'"{f.name}" {_column_sql_type(f.type)}')
            try:
                self.cursor.execute(
                    f"CREATE TABLE IF NOT EXISTS {schema.table_name} ({', '.join(cols)})"
                )
            except Exception as e:
                raise StoreError(f"cannot create table {schema.table_name}: {e}") from e

    def list_existing(self, kind: EntityKind) -> list[Any]:
        schema = get_schema(kind)
        columns = record_field_names(schema.record_type)
        cols_sql = ",".join(f'"{c}"' for c in columns)
        try:
            self.cursor.execute(f"SELECT {cols_sql} FROM {schema.table_name}")
            rows = self.cursor.fetchall()
        except Exception as e:
            raise StoreError(f"cannot read {schema.table_name}: {e}") from e
        return [schema.record_type.from_dict(dict(zip(columns, row))) for row in rows]

    def append_batch(self, kind: EntityKind, records: Sequence[Any]) -> int:
        if not records:
            return 0
        schema = get_schema(kind)
        columns = record_field_names(schema.record_type)
        values = [[getattr(r, c) for c in columns] for r in records]
        try:
            self.cursor.execute("BEGIN")
            result = batch_insert(
                self.cursor,
                schema.table_name,
                columns,
                values,
                page_size=self.page_size,
                metrics_callback=self.metrics_callback,
            )
            self.cursor.execute("COMMIT")
        except Exception as e:
            try:
                self.cursor.execute("ROLLBACK")
            except Exception:  # pragma: no cover
                pass
            if isinstance(e, StoreError):
                raise
            raise StoreError(f"cannot write {schema.table_name}: {e}") from e
        return result.inserted_rows
