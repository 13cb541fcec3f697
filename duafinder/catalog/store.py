"""Persistent storage for dua records."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

import duckdb

from ..records import TEXT_FIELDS, Record

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
COLUMNS: Sequence[str] = ("id",) + TEXT_FIELDS


@dataclass
class UpsertResult:
    total: int
    inserted: int
    updated: int
    version: int


class CatalogStore:
    """Manage the dua catalog stored in DuckDB."""

    def __init__(self, db_path: Path, *, table: str = "dua_master") -> None:
        if not _IDENTIFIER_RE.match(table):
            raise ValueError(f"Invalid catalog table name '{table}'")
        self._db_path = Path(db_path)
        self._table = table
        self._meta_table = f"{table}_meta"
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def load_records(self) -> List[Record]:
        columns = ", ".join(COLUMNS)
        with self._connect() as conn:
            rows = conn.execute(f"SELECT {columns} FROM {self._table} ORDER BY id").fetchall()
        records = [Record.from_mapping(dict(zip(COLUMNS, row))) for row in rows]
        logger.debug("Loaded %d records from %s", len(records), self._table)
        return records

    def upsert(self, records: Iterable[Record]) -> UpsertResult:
        """Insert new records and overwrite existing ones sharing an id."""
        batch: dict = {}
        for record in records:
            if not record.id:
                logger.warning("Skipping catalog record without id")
                continue
            batch[record.id] = record
        placeholders = ", ".join("?" for _ in COLUMNS)
        assignments = ", ".join(f"{name} = ?" for name in TEXT_FIELDS)
        inserted = updated = 0
        with self._connect() as conn:
            existing = {
                str(row[0]) for row in conn.execute(f"SELECT id FROM {self._table}").fetchall()
            }
            for record in batch.values():
                values = [getattr(record, name) for name in TEXT_FIELDS]
                if record.id in existing:
                    conn.execute(
                        f"UPDATE {self._table} SET {assignments} WHERE id = ?",
                        values + [record.id],
                    )
                    updated += 1
                else:
                    conn.execute(
                        f"INSERT INTO {self._table} ({', '.join(COLUMNS)}) VALUES ({placeholders})",
                        [record.id] + values,
                    )
                    inserted += 1
            version = self._bump_version(conn) if batch else self._read_version(conn)
        return UpsertResult(total=len(batch), inserted=inserted, updated=updated, version=version)

    def delete(self, record_id: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT count(*) FROM {self._table} WHERE id = ?", [record_id]
            ).fetchone()
            if not row or not row[0]:
                return False
            conn.execute(f"DELETE FROM {self._table} WHERE id = ?", [record_id])
            self._bump_version(conn)
        return True

    def count(self) -> int:
        with self._connect() as conn:
            row = conn.execute(f"SELECT count(*) FROM {self._table}").fetchone()
        return int(row[0]) if row else 0

    def get_version(self) -> int:
        with self._connect() as conn:
            return self._read_version(conn)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _connect(self) -> duckdb.DuckDBPyConnection:
        return duckdb.connect(str(self._db_path))

    def _ensure_tables(self) -> None:
        text_columns = ",\n".join(f"{name} TEXT DEFAULT ''" for name in TEXT_FIELDS)
        with self._connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    id TEXT PRIMARY KEY,
                    {text_columns}
                )
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._meta_table} (
                    k TEXT PRIMARY KEY,
                    v BIGINT NOT NULL
                )
                """
            )
            conn.execute(
                f"INSERT INTO {self._meta_table}(k, v) VALUES ('version', 1) ON CONFLICT (k) DO NOTHING"
            )

    def _read_version(self, conn: duckdb.DuckDBPyConnection) -> int:
        row = conn.execute(f"SELECT v FROM {self._meta_table} WHERE k = 'version'").fetchone()
        return int(row[0]) if row else 1

    def _bump_version(self, conn: duckdb.DuckDBPyConnection) -> int:
        current = conn.execute(
            f"SELECT v FROM {self._meta_table} WHERE k = 'version'"
        ).fetchone()
        if current:
            next_value = int(current[0]) + 1
            conn.execute(
                f"UPDATE {self._meta_table} SET v = ? WHERE k = 'version'",
                [next_value],
            )
            return next_value
        conn.execute(f"INSERT INTO {self._meta_table}(k, v) VALUES ('version', 1)")
        return 1
