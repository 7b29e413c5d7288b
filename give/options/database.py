"""SQLite backed options table."""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Iterable

from .store import OptionRow, OptionStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS {table} (
    option_name TEXT PRIMARY KEY,
    option_value TEXT NOT NULL,
    autoload TEXT NOT NULL DEFAULT 'yes'
)
"""


class SQLiteOptionStore(OptionStore):
    """Options stored in a single SQLite table.

    ``batch_get`` issues one ``SELECT ... WHERE option_name IN (...)`` no
    matter how many names are requested. ``query_count`` counts those reads.
    """

    def __init__(self, path: str | Path = ":memory:", *, table: str = "options") -> None:
        super().__init__()
        if not table.isidentifier():
            raise ValueError(f"Invalid options table name: {table!r}")
        self.path = str(path)
        self.table = table
        self.query_count = 0
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        with self._lock, self._conn:
            self._conn.execute(_SCHEMA.format(table=self.table))
        logger.debug("Opened options table %s in %s", self.table, self.path)

    def batch_get(self, names: Iterable[str]) -> list[OptionRow]:
        names = list(dict.fromkeys(names))
        if not names:
            return []
        placeholders = ",".join("?" for _ in names)
        sql = (
            f"SELECT option_name, option_value FROM {self.table} "
            f"WHERE option_name IN ({placeholders})"
        )
        with self._lock:
            self.query_count += 1
            rows = self._conn.execute(sql, names).fetchall()
        return [OptionRow(name, value) for name, value in rows]

    def _read(self, name: str) -> str | None:
        with self._lock:
            row = self._conn.execute(
                f"SELECT option_value FROM {self.table} WHERE option_name = ?",
                (name,),
            ).fetchone()
        return row[0] if row else None

    def _write(self, name: str, data: str, *, insert: bool) -> bool:
        if insert:
            sql = f"INSERT OR IGNORE INTO {self.table} (option_name, option_value) VALUES (?, ?)"
            params: tuple[str, ...] = (name, data)
        else:
            sql = f"UPDATE {self.table} SET option_value = ? WHERE option_name = ?"
            params = (data, name)
        with self._lock, self._conn:
            cursor = self._conn.execute(sql, params)
        return cursor.rowcount > 0

    def _remove(self, name: str) -> bool:
        with self._lock, self._conn:
            cursor = self._conn.execute(
                f"DELETE FROM {self.table} WHERE option_name = ?", (name,)
            )
        return cursor.rowcount > 0

    def close(self) -> None:
        with self._lock:
            self._conn.close()


__all__ = ["SQLiteOptionStore"]
