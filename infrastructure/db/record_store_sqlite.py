from __future__ import annotations

import sqlite3
from contextlib import closing
from typing import Optional

from domain.repositories import RecordStore


class SqliteRecordStore(RecordStore):
    """
    SQLite-backed implementation of `RecordStore`.

    Owns a single `records` table of string keys to string values. It is
    self-initialising: the table is created if needed. Each call opens its
    own connection and closes it when done.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._ensure_table()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_table(self) -> None:
        with closing(self._get_connection()) as conn, conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS records (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def get(self, key: str) -> Optional[str]:
        with closing(self._get_connection()) as conn, conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM records WHERE key = ?", (key,))
            row = cur.fetchone()
            if not row:
                return None
            return str(row[0])

    def set(self, key: str, value: str) -> None:
        with closing(self._get_connection()) as conn, conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO records (key, value)
                VALUES (?, ?)
                ON CONFLICT (key)
                DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )
            conn.commit()

    def remove(self, key: str) -> None:
        with closing(self._get_connection()) as conn, conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM records WHERE key = ?", (key,))
            conn.commit()
