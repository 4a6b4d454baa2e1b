from __future__ import annotations

from typing import Optional

import psycopg2

from domain.repositories import RecordStore


class PostgresRecordStore(RecordStore):
    """
    Postgres-backed implementation of `RecordStore`.

    Uses the same `records` key/value layout as `SqliteRecordStore` so a
    deployment can move between the two without re-encoding anything.
    """

    def __init__(self, db_params: dict) -> None:
        self._db_params = db_params
        self._ensure_table()

    def _get_connection(self):
        return psycopg2.connect(**self._db_params)

    def _ensure_table(self) -> None:
        with self._get_connection() as conn:
            with conn.cursor() as cur:
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
        with self._get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT value FROM records WHERE key = %s", (key,))
                row = cur.fetchone()
                if not row:
                    return None
                return str(row[0])

    def set(self, key: str, value: str) -> None:
        with self._get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO records (key, value)
                    VALUES (%s, %s)
                    ON CONFLICT (key)
                    DO UPDATE SET value = EXCLUDED.value
                    """,
                    (key, value),
                )
                conn.commit()

    def remove(self, key: str) -> None:
        with self._get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM records WHERE key = %s", (key,))
                conn.commit()
