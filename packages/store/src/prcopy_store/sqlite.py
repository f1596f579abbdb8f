"""SQLiteStore — local file-based template store.

Schema:
  settings — one row per key, value stored as text.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable

from prcopy_store.base import BaseStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS settings (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    updated_at  TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SQLiteStore(BaseStore):
    """Stores template overrides in a local SQLite database file.

    The database file path defaults to `.prcopy.db` in the current working
    directory. Configure via .prcopy.yml: `store_path: /path/to/prcopy.db`.
    """

    def __init__(self, db_path: str = ".prcopy.db"):
        self._conn = sqlite3.connect(db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def get(self, keys: Iterable[str]) -> dict:
        keys = list(keys)
        if not keys:
            return {}
        placeholders = ", ".join("?" for _ in keys)
        try:
            rows = self._conn.execute(
                f"SELECT key, value FROM settings WHERE key IN ({placeholders})",
                keys,
            ).fetchall()
        except sqlite3.Error as e:
            logger.warning("SQLiteStore.get() failed: %s", e)
            return {}
        return {row["key"]: row["value"] for row in rows}

    def set(self, values: dict) -> None:
        try:
            self._conn.executemany(
                """
                INSERT INTO settings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                """,
                [(key, str(value)) for key, value in values.items()],
            )
            self._conn.commit()
        except sqlite3.Error as e:
            logger.warning("SQLiteStore.set() failed: %s", e)

    def close(self) -> None:
        self._conn.close()
