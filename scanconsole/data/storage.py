"""
scanconsole/data/storage.py

Durable key/value storage for client-side state.

The console keeps its session and workspace selection in a small SQLite
table so a restart sees exactly what the last run left behind. Every write
commits before returning; callers rely on that to mirror state changes
synchronously.

Missing keys read back as the empty string.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Union

from scanconsole.errors import StorageError

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class LocalStorage:
    """String-to-string store backed by one SQLite table."""

    def __init__(self, path: Union[str, Path] = MEMORY):
        self.path = str(path)
        if self.path != MEMORY:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self._conn: Optional[sqlite3.Connection] = sqlite3.connect(
                self.path, timeout=5.0, check_same_thread=False
            )
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open state store: {e}", details={"path": self.path}) from e
        logger.debug(f"[Storage] Opened {self.path}")

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("State store is closed", details={"path": self.path})
        return self._conn

    def get_item(self, key: str) -> str:
        with self._lock:
            row = self._connection().execute(
                "SELECT value FROM kv WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else ""

    def set_item(self, key: str, value: Optional[object]) -> None:
        text = "" if value is None else str(value)
        with self._lock:
            conn = self._connection()
            try:
                conn.execute(
                    "INSERT INTO kv (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, text),
                )
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"Cannot write {key!r}: {e}", details={"key": key}) from e

    def remove_item(self, key: str) -> None:
        with self._lock:
            conn = self._connection()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"Cannot remove {key!r}: {e}", details={"key": key}) from e

    def has_item(self, key: str) -> bool:
        with self._lock:
            row = self._connection().execute(
                "SELECT 1 FROM kv WHERE key = ?", (key,)
            ).fetchone()
        return row is not None

    def keys(self) -> List[str]:
        with self._lock:
            rows = self._connection().execute("SELECT key FROM kv ORDER BY key").fetchall()
        return [r[0] for r in rows]

    def clear(self) -> None:
        with self._lock:
            conn = self._connection()
            conn.execute("DELETE FROM kv")
            conn.commit()

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
