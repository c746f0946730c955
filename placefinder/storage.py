"""Key-value persistence for favorites and the last known location.

``SqliteKeyValueStore`` is the durable backend; ``MemoryKeyValueStore`` is the
in-memory fake used in tests and as the degraded-mode fallback.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, Iterator, List, Optional, Protocol

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str, Optional[str]], None]


class StorageError(RuntimeError):
    pass


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def subscribe(self, key: str, listener: ChangeListener) -> None:
        ...


class MemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._listeners: Dict[str, List[ChangeListener]] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def subscribe(self, key: str, listener: ChangeListener) -> None:
        self._listeners.setdefault(key, []).append(listener)

    def external_set(self, key: str, value: Optional[str]) -> None:
        """Simulate another session writing the key, then notify listeners."""
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
        for listener in self._listeners.get(key, []):
            listener(key, value)


class SqliteKeyValueStore:
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._listeners: Dict[str, List[ChangeListener]] = {}
        self._last_seen: Dict[str, Optional[str]] = {}
        try:
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self._configure_conn()
            self._init_db()
            self._data_version = self._read_data_version()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open key-value store at {db_path}: {exc}") from exc

    def _configure_conn(self) -> None:
        cur = self.conn.cursor()
        try:
            cur.execute("PRAGMA journal_mode=WAL")
            cur.fetchone()
        except sqlite3.DatabaseError:
            logger.debug("WAL journal mode unavailable for %s", self.db_path)
        cur.execute("PRAGMA synchronous=NORMAL")

    def _init_db(self) -> None:
        cur = self.conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at TEXT
            )
            """
        )
        self.conn.commit()

    def _read_data_version(self) -> int:
        cur = self.conn.cursor()
        cur.execute("PRAGMA data_version")
        return int(cur.fetchone()[0])

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Scoped write: commit on success, roll back on any error."""
        try:
            cur = self.conn.cursor()
        except sqlite3.Error as exc:
            raise StorageError(f"Write to {self.db_path} failed: {exc}") from exc
        try:
            yield cur
            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            raise StorageError(f"Write to {self.db_path} failed: {exc}") from exc
        except BaseException:
            self.conn.rollback()
            raise
        finally:
            cur.close()

    def get(self, key: str) -> Optional[str]:
        try:
            cur = self.conn.cursor()
            cur.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cur.fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Read from {self.db_path} failed: {exc}") from exc
        value = row["value"] if row else None
        if key in self._listeners:
            self._last_seen[key] = value
        return value

    def set(self, key: str, value: str) -> None:
        with self.transaction() as cur:
            cur.execute(
                """
                INSERT OR REPLACE INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                """,
                (key, value, utc_now_iso()),
            )
        if key in self._listeners:
            self._last_seen[key] = value

    def subscribe(self, key: str, listener: ChangeListener) -> None:
        if key not in self._listeners:
            self._listeners[key] = []
            self._last_seen[key] = self.get(key)
        self._listeners[key].append(listener)

    def poll_changes(self) -> List[str]:
        """Notify subscribers of keys changed by other connections.

        Returns the keys whose value changed since they were last seen.
        """
        try:
            version = self._read_data_version()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot poll {self.db_path}: {exc}") from exc
        if version == self._data_version:
            return []
        self._data_version = version

        changed: List[str] = []
        for key, listeners in self._listeners.items():
            previous = self._last_seen.get(key)
            current = self.get(key)
            if current == previous:
                continue
            changed.append(key)
            for listener in listeners:
                listener(key, current)
        return changed

    def close(self) -> None:
        try:
            self.conn.commit()
        finally:
            self.conn.close()

    def __enter__(self) -> "SqliteKeyValueStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
