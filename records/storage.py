"""Key-value storage substrates for the record store.

The store only needs a durable slot addressed by a fixed key.  Two
backends are provided:

- MemoryStorage: dict-backed, for tests and throwaway sessions.
- SqliteStorage: one ``kv_store(key, value)`` table in a SQLite file.

Backends raise on failure (``OSError``, ``sqlite3.Error``); the record store
decides how to degrade.
"""

import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

from utils.database import get_connection, table_exists


class KeyValueStorage(ABC):
    """Abstract text key-value slot."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored text for *key*, or None when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key* (no-op if absent)."""

    def close(self) -> None:
        """Release any underlying resources."""


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage.  Contents vanish with the object."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SqliteStorage(KeyValueStorage):
    """Key-value slot persisted in a single SQLite table.

    Usage::

        storage = SqliteStorage(Path("pensiun_guru.sqlite"))
        storage.set("teachers-data", "[]")
        storage.get("teachers-data")   # -> "[]"
    """

    def __init__(self, db_path: Path | str, table_name: str = "kv_store") -> None:
        if not table_name.isidentifier():
            raise ValueError(f"Invalid table name: {table_name!r}")
        self.db_path = db_path
        self.table_name = table_name
        self._conn: sqlite3.Connection | None = None

    def _connection(self) -> sqlite3.Connection:
        """Open the database on first use and create the table if missing."""
        if self._conn is None:
            conn = get_connection(self.db_path)
            try:
                if not table_exists(conn, self.table_name):
                    conn.execute(
                        f"CREATE TABLE {self.table_name} ("
                        " key TEXT PRIMARY KEY,"
                        " value TEXT NOT NULL,"
                        " updated_at TEXT DEFAULT CURRENT_TIMESTAMP)"
                    )
                    conn.commit()
            except sqlite3.Error:
                conn.close()
                raise
            self._conn = conn
        return self._conn

    def get(self, key: str) -> str | None:
        row = self._connection().execute(
            f"SELECT value FROM {self.table_name} WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row is not None else None

    def set(self, key: str, value: str) -> None:
        conn = self._connection()
        with conn:
            conn.execute(
                f"INSERT INTO {self.table_name} (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                "updated_at = CURRENT_TIMESTAMP",
                (key, value),
            )

    def delete(self, key: str) -> None:
        conn = self._connection()
        with conn:
            conn.execute(
                f"DELETE FROM {self.table_name} WHERE key = ?", (key,)
            )

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
