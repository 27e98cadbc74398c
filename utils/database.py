"""SQLite utilities for the retirement records tools.

Provides:
- Connection setup with the project's standard pragmas
- Small schema helpers used by the key-value storage backend
"""

import sqlite3
from pathlib import Path


def init_pragmas(conn: sqlite3.Connection) -> None:
    """Initialize SQLite reliability pragmas.

    - WAL mode so a reader never blocks the writer
    - NORMAL synchronous mode for speed without corrupting on crash
    - Memory temp store

    Args:
        conn: SQLite connection to configure
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.execute("PRAGMA temp_store=MEMORY")


def get_connection(db_path: Path | str) -> sqlite3.Connection:
    """Open (creating if needed) a SQLite database with pragmas applied.

    ``":memory:"`` is accepted for throwaway databases; the WAL pragma is
    skipped there because in-memory databases cannot use it.
    """
    db_path = str(db_path)
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    if db_path != ":memory:":
        try:
            init_pragmas(conn)
        except sqlite3.Error:
            conn.close()
            raise
    return conn


def table_exists(conn: sqlite3.Connection, table_name: str) -> bool:
    """Check if a table exists in the database."""
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table_name,),
    ).fetchone()
    return row is not None
