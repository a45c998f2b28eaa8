"""SQLite connection layer for the project snapshot file."""

from __future__ import annotations

import sqlite3
from pathlib import Path

# Two CLI invocations may touch the same snapshot; wait instead of failing.
_BUSY_TIMEOUT_MS = 5000


class Database:
    """Snapshot file for one working directory (``.obras.db`` by default).

    Args:
        db_path: Path to the SQLite file. connect() creates it if missing.
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def exists(self) -> bool:
        return self.db_path.is_file()

    def connect(self) -> sqlite3.Connection:
        """Open a connection with Row access, foreign keys and WAL journaling."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute(f"PRAGMA busy_timeout = {_BUSY_TIMEOUT_MS}")
        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("PRAGMA journal_mode = WAL")
        return conn

    def __enter__(self) -> sqlite3.Connection:
        self._conn = self.connect()
        return self._conn

    def __exit__(self, *args: object) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
