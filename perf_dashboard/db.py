"""
Lightweight SQLite database access module.

This module provides helpers to open a database connection and initialise
the schema. It uses Python's built-in sqlite3 module; connections use a
row factory so query results can be accessed like dictionaries.
"""

import os
import sqlite3


def get_connection(db_path: str) -> sqlite3.Connection:
    """Return a connection to the SQLite database at ``db_path``.

    FastAPI runs sync handlers on a thread pool, so the connection is opened
    with ``check_same_thread=False``. The store serialises access to it with
    its own lock. ``:memory:`` is accepted for throwaway databases.
    """
    if db_path != ":memory:":
        directory = os.path.dirname(os.path.abspath(db_path))
        os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create the entries table if it does not exist."""
    c = conn.cursor()
    c.execute(
        """
        CREATE TABLE IF NOT EXISTS entries (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            date TEXT NOT NULL,
            week INTEGER NOT NULL,
            month INTEGER NOT NULL,
            year INTEGER NOT NULL,
            intakes INTEGER NOT NULL DEFAULT 0,
            interviews INTEGER NOT NULL DEFAULT 0,
            placements INTEGER NOT NULL DEFAULT 0,
            prospects INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        )
        """
    )
    c.execute("CREATE INDEX IF NOT EXISTS ix_entries_created_at ON entries (created_at)")
    conn.commit()
