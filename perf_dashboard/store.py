"""
Entry store adapter backed by SQLite.

The store is created explicitly and handed to whatever needs it; its
lifecycle (``init`` / ``close``) belongs to the caller, normally the
application lifespan. It offers three things:

- ``list_entries`` fetches every entry, newest first;
- ``append`` writes one entry;
- ``subscribe`` registers a listener told about each successful append.

Every sqlite failure is raised as ``PersistenceError`` carrying the
driver's message. Listeners are notified after the write commits.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Callable, List, Optional

from pydantic import ValidationError

from .db import get_connection, init_db
from .exceptions import PersistenceError
from .schemas import Entry

logger = logging.getLogger(__name__)

Listener = Callable[[List[Entry]], None]

_COLUMNS = (
    "id", "name", "date", "week", "month", "year",
    "intakes", "interviews", "placements", "prospects", "created_at",
)


class Subscription:
    """Handle returned by ``subscribe``; ``unsubscribe`` stops delivery."""

    def __init__(self, store: "SqliteEntryStore", listener: Listener) -> None:
        self._store = store
        self.listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._store._remove(self)


class SqliteEntryStore:
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def init(self) -> None:
        if self._conn is not None:
            return
        try:
            conn = get_connection(self.db_path)
            init_db(conn)
        except (sqlite3.Error, OSError) as e:
            raise PersistenceError(f"Cannot open entry store: {e}") from e
        self._conn = conn
        logger.info(f"[store] opened {self.db_path}")

    def close(self) -> None:
        with self._lock:
            conn, self._conn = self._conn, None
            self._subscriptions.clear()
        if conn is not None:
            conn.close()
            logger.info("[store] closed")

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise PersistenceError("Entry store is not initialised")
        return self._conn

    # ------------------------------------------------------------------
    # Reads and writes
    # ------------------------------------------------------------------
    def list_entries(self) -> List[Entry]:
        with self._lock:
            conn = self._connection()
            try:
                rows = conn.execute(
                    f"SELECT {', '.join(_COLUMNS)} FROM entries ORDER BY created_at DESC"
                ).fetchall()
            except sqlite3.Error as e:
                raise PersistenceError(f"Failed to load entries: {e}") from e

        entries = []
        for row in rows:
            try:
                entries.append(_row_to_entry(row))
            except ValidationError as e:
                logger.warning(f"[store] skipping unreadable entry {row['id']!r}: {e}")
        return entries

    def append(self, entry: Entry) -> Entry:
        with self._lock:
            conn = self._connection()
            try:
                conn.execute(
                    f"INSERT INTO entries ({', '.join(_COLUMNS)}) "
                    f"VALUES ({', '.join('?' for _ in _COLUMNS)})",
                    _entry_to_row(entry),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise PersistenceError(f"Entry {entry.id!r} already exists") from e
            except (sqlite3.Error, OverflowError) as e:
                # OverflowError: integer outside SQLite's 64-bit range
                conn.rollback()
                raise PersistenceError(f"Failed to save entry: {e}") from e
            listeners = [s.listener for s in self._subscriptions if s.active]

        logger.debug(f"[store] appended {entry.id}")
        for listener in listeners:
            try:
                listener([entry])
            except Exception:
                logger.exception("[store] subscriber failed")
        return entry

    # ------------------------------------------------------------------
    # Live additions
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Subscription:
        sub = Subscription(self, listener)
        with self._lock:
            self._subscriptions.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)


def _entry_to_row(entry: Entry) -> tuple:
    return (
        entry.id,
        entry.name,
        entry.date.isoformat(),
        entry.week,
        entry.month,
        entry.year,
        entry.intakes,
        entry.interviews,
        entry.placements,
        entry.prospects,
        entry.created_at.isoformat(),
    )


def _row_to_entry(row: sqlite3.Row) -> Entry:
    data = {key: row[key] for key in _COLUMNS}
    data["createdAt"] = data.pop("created_at")
    return Entry.model_validate(data)
