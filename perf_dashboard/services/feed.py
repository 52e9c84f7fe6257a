"""In-memory entry list shared by the dashboard views.

The feed is the only writer of the list. It changes in two ways:

- ``refresh`` replaces it wholesale with a fresh read from the store;
- ``merge`` inserts entries or replaces ones with the same ``id``.

Pushed additions from the store and the optimistic copy added after a
local submission both go through ``merge``, so whichever arrives second
never duplicates the entry. A failed refresh keeps the stale list and
records the error for the page banner.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from ..exceptions import LoadError, PersistenceError
from ..schemas import Entry

logger = logging.getLogger(__name__)

STATUS_LOADING = "loading"
STATUS_LIVE = "live"
STATUS_ERROR = "error"


class EntryFeed:
    def __init__(self) -> None:
        self._entries: List[Entry] = []
        self._lock = threading.Lock()
        self._generation = 0
        self._loaded = False
        self._subscription = None
        self.load_error: Optional[LoadError] = None
        # Merges made while a load is running: id -> (sequence, entry)
        self._merge_seq = 0
        self._recent: Dict[str, Tuple[int, Entry]] = {}
        self._inflight: List[int] = []

    @property
    def entries(self) -> List[Entry]:
        with self._lock:
            return list(self._entries)

    @property
    def status(self) -> str:
        if self.load_error is not None:
            return STATUS_ERROR
        return STATUS_LIVE if self._loaded else STATUS_LOADING

    def refresh(self, store) -> bool:
        """Reload every entry from ``store``; return False if the load failed.

        A load overtaken by a newer refresh or by ``close`` is dropped.
        Entries merged while the read was in flight are kept on top of the
        loaded list.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            started_at = self._merge_seq
            self._inflight.append(started_at)

        try:
            loaded = store.list_entries()
        except PersistenceError as e:
            logger.warning(f"[feed] load failed, keeping {len(self._entries)} cached entries: {e.message}")
            with self._lock:
                self._finish_load(started_at)
                if generation == self._generation:
                    self.load_error = LoadError(e.message)
            return False

        with self._lock:
            late = [entry for seq, entry in self._recent.values() if seq > started_at]
            self._finish_load(started_at)
            if generation != self._generation:
                logger.debug("[feed] discarding superseded load")
                return False
            by_id = {e.id: e for e in loaded}
            for entry in late:
                by_id[entry.id] = entry
            self._entries = _newest_first(by_id.values())
            self._loaded = True
            self.load_error = None
        return True

    def merge(self, entries: Iterable[Entry]) -> None:
        """Insert ``entries``, replacing any already held with the same id."""
        with self._lock:
            by_id = {e.id: e for e in self._entries}
            for entry in entries:
                by_id[entry.id] = entry
                if self._inflight:
                    # A running load may not see this entry yet
                    self._merge_seq += 1
                    self._recent[entry.id] = (self._merge_seq, entry)
            self._entries = _newest_first(by_id.values())

    def _finish_load(self, started_at: int) -> None:
        # Caller holds the lock
        self._inflight.remove(started_at)
        oldest = min(self._inflight, default=self._merge_seq)
        self._recent = {k: v for k, v in self._recent.items() if v[0] > oldest}

    def attach(self, store) -> None:
        """Follow live additions written through ``store``."""
        if self._subscription is None:
            self._subscription = store.subscribe(self.merge)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        with self._lock:
            # Any refresh still in flight belongs to the closed view
            self._generation += 1


def _created_key(entry: Entry) -> dt.datetime:
    # Naive timestamps are UTC
    ts = entry.created_at
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=dt.timezone.utc)


def _newest_first(entries: Iterable[Entry]) -> List[Entry]:
    return sorted(entries, key=_created_key, reverse=True)
