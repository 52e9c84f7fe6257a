"""
Tests for the SQLite entry store adapter.
"""

import datetime as dt
import sqlite3

import pytest

from perf_dashboard.exceptions import PersistenceError
from perf_dashboard.store import SqliteEntryStore


class TestLifecycle:
    def test_init_creates_database_file(self, tmp_path):
        path = tmp_path / "nested" / "entries.db"
        s = SqliteEntryStore(str(path))
        s.init()
        try:
            assert path.exists()
            assert s.list_entries() == []
        finally:
            s.close()
        with pytest.raises(PersistenceError):
            s.list_entries()

    def test_operations_before_init_fail(self, tmp_path, make_entry):
        s = SqliteEntryStore(str(tmp_path / "entries.db"))
        with pytest.raises(PersistenceError):
            s.list_entries()
        with pytest.raises(PersistenceError):
            s.append(make_entry())

    def test_init_is_idempotent(self, store):
        store.init()
        assert store.list_entries() == []


class TestReadWrite:
    def test_round_trip(self, store, make_entry):
        entry = make_entry("Sander", intakes=1, interviews=2, placements=3, prospects=4)
        store.append(entry)
        assert store.list_entries() == [entry]

    def test_newest_first(self, store, make_entry):
        base = dt.datetime(2024, 3, 6, 8, 0, tzinfo=dt.timezone.utc)
        older = make_entry("Marcus", created_at=base)
        newer = make_entry("Nick", created_at=base + dt.timedelta(hours=1))
        store.append(older)
        store.append(newer)
        assert [e.id for e in store.list_entries()] == [newer.id, older.id]

    def test_duplicate_id_rejected(self, store, make_entry):
        entry = make_entry(id="entry-1")
        store.append(entry)
        with pytest.raises(PersistenceError, match="already exists"):
            store.append(make_entry(id="entry-1"))
        assert len(store.list_entries()) == 1

    def test_integer_beyond_sqlite_range_raises_persistence_error(self, store, make_entry):
        with pytest.raises(PersistenceError, match="Failed to save entry"):
            store.append(make_entry().model_copy(update={"intakes": 2**64}))
        assert store.list_entries() == []

    def test_unreadable_rows_are_skipped(self, store, settings, make_entry):
        store.append(make_entry("Marcus"))
        conn = sqlite3.connect(settings.db_path)
        conn.execute(
            "INSERT INTO entries (id, name, date, week, month, year, intakes, interviews, placements, prospects, created_at) "
            "VALUES ('broken', 'Gea', 'not-a-date', 1, 1, 2024, 0, 0, 0, 0, '2024-01-01T00:00:00+00:00')"
        )
        conn.commit()
        conn.close()
        assert [e.name for e in store.list_entries()] == ["Marcus"]

    def test_read_failure_raises_persistence_error(self, store):
        store._conn.execute("DROP TABLE entries")
        with pytest.raises(PersistenceError, match="Failed to load entries"):
            store.list_entries()


class TestSubscriptions:
    def test_listener_receives_appended_entries(self, store, make_entry):
        received = []
        store.subscribe(received.extend)
        entry = make_entry()
        store.append(entry)
        assert received == [entry]

    def test_unsubscribe_stops_delivery(self, store, make_entry):
        received = []
        sub = store.subscribe(received.extend)
        sub.unsubscribe()
        sub.unsubscribe()
        store.append(make_entry())
        assert received == []

    def test_failing_listener_does_not_fail_write(self, store, make_entry):
        def boom(entries):
            raise RuntimeError("listener broke")

        store.subscribe(boom)
        entry = make_entry()
        assert store.append(entry) is entry
        assert store.list_entries() == [entry]

    def test_failed_write_not_delivered(self, store, make_entry):
        received = []
        store.append(make_entry(id="dup"))
        store.subscribe(received.extend)
        with pytest.raises(PersistenceError):
            store.append(make_entry(id="dup"))
        assert received == []
