"""
Pytest fixtures and configuration for the test suite.

- Real SQLite store in a temporary directory (no mocks for persistence)
- ``make_entry`` builds entries with buckets derived from their date
- ``client`` runs the app lifespan and keeps the session cookie
"""

import datetime as dt
import itertools
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path so tests can import the package without installing it
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from perf_dashboard.config import Settings  # noqa: E402
from perf_dashboard.main import create_app  # noqa: E402
from perf_dashboard.schemas import Entry  # noqa: E402
from perf_dashboard.services.feed import EntryFeed  # noqa: E402
from perf_dashboard.services.periods import bucket  # noqa: E402
from perf_dashboard.store import SqliteEntryStore  # noqa: E402

ROSTER = ("Marcus", "Lisanna", "Nick", "Gea", "Dion", "Sander", "Yde")
ACCESS_CODE = "8448"


@pytest.fixture
def roster():
    return ROSTER


@pytest.fixture
def settings(tmp_path):
    return Settings(
        consultants=ROSTER,
        access_code=ACCESS_CODE,
        db_path=str(tmp_path / "db" / "entries.db"),
        session_secret="test-secret",
        log_level="DEBUG",
    )


@pytest.fixture
def store(settings):
    s = SqliteEntryStore(settings.db_path)
    s.init()
    yield s
    s.close()


@pytest.fixture
def feed():
    f = EntryFeed()
    yield f
    f.close()


@pytest.fixture
def make_entry():
    counter = itertools.count(1)
    base = dt.datetime(2024, 1, 1, 9, 0, tzinfo=dt.timezone.utc)

    def _make(name="Marcus", day=dt.date(2024, 3, 6), **counts):
        n = next(counter)
        b = bucket(day)
        created_at = counts.pop("created_at", base + dt.timedelta(minutes=n))
        return Entry(
            id=counts.pop("id", f"entry-test-{n}"),
            name=name,
            date=day,
            week=b.week,
            month=b.month,
            year=b.year,
            created_at=created_at,
            **counts,
        )

    return _make


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def unlocked_client(client):
    resp = client.post("/unlock", data={"code": ACCESS_CODE}, follow_redirects=False)
    assert resp.status_code == 303
    return client
