"""
Static configuration for the dashboard.

Values are read from environment variables once, when the application is
created. There is no runtime reconfiguration path: the roster and the
access code stay fixed for the lifetime of the process.

    PERF_DASHBOARD_CONSULTANTS    comma-separated roster, in display order
    PERF_DASHBOARD_ACCESS_CODE    shared code required to submit entries
    PERF_DASHBOARD_DB_PATH        SQLite file holding the entries
    PERF_DASHBOARD_SESSION_SECRET key used to sign the session cookie
    PERF_DASHBOARD_CORS_ORIGINS   "*" or a comma-separated origin list
    PERF_DASHBOARD_POLL_SECONDS   how often the page re-fetches data
    PERF_DASHBOARD_LOG_LEVEL      logging level name
    PERF_DASHBOARD_TITLE          page heading
"""

from __future__ import annotations

import os
import secrets
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

DEFAULT_CONSULTANTS = ("Marcus", "Lisanna", "Nick", "Gea", "Dion", "Sander", "Yde")
DEFAULT_ACCESS_CODE = "8448"
DEFAULT_POLL_SECONDS = 30
MIN_POLL_SECONDS = 5

# Stored next to the package in the project's db directory, like the
# original sqlite backend.
DEFAULT_DB_PATH = os.path.normpath(
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "db", "entries.db")
)


@dataclass(frozen=True)
class Settings:
    consultants: Tuple[str, ...] = DEFAULT_CONSULTANTS
    access_code: str = DEFAULT_ACCESS_CODE
    db_path: str = DEFAULT_DB_PATH
    session_secret: str = ""
    cors_origins: Tuple[str, ...] = ("*",)
    poll_seconds: int = DEFAULT_POLL_SECONDS
    log_level: str = "INFO"
    title: str = "Performance Dashboard"

    def __post_init__(self) -> None:
        if not self.consultants:
            raise ValueError("Consultant roster must not be empty")
        if not self.session_secret:
            # frozen dataclass: bypass __setattr__ for the generated default
            object.__setattr__(self, "session_secret", secrets.token_urlsafe(32))

    def is_consultant(self, name: Optional[str]) -> bool:
        return name in self.consultants


def parse_roster(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated roster, dropping blanks and repeated names."""
    if raw is None:
        return DEFAULT_CONSULTANTS
    return _unique(name.strip() for name in raw.split(","))


def parse_origins(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None or raw.strip() == "*":
        return ("*",)
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def parse_poll_seconds(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_POLL_SECONDS
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"PERF_DASHBOARD_POLL_SECONDS must be an integer, got {raw!r}")
    return max(value, MIN_POLL_SECONDS)


def _unique(names: Iterable[str]) -> Tuple[str, ...]:
    seen = []
    for name in names:
        if name and name not in seen:
            seen.append(name)
    return tuple(seen)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (``os.environ`` by default)."""
    env = os.environ if environ is None else environ
    roster = parse_roster(env.get("PERF_DASHBOARD_CONSULTANTS"))
    if not roster:
        raise ValueError("PERF_DASHBOARD_CONSULTANTS does not name any consultant")
    return Settings(
        consultants=roster,
        access_code=env.get("PERF_DASHBOARD_ACCESS_CODE", DEFAULT_ACCESS_CODE),
        db_path=env.get("PERF_DASHBOARD_DB_PATH", DEFAULT_DB_PATH),
        session_secret=env.get("PERF_DASHBOARD_SESSION_SECRET", ""),
        cors_origins=parse_origins(env.get("PERF_DASHBOARD_CORS_ORIGINS")),
        poll_seconds=parse_poll_seconds(env.get("PERF_DASHBOARD_POLL_SECONDS")),
        log_level=env.get("PERF_DASHBOARD_LOG_LEVEL", "INFO").upper(),
        title=env.get("PERF_DASHBOARD_TITLE", "Performance Dashboard"),
    )
