"""FastAPI dependencies resolving the objects created by ``create_app``."""

import datetime as dt
from typing import Optional

from fastapi import Query, Request

from .config import Settings
from .services.feed import EntryFeed
from .services.gate import GateState, gate_state
from .services.periods import Window, utc_today
from .store import SqliteEntryStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> SqliteEntryStore:
    return request.app.state.store


def get_feed(request: Request) -> EntryFeed:
    return request.app.state.feed


def get_gate_state(request: Request) -> GateState:
    return gate_state(request.session)


class DashboardQuery:
    """Window / reference date / consultant selection shared by page and API."""

    def __init__(
        self,
        window: Window = Query(Window.WEEK),
        date: Optional[dt.date] = Query(None),
        consultant: Optional[str] = Query(None),
    ) -> None:
        self.window = window
        self.reference = date or utc_today()
        # Blank means "all consultants"
        self.consultant = consultant or None
