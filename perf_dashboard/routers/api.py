"""
JSON API for the dashboard.

The page polls ``/api/dashboard`` to stay live; other clients can read
entries, submit new ones (after unlocking the session through
``/unlock``) and download a spreadsheet export.
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ..config import Settings
from ..dependencies import (
    DashboardQuery,
    get_feed,
    get_gate_state,
    get_settings,
    get_store,
)
from ..schemas import ConfigResponse, DashboardData, Entry, EntryForm, SubmissionResponse
from ..services import metrics as metrics_service
from ..services.export import export_workbook
from ..services.feed import EntryFeed
from ..services.gate import GateState
from ..services.submission import submit

router = APIRouter(prefix="/api")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/config", response_model=ConfigResponse)
def read_config(settings: Settings = Depends(get_settings)):
    return ConfigResponse(
        title=settings.title,
        consultants=list(settings.consultants),
        poll_seconds=settings.poll_seconds,
    )


@router.get("/dashboard", response_model=DashboardData)
def read_dashboard(
    query: DashboardQuery = Depends(),
    settings: Settings = Depends(get_settings),
    store=Depends(get_store),
    feed: EntryFeed = Depends(get_feed),
):
    """Aggregates, totals and leaderboard for the selected window."""
    feed.refresh(store)
    return metrics_service.build_dashboard_data(
        feed.entries,
        settings.consultants,
        query.window,
        query.reference,
        query.consultant,
        status=feed.status,
        load_error=feed.load_error.message if feed.load_error else None,
    )


@router.get("/entries", response_model=List[Entry])
def list_entries(store=Depends(get_store), feed: EntryFeed = Depends(get_feed)):
    """All entries, newest first."""
    feed.refresh(store)
    return feed.entries


@router.post("/entries", response_model=SubmissionResponse, status_code=201)
def create_entry(
    form: EntryForm,
    gate: GateState = Depends(get_gate_state),
    settings: Settings = Depends(get_settings),
    store=Depends(get_store),
    feed: EntryFeed = Depends(get_feed),
):
    result = submit(
        gate,
        form.consultant,
        form.date,
        form.model_dump(),
        roster=settings.consultants,
        store=store,
        feed=feed,
    )
    return SubmissionResponse(entry=result.entry, celebrate=result.celebrate)


@router.get("/entries/export.xlsx")
def export_entries(
    query: DashboardQuery = Depends(),
    settings: Settings = Depends(get_settings),
    store=Depends(get_store),
    feed: EntryFeed = Depends(get_feed),
):
    feed.refresh(store)
    entries = feed.entries
    data = metrics_service.build_dashboard_data(
        entries, settings.consultants, query.window, query.reference, query.consultant
    )
    content = export_workbook(entries, data.per_consultant, data.total, data.period_label)
    filename = f"entries-{query.reference.isoformat()}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
