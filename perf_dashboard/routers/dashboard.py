"""
Dashboard router.

Renders the main page and handles the browser forms: unlocking with the
access code and submitting an entry. Form posts redirect back to the page
(303) with the current selection kept in the query string.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..config import Settings
from ..dependencies import DashboardQuery, get_feed, get_gate_state, get_settings, get_store
from ..exceptions import DashboardError
from ..schemas import COUNT_FIELDS, COUNT_LABELS
from ..services import metrics as metrics_service
from ..services.feed import EntryFeed
from ..services.gate import GateState, lock, unlock
from ..services.submission import submit

logger = logging.getLogger(__name__)

router = APIRouter()

# Templates live in perf_dashboard/templates, one level above this package.
templates = Jinja2Templates(directory=str((Path(__file__).resolve().parent.parent) / "templates"))


def _back_to_page(request: Request, window: str = "", date: str = "", consultant: str = "", **extra) -> RedirectResponse:
    params = {"window": window, "date": date, "consultant": consultant}
    params.update(extra)
    query = urlencode({k: v for k, v in params.items() if v})
    url = str(request.url_for("dashboard"))
    return RedirectResponse(url=f"{url}?{query}" if query else url, status_code=303)


@router.get("/", response_class=HTMLResponse, name="dashboard")
def dashboard(
    request: Request,
    query: DashboardQuery = Depends(),
    celebrate: bool = False,
    error: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    store=Depends(get_store),
    feed: EntryFeed = Depends(get_feed),
    gate: GateState = Depends(get_gate_state),
):
    """Render dashboard page."""
    # Mounting the view reloads the entry list
    feed.refresh(store)
    data = metrics_service.build_dashboard_data(
        feed.entries,
        settings.consultants,
        query.window,
        query.reference,
        query.consultant,
        status=feed.status,
        load_error=feed.load_error.message if feed.load_error else None,
    )
    active_person = query.consultant if settings.is_consultant(query.consultant) else settings.consultants[0]
    context = {
        "title": settings.title,
        "settings": settings,
        "data": data,
        "unlocked": gate is GateState.UNLOCKED,
        "active_person": active_person,
        "view_mode": "individual" if query.consultant else "all",
        "count_fields": COUNT_FIELDS,
        "count_labels": COUNT_LABELS,
        "placements_chart": metrics_service.chart_series(data.per_consultant, "placements"),
        "intakes_chart": metrics_service.chart_series(data.per_consultant, "intakes"),
        "celebrate": celebrate,
        "error": error,
        "poll_seconds": settings.poll_seconds,
    }
    return templates.TemplateResponse(request, "dashboard.html", context)


@router.post("/unlock")
def unlock_gate(
    request: Request,
    code: str = Form(""),
    window: str = Form(""),
    date: str = Form(""),
    consultant: str = Form(""),
    settings: Settings = Depends(get_settings),
):
    if unlock(request.session, code, settings.access_code):
        return _back_to_page(request, window, date, consultant)
    return _back_to_page(request, window, date, consultant, error="Wrong access code")


@router.post("/lock")
def lock_gate(request: Request, window: str = Form(""), date: str = Form(""), consultant: str = Form("")):
    lock(request.session)
    return _back_to_page(request, window, date, consultant)


@router.post("/entries")
def submit_entry_form(
    request: Request,
    person: str = Form(...),
    entry_date: str = Form(""),
    intakes: str = Form(""),
    interviews: str = Form(""),
    placements: str = Form(""),
    prospects: str = Form(""),
    window: str = Form(""),
    date: str = Form(""),
    consultant: str = Form(""),
    gate: GateState = Depends(get_gate_state),
    settings: Settings = Depends(get_settings),
    store=Depends(get_store),
    feed: EntryFeed = Depends(get_feed),
):
    """Handle the entry form; errors come back as a notice on the page."""
    form = {"intakes": intakes, "interviews": interviews, "placements": placements, "prospects": prospects}
    try:
        result = submit(
            gate,
            person,
            entry_date or None,
            form,
            roster=settings.consultants,
            store=store,
            feed=feed,
        )
    except ValueError:
        return _back_to_page(request, window, date, consultant, error="Invalid date")
    except DashboardError as e:
        logger.warning(f"[submission] rejected for {person!r}: {e.message}")
        return _back_to_page(request, window, date, consultant, error=f"Failed to submit entry: {e.message}")
    return _back_to_page(request, window, date, consultant, celebrate="1" if result.celebrate else "")
