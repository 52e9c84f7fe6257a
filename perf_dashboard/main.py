"""
Entry point for the FastAPI application.

Builds the entry store and the shared entry feed, wires them into the
routers and maps dashboard errors to HTTP responses.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from .config import Settings, load_settings
from .exceptions import DashboardError
from .routers import api_router, dashboard_router
from .services.feed import EntryFeed
from .store import SqliteEntryStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_app(settings: Optional[Settings] = None, store=None) -> FastAPI:
    """Build the application; ``store`` replaces the SQLite adapter if given."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    store = store if store is not None else SqliteEntryStore(settings.db_path)
    feed = EntryFeed()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.init()
        feed.attach(store)
        feed.refresh(store)
        logger.info(f"[app] serving {len(settings.consultants)} consultants, {len(feed.entries)} entries loaded")
        try:
            yield
        finally:
            feed.close()
            store.close()

    app = FastAPI(title=settings.title, description="Consultant activity dashboard", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.feed = feed

    # -----------------------------------------------------
    # CORS (for HTML/JS frontends on a different origin)
    # - No effect for same-origin pages
    # - Set PERF_DASHBOARD_CORS_ORIGINS explicitly in production
    # -----------------------------------------------------
    allow_origins = list(settings.cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Carries the access gate flag
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, same_site="lax")

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.get("/healthz", include_in_schema=False)
    def healthz():
        return {"status": "ok"}

    # Mount static assets using absolute path
    static_path = Path(__file__).resolve().parent / "static"
    app.mount("/static", StaticFiles(directory=str(static_path)), name="static")
    app.include_router(dashboard_router)
    app.include_router(api_router)
    return app
