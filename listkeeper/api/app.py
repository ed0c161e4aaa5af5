"""FastAPI application factory for listkeeper."""

from __future__ import annotations

from fastapi import FastAPI

from listkeeper import __version__
from listkeeper.lists.store import ListStore
from listkeeper.settings import get_settings


def create_app(store: ListStore | None = None) -> FastAPI:
    """Build the HTTP app. *store* is the running process's store, if any."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
    )
    app.state.store = store

    # ── mount routers ──
    from listkeeper.api.routes import health

    app.include_router(health.router)

    return app
