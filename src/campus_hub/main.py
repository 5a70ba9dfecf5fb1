"""FastAPI application entrypoint for Campus Hub."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .api.v1.router import api_router
from .collaborators import Collaborators
from .core.config import Settings, get_settings
from .jobs import register_sync_job
from .store.engine import CampusStore


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CampusStore] = None,
    collaborators: Optional[Collaborators] = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="Campus Hub API", version=__version__)
    app.state.store = store or CampusStore.from_settings(settings)
    app.state.collaborators = collaborators or Collaborators()
    app.state.sync_watcher = register_sync_job(app, app.state.store, settings)
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("campus_hub.main:app", host="0.0.0.0", port=8000)
