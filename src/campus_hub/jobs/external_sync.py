"""Background polling for changes made to the durable medium by other processes."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI

from ..core.config import Settings
from ..store.engine import CampusStore

logger = logging.getLogger(__name__)

JOB_ID = "external_sync"


class ExternalChangeWatcher:
    """Periodically asks the store to reload when its medium changed elsewhere."""

    def __init__(self, store: CampusStore, *, interval_seconds: float) -> None:
        self.store = store
        self.interval_seconds = interval_seconds
        self._scheduler = BackgroundScheduler(timezone="UTC")
        self._scheduler.add_job(
            self._execute,
            "interval",
            seconds=interval_seconds,
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
        )

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def _execute(self) -> None:
        try:
            if self.store.sync_external_changes():
                logger.info("external change picked up")
        except Exception:  # pragma: no cover - safeguard for background job
            logger.exception("external sync job failed")

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("external sync watcher started (every %.1fs)", self.interval_seconds)

    def stop(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("external sync watcher stopped")


def register_sync_job(app: FastAPI, store: CampusStore, settings: Settings) -> ExternalChangeWatcher:
    """Attach store and watcher lifecycle hooks to the FastAPI app."""

    watcher = ExternalChangeWatcher(store, interval_seconds=settings.sync_interval_seconds)

    @app.on_event("startup")
    async def start_store() -> None:
        if not store.started:
            store.init()
        watcher.start()

    @app.on_event("shutdown")
    async def shutdown_store() -> None:
        watcher.stop()
        store.shutdown()

    return watcher
