from __future__ import annotations

import logging

from fastapi import FastAPI

from .core.settings import DATABASE_URL
from .services.vault import dispose_database, initialise_database

logger = logging.getLogger(__name__)


def register_events(app: FastAPI) -> None:
    @app.on_event("startup")
    async def _on_startup() -> None:
        await initialise_database()
        logger.info("Database ready at %s", DATABASE_URL)

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        await dispose_database()
        logger.info("Database connection closed")
