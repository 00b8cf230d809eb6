from __future__ import annotations

from fastapi import FastAPI

from .routes import folders, health, prompts, transfer


def register_routes(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(prompts.router)
    app.include_router(folders.router)
    app.include_router(transfer.router)
