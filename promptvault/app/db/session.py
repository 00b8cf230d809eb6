from __future__ import annotations

from typing import Any, AsyncIterator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from ..core.settings import DATABASE_URL, LOG_LEVEL
from .base import Base


def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": LOG_LEVEL == "debug", "future": True}
    if url.startswith("sqlite"):
        # Writers queue on the file lock instead of failing straight away.
        options["connect_args"] = {"timeout": 30}
    return options


engine = create_async_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
VaultSession = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with VaultSession() as session:
        yield session


__all__ = ["Base", "VaultSession", "engine", "get_db"]
