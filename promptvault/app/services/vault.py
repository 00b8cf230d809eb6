from __future__ import annotations

import logging
from typing import Sequence, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.base import Base
from ..db.session import engine
from ..models import Folder, Prompt
from ..schemas import ExportEnvelope, FolderCreate, PromptCreate
from ..utils.clock import now_ms
from .converters import folder_from_create, folder_to_read, prompt_from_create, prompt_to_read

logger = logging.getLogger(__name__)


async def initialise_database() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_database() -> None:
    await engine.dispose()


async def get_stats(session: AsyncSession) -> Tuple[int, int]:
    prompt_count = await session.scalar(select(func.count()).select_from(Prompt))
    folder_count = await session.scalar(select(func.count()).select_from(Folder))
    return int(prompt_count or 0), int(folder_count or 0)


async def detach_folder(session: AsyncSession, folder_id: str) -> None:
    await session.execute(
        update(Prompt).where(Prompt.folder_id == folder_id).values(folder_id=None)
    )


async def import_records(
    session: AsyncSession,
    prompts: Sequence[PromptCreate],
    folders: Sequence[FolderCreate],
) -> None:
    """Upsert every record by id in one transaction; nothing is kept if any row fails."""
    now = now_ms()
    try:
        for folder in folders:
            await session.merge(folder_from_create(folder, now))
        for prompt in prompts:
            await session.merge(prompt_from_create(prompt, now))
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    logger.info("Imported %d prompts and %d folders", len(prompts), len(folders))


async def export_records(session: AsyncSession) -> ExportEnvelope:
    prompt_result = await session.execute(select(Prompt).order_by(Prompt.created_at.desc()))
    folder_result = await session.execute(select(Folder).order_by(Folder.created_at.asc()))
    return ExportEnvelope(
        prompts=[prompt_to_read(prompt) for prompt in prompt_result.scalars().all()],
        folders=[folder_to_read(folder) for folder in folder_result.scalars().all()],
    )
