from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...schemas import HealthRead
from ...services.vault import get_stats
from ...utils.clock import now_ms

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthRead)
async def health(session: AsyncSession = Depends(get_db)):
    prompt_count, folder_count = await get_stats(session)
    return HealthRead(
        status="healthy",
        timestamp=now_ms(),
        prompt_count=prompt_count,
        folder_count=folder_count,
    )
