from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...schemas import ExportEnvelope, ImportCounts, ImportRequest, ImportResult
from ...services.vault import export_records, import_records

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["transfer"])


@router.post("/import", response_model=ImportResult)
async def import_data(payload: ImportRequest, session: AsyncSession = Depends(get_db)):
    try:
        await import_records(session, payload.prompts, payload.folders)
    except Exception as exc:
        logger.exception("Failed to import data")
        raise HTTPException(status_code=500, detail="Failed to import data") from exc
    return ImportResult(
        success=True,
        imported=ImportCounts(prompts=len(payload.prompts), folders=len(payload.folders)),
    )


@router.get("/export", response_model=ExportEnvelope)
async def export_data(session: AsyncSession = Depends(get_db)):
    return await export_records(session)
