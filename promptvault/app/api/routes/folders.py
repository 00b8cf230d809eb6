from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...models import Folder
from ...schemas import FolderCreate, FolderRead, FolderUpdate
from ...services.converters import apply_folder_update, folder_from_create, folder_to_read
from ...services.vault import detach_folder
from ...utils.clock import now_ms

router = APIRouter(prefix="/api", tags=["folders"])


@router.get("/folders", response_model=List[FolderRead])
async def list_folders(session: AsyncSession = Depends(get_db)):
    result = await session.execute(select(Folder).order_by(Folder.created_at.asc()))
    folders = result.scalars().all()
    return [folder_to_read(folder) for folder in folders]


@router.get("/folders/{folder_id}", response_model=FolderRead)
async def read_folder(folder_id: str, session: AsyncSession = Depends(get_db)):
    folder = await session.get(Folder, folder_id)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return folder_to_read(folder)


@router.post("/folders", response_model=FolderRead, status_code=status.HTTP_201_CREATED)
async def create_folder(payload: FolderCreate, session: AsyncSession = Depends(get_db)):
    folder = folder_from_create(payload, now_ms())
    session.add(folder)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail="Folder already exists")
    await session.refresh(folder)
    return folder_to_read(folder)


@router.put("/folders/{folder_id}", response_model=FolderRead)
async def update_folder(
    folder_id: str, payload: FolderUpdate, session: AsyncSession = Depends(get_db)
):
    folder = await session.get(Folder, folder_id)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")

    apply_folder_update(folder, payload)
    await session.commit()
    await session.refresh(folder)
    return folder_to_read(folder)


@router.delete("/folders/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(folder_id: str, session: AsyncSession = Depends(get_db)):
    folder = await session.get(Folder, folder_id)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")

    await detach_folder(session, folder_id)
    await session.delete(folder)
    await session.commit()
