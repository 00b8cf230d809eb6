from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...db.session import get_db
from ...models import Prompt
from ...schemas import PromptCreate, PromptRead, PromptUpdate
from ...services.converters import apply_prompt_update, prompt_from_create, prompt_to_read
from ...utils.clock import now_ms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["prompts"])


@router.get("/prompts", response_model=List[PromptRead])
async def list_prompts(session: AsyncSession = Depends(get_db)):
    result = await session.execute(select(Prompt).order_by(Prompt.created_at.desc()))
    prompts = result.scalars().all()
    return [prompt_to_read(prompt) for prompt in prompts]


@router.get("/prompts/{prompt_id}", response_model=PromptRead)
async def read_prompt(prompt_id: str, session: AsyncSession = Depends(get_db)):
    prompt = await session.get(Prompt, prompt_id)
    if prompt is None:
        raise HTTPException(status_code=404, detail="Prompt not found")
    return prompt_to_read(prompt)


@router.post("/prompts", response_model=PromptRead, status_code=status.HTTP_201_CREATED)
async def create_prompt(payload: PromptCreate, session: AsyncSession = Depends(get_db)):
    prompt = prompt_from_create(payload, now_ms())
    session.add(prompt)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail="Prompt already exists")
    await session.refresh(prompt)
    logger.info("Created prompt %s", prompt.id)
    return prompt_to_read(prompt)


@router.put("/prompts/{prompt_id}", response_model=PromptRead)
async def update_prompt(
    prompt_id: str, payload: PromptUpdate, session: AsyncSession = Depends(get_db)
):
    prompt = await session.get(Prompt, prompt_id)
    if prompt is None:
        raise HTTPException(status_code=404, detail="Prompt not found")

    apply_prompt_update(prompt, payload, now_ms())
    await session.commit()
    await session.refresh(prompt)
    return prompt_to_read(prompt)


@router.delete("/prompts/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(prompt_id: str, session: AsyncSession = Depends(get_db)):
    prompt = await session.get(Prompt, prompt_id)
    if prompt is None:
        raise HTTPException(status_code=404, detail="Prompt not found")

    await session.delete(prompt)
    await session.commit()
    logger.info("Deleted prompt %s", prompt_id)
