from __future__ import annotations

import logging
from typing import List, Sequence
from uuid import uuid4

from pydantic import ValidationError

from ..models import Folder, Prompt
from ..schemas import (
    FolderCreate,
    FolderRead,
    FolderUpdate,
    PromptCreate,
    PromptRead,
    PromptUpdate,
    PromptVersion,
)
from ..schemas.folder import DEFAULT_FOLDER_COLOR, DEFAULT_FOLDER_ICON, DEFAULT_FOLDER_NAME
from ..schemas.prompt import DEFAULT_PROMPT_TITLE
from ..utils.json import dump_list, load_dict_list, load_string_list

logger = logging.getLogger(__name__)


def new_identifier() -> str:
    return uuid4().hex


def dump_versions(versions: Sequence[PromptVersion]) -> str:
    return dump_list([version.model_dump(by_alias=True) for version in versions])


def load_versions(raw: str) -> List[PromptVersion]:
    versions: List[PromptVersion] = []
    for entry in load_dict_list(raw):
        try:
            versions.append(PromptVersion.model_validate(entry))
        except ValidationError:
            logger.warning("Skipping malformed prompt version entry: %s", entry)
    return versions


def prompt_to_read(prompt: Prompt) -> PromptRead:
    return PromptRead(
        id=prompt.id,
        title=prompt.title,
        content=prompt.content,
        tags=load_string_list(prompt.tags),
        is_favorite=prompt.is_favorite,
        is_pinned=prompt.is_pinned,
        folder_id=prompt.folder_id,
        created_at=prompt.created_at,
        updated_at=prompt.updated_at,
        versions=load_versions(prompt.versions),
    )


def prompt_from_create(payload: PromptCreate, now: int) -> Prompt:
    return Prompt(
        id=payload.id or new_identifier(),
        title=payload.title or DEFAULT_PROMPT_TITLE,
        content=payload.content,
        tags=dump_list(payload.tags),
        is_favorite=payload.is_favorite,
        is_pinned=payload.is_pinned,
        folder_id=payload.folder_id or None,
        created_at=payload.created_at or now,
        updated_at=payload.updated_at or now,
        versions=dump_versions(payload.versions),
    )


def apply_prompt_update(prompt: Prompt, payload: PromptUpdate, now: int) -> None:
    if payload.title is not None:
        prompt.title = payload.title
    if payload.content is not None:
        prompt.content = payload.content
    if payload.tags is not None:
        prompt.tags = dump_list(payload.tags)
    if payload.is_favorite is not None:
        prompt.is_favorite = payload.is_favorite
    if payload.is_pinned is not None:
        prompt.is_pinned = payload.is_pinned
    # An explicit null detaches the prompt from its folder.
    if "folder_id" in payload.model_fields_set:
        prompt.folder_id = payload.folder_id or None
    if payload.versions is not None:
        prompt.versions = dump_versions(payload.versions)
    prompt.updated_at = now


def folder_to_read(folder: Folder) -> FolderRead:
    return FolderRead(
        id=folder.id,
        name=folder.name,
        icon=folder.icon,
        color=folder.color,
        created_at=folder.created_at,
    )


def folder_from_create(payload: FolderCreate, now: int) -> Folder:
    return Folder(
        id=payload.id or new_identifier(),
        name=payload.name or DEFAULT_FOLDER_NAME,
        icon=payload.icon or DEFAULT_FOLDER_ICON,
        color=payload.color or DEFAULT_FOLDER_COLOR,
        created_at=payload.created_at or now,
    )


def apply_folder_update(folder: Folder, payload: FolderUpdate) -> None:
    if payload.name is not None:
        folder.name = payload.name
    if payload.icon is not None:
        folder.icon = payload.icon
    if payload.color is not None:
        folder.color = payload.color
