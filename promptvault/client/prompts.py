from __future__ import annotations

import re
from typing import Any, List, Sequence, Tuple
from uuid import uuid4

from ..app.schemas import MAX_PROMPT_VERSIONS, PromptVersion
from ..app.schemas import FolderRead as Folder
from ..app.schemas import PromptRead as Prompt
from ..app.utils.clock import now_ms

MARKDOWN_SUFFIX = re.compile(r"\.md$", re.IGNORECASE)
RECENT_LIMIT = 10


def new_id() -> str:
    return uuid4().hex


def new_prompt(**fields: Any) -> Prompt:
    now = now_ms()
    data = {"id": new_id(), "created_at": now, "updated_at": now}
    data.update(fields)
    return Prompt(**data)


def new_folder(**fields: Any) -> Folder:
    data = {"id": new_id(), "created_at": now_ms()}
    data.update(fields)
    return Folder(**data)


def touch(prompt: Prompt) -> Prompt:
    return prompt.model_copy(update={"updated_at": now_ms()})


def create_prompt_version(prompt: Prompt) -> Prompt:
    """Snapshot the current title and content at the head of the history.

    History keeps the newest ``MAX_PROMPT_VERSIONS`` snapshots.
    """
    snapshot = PromptVersion(
        id=new_id(),
        title=prompt.title,
        content=prompt.content,
        saved_at=now_ms(),
    )
    versions = [snapshot, *prompt.versions][:MAX_PROMPT_VERSIONS]
    return prompt.model_copy(update={"versions": versions})


def duplicate_prompt(prompt: Prompt) -> Prompt:
    now = now_ms()
    return prompt.model_copy(
        update={
            "id": new_id(),
            "title": f"{prompt.title} (Copy)",
            "created_at": now,
            "updated_at": now,
            "versions": [],
        },
        deep=True,
    )


def import_from_markdown(filename: str, content: str) -> Prompt:
    return new_prompt(title=MARKDOWN_SUFFIX.sub("", filename), content=content)


def search_prompts(prompts: Sequence[Prompt], query: str) -> List[Prompt]:
    """Case-insensitive substring match over title, content and tags."""
    if not query:
        return list(prompts)
    needle = query.lower()
    return [
        prompt
        for prompt in prompts
        if needle in prompt.title.lower()
        or needle in prompt.content.lower()
        or any(needle in tag.lower() for tag in prompt.tags)
    ]


def sort_for_display(prompts: Sequence[Prompt]) -> List[Prompt]:
    """Pinned prompts first, then most recently updated."""
    return sorted(prompts, key=lambda prompt: (not prompt.is_pinned, -prompt.updated_at))


def split_pinned(
    prompts: Sequence[Prompt], recent_limit: int = RECENT_LIMIT
) -> Tuple[List[Prompt], List[Prompt]]:
    ordered = sort_for_display(prompts)
    pinned = [prompt for prompt in ordered if prompt.is_pinned]
    recent = [prompt for prompt in ordered if not prompt.is_pinned][:recent_limit]
    return pinned, recent


__all__ = [
    "Folder",
    "Prompt",
    "PromptVersion",
    "create_prompt_version",
    "duplicate_prompt",
    "import_from_markdown",
    "new_folder",
    "new_id",
    "new_prompt",
    "search_prompts",
    "sort_for_display",
    "split_pinned",
    "touch",
]
