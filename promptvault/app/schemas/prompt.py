from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field, field_validator

from ..utils.clock import now_ms
from .base import CamelModel

MAX_PROMPT_VERSIONS = 5
DEFAULT_PROMPT_TITLE = "New Prompt"


def _unique_tags(tags: List[str]) -> List[str]:
    return list(dict.fromkeys(tag for tag in tags))


class PromptVersion(CamelModel):
    id: str
    title: str = ""
    content: str = ""
    saved_at: int = Field(default_factory=now_ms)


class PromptBase(CamelModel):
    title: str = DEFAULT_PROMPT_TITLE
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    is_pinned: bool = False
    folder_id: Optional[str] = None
    versions: List[PromptVersion] = Field(default_factory=list)

    @field_validator("tags", "versions", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("title", "content", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: List[str]) -> List[str]:
        return _unique_tags(value)

    @field_validator("versions")
    @classmethod
    def _cap_versions(cls, value: List[PromptVersion]) -> List[PromptVersion]:
        return value[:MAX_PROMPT_VERSIONS]


class PromptCreate(PromptBase):
    id: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None


class PromptUpdate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    is_favorite: Optional[bool] = None
    is_pinned: Optional[bool] = None
    folder_id: Optional[str] = None
    versions: Optional[List[PromptVersion]] = None

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return None if value is None else _unique_tags(value)

    @field_validator("versions")
    @classmethod
    def _cap_versions(cls, value: Optional[List[PromptVersion]]) -> Optional[List[PromptVersion]]:
        return None if value is None else value[:MAX_PROMPT_VERSIONS]


class PromptRead(PromptBase):
    id: str
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
