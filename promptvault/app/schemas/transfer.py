from __future__ import annotations

from typing import Any, List

from pydantic import Field, field_validator

from ..utils.clock import now_ms
from .base import CamelModel
from .folder import FolderCreate, FolderRead
from .prompt import PromptCreate, PromptRead

CURRENT_EXPORT_VERSION = 2


class ImportRequest(CamelModel):
    prompts: List[PromptCreate]
    folders: List[FolderCreate] = Field(default_factory=list)

    @field_validator("folders", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ImportCounts(CamelModel):
    prompts: int
    folders: int


class ImportResult(CamelModel):
    success: bool
    imported: ImportCounts


class ExportEnvelope(CamelModel):
    version: int = CURRENT_EXPORT_VERSION
    exported_at: int = Field(default_factory=now_ms)
    prompts: List[PromptRead] = Field(default_factory=list)
    folders: List[FolderRead] = Field(default_factory=list)


class HealthRead(CamelModel):
    status: str
    timestamp: int
    prompt_count: int
    folder_count: int
