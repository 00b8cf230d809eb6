from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..utils.clock import now_ms
from .base import CamelModel

DEFAULT_FOLDER_NAME = "New Folder"
DEFAULT_FOLDER_ICON = "📁"
DEFAULT_FOLDER_COLOR = "#3B82F6"


class FolderBase(CamelModel):
    name: str = DEFAULT_FOLDER_NAME
    icon: str = DEFAULT_FOLDER_ICON
    color: str = DEFAULT_FOLDER_COLOR


class FolderCreate(FolderBase):
    id: Optional[str] = None
    created_at: Optional[int] = None


class FolderUpdate(CamelModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class FolderRead(FolderBase):
    id: str
    created_at: int = Field(default_factory=now_ms)
