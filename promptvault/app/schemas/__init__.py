from .folder import FolderCreate, FolderRead, FolderUpdate
from .prompt import (
    MAX_PROMPT_VERSIONS,
    PromptCreate,
    PromptRead,
    PromptUpdate,
    PromptVersion,
)
from .transfer import (
    CURRENT_EXPORT_VERSION,
    ExportEnvelope,
    HealthRead,
    ImportCounts,
    ImportRequest,
    ImportResult,
)

__all__ = [
    "CURRENT_EXPORT_VERSION",
    "ExportEnvelope",
    "FolderCreate",
    "FolderRead",
    "FolderUpdate",
    "HealthRead",
    "ImportCounts",
    "ImportRequest",
    "ImportResult",
    "MAX_PROMPT_VERSIONS",
    "PromptCreate",
    "PromptRead",
    "PromptUpdate",
    "PromptVersion",
]
