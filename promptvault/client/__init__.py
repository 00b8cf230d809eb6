"""Client core: templates, clipboard, local cache, sync and connection monitoring."""

from .api import ApiClient, ApiError
from .cache import FileStorage, LocalCache, MemoryStorage, RedisStorage
from .clipboard import CopyOutcome, CopyStatus, FallbackClipboard, default_clipboard, resolve_and_copy
from .context import VaultContext
from .monitor import ConnectionMonitor, ConnectionStatus
from .prompts import Folder, Prompt, create_prompt_version, search_prompts, sort_for_display
from .sync import VaultStore, parse_import
from .templates import Variable, extract_variables, replace_variables

__all__ = [
    "ApiClient",
    "ApiError",
    "ConnectionMonitor",
    "ConnectionStatus",
    "CopyOutcome",
    "CopyStatus",
    "FallbackClipboard",
    "FileStorage",
    "Folder",
    "LocalCache",
    "MemoryStorage",
    "Prompt",
    "RedisStorage",
    "Variable",
    "VaultContext",
    "VaultStore",
    "create_prompt_version",
    "default_clipboard",
    "extract_variables",
    "parse_import",
    "replace_variables",
    "resolve_and_copy",
    "search_prompts",
    "sort_for_display",
]
