from .folder import Folder
from .prompt import Prompt

__all__ = [
    "Folder",
    "Prompt",
]
