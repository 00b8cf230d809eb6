from __future__ import annotations

from . import folders, health, prompts, transfer

__all__ = [
    "folders",
    "health",
    "prompts",
    "transfer",
]
