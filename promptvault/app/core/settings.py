from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

APP_NAME = "PromptVault API"
APP_VERSION = "1.0.0"

PORT = int(os.getenv("PORT", "2529"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "info").lower()

_DEFAULT_DB_PATH = Path(
    os.getenv("PROMPTVAULT_DB_PATH", Path(__file__).resolve().parents[2] / "data" / "promptvault.db")
)

DATABASE_URL = os.getenv("DATABASE_URL")
if DATABASE_URL is None:
    _DEFAULT_DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    DATABASE_URL = f"sqlite+aiosqlite:///{_DEFAULT_DB_PATH}"


def get_cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]
