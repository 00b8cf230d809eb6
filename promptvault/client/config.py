from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .cache import FileStorage, KeyValueStorage, RedisStorage

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_API_URL = "http://localhost:2529"
DEFAULT_CACHE_FILE = Path("~/.promptvault/cache.json")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r because it is not a number.", name, raw)
        return default


@dataclass(frozen=True)
class ClientSettings:
    api_url: str = DEFAULT_API_URL
    cache_backend: str = "file"
    cache_file: Path = DEFAULT_CACHE_FILE
    redis_url: str = "redis://localhost:6379/0"
    health_interval: float = 30.0
    health_timeout: float = 5.0
    request_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "ClientSettings":
        return cls(
            api_url=os.getenv("PROMPTVAULT_API_URL", DEFAULT_API_URL),
            cache_backend=os.getenv("PROMPTVAULT_CACHE_BACKEND", "file").strip().lower(),
            cache_file=Path(os.getenv("PROMPTVAULT_CACHE_FILE", str(DEFAULT_CACHE_FILE))),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            health_interval=_float_env("PROMPTVAULT_HEALTH_INTERVAL", 30.0),
            health_timeout=_float_env("PROMPTVAULT_HEALTH_TIMEOUT", 5.0),
            request_timeout=_float_env("PROMPTVAULT_REQUEST_TIMEOUT", 10.0),
        )


def build_storage(settings: ClientSettings) -> KeyValueStorage:
    if settings.cache_backend == "redis":
        return RedisStorage.from_url(settings.redis_url)
    if settings.cache_backend != "file":
        logger.warning(
            "Unknown PROMPTVAULT_CACHE_BACKEND '%s'; falling back to the file cache.",
            settings.cache_backend,
        )
    return FileStorage(settings.cache_file)
