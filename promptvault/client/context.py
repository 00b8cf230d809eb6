from __future__ import annotations

import logging
from typing import Optional

from .api import ApiClient
from .cache import KeyValueStorage, LocalCache
from .config import ClientSettings, build_storage
from .monitor import ConnectionMonitor
from .sync import VaultStore

logger = logging.getLogger(__name__)


class VaultContext:
    """Owns the client-side state for one running instance.

    Build it once at startup, ``start()`` it, and ``close()`` it on the way out
    (or use it as an async context manager).
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        storage: Optional[KeyValueStorage] = None,
        api: Optional[ApiClient] = None,
    ) -> None:
        self.settings = settings or ClientSettings.from_env()
        self.storage = storage or build_storage(self.settings)
        self.cache = LocalCache(self.storage)
        self.api = api or ApiClient(self.settings.api_url, timeout=self.settings.request_timeout)
        self.store = VaultStore(self.api, self.cache)
        self.monitor = ConnectionMonitor(
            lambda: self.api.health(timeout=self.settings.health_timeout),
            interval=self.settings.health_interval,
            timeout=self.settings.health_timeout,
        )

    async def start(self) -> None:
        migrated = await self.store.migrate_legacy_storage(self.storage)
        if migrated:
            logger.info("Legacy storage migrated to %s", self.settings.api_url)
        self.monitor.start()

    async def close(self) -> None:
        await self.monitor.stop()
        await self.api.aclose()

    async def __aenter__(self) -> "VaultContext":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
