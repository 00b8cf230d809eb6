from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0
DEFAULT_TIMEOUT = 5.0


class ConnectionStatus(str, Enum):
    CHECKING = "checking"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


StatusListener = Callable[[ConnectionStatus], Any]


class ConnectionMonitor:
    """Periodic health probe that broadcasts reachability to listeners.

    Every probe passes through ``checking``. Listeners hear about changes only,
    except that a new subscriber is immediately handed the current status.
    """

    def __init__(
        self,
        probe: Callable[[], Awaitable[Any]],
        interval: float = DEFAULT_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._probe = probe
        self.interval = interval
        self.timeout = timeout
        self._status = ConnectionStatus.CHECKING
        self._listeners: List[StatusListener] = []
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        self._listeners.append(listener)
        self._notify(listener, self._status)

        def _unsubscribe() -> None:
            with suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, listener: StatusListener, status: ConnectionStatus) -> None:
        try:
            listener(status)
        except Exception:
            logger.exception("Connection status listener failed")

    def _set_status(self, status: ConnectionStatus) -> None:
        if status is self._status:
            return
        self._status = status
        for listener in list(self._listeners):
            self._notify(listener, status)

    async def check(self) -> bool:
        self._set_status(ConnectionStatus.CHECKING)
        try:
            await asyncio.wait_for(self._probe(), timeout=self.timeout)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.debug("Health check failed: %s", exc)
            self._set_status(ConnectionStatus.DISCONNECTED)
            return False
        self._set_status(ConnectionStatus.CONNECTED)
        return True

    async def _run(self) -> None:
        while True:
            await self.check()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task


__all__ = ["ConnectionMonitor", "ConnectionStatus"]
