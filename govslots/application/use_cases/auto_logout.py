from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable

from govslots.application.ports.session_store import SessionStorePort

ACTIVITY_SIGNALS = frozenset({"mousemove", "keydown", "click", "scroll", "touchstart"})


class LogoutUseCase:
    def __init__(self, session_store: SessionStorePort) -> None:
        self._session_store = session_store
        self._logger = logging.getLogger(__name__)

    def execute(self) -> None:
        session = self._session_store.get()
        self._session_store.clear()
        self._logger.info(
            "Session terminated",
            extra={"reason": "logout", "user": session.username if session else None},
        )


class AutoLogoutTimer:
    """
    Idle countdown with one-second ticks. Any activity signal restarts the
    countdown; reaching zero calls `on_expire` once and stops ticking.
    """

    def __init__(
        self,
        timeout_seconds: int,
        on_expire: Callable[[], Awaitable[None] | None],
        tick_seconds: float = 1.0,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self._timeout = timeout_seconds
        self._on_expire = on_expire
        self._tick_seconds = tick_seconds
        self._remaining = timeout_seconds
        self._expired = False
        self._task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Future[None]] = set()
        self._logger = logging.getLogger(__name__)

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def expired(self) -> bool:
        return self._expired

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def countdown_label(self) -> str:
        hours, rest = divmod(self._remaining, 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{hours:02d} : {minutes:02d} : {seconds:02d}"

    def start(self) -> None:
        if self.running:
            return
        self._remaining = self._timeout
        self._expired = False
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def reset(self) -> None:
        if not self._expired:
            self._remaining = self._timeout

    def notify_activity(self, signal: str) -> bool:
        if signal not in ACTIVITY_SIGNALS or self._expired:
            return False
        self.reset()
        return True

    def tick(self) -> None:
        if self._expired:
            return
        self._remaining = max(self._remaining - 1, 0)
        if self._remaining == 0:
            self._expire()

    async def _run(self) -> None:
        while not self._expired:
            await asyncio.sleep(self._tick_seconds)
            self.tick()

    def _expire(self) -> None:
        self._expired = True
        self._logger.info("Auto logout triggered", extra={"reason": "idle"})
        try:
            result = self._on_expire()
        except Exception:
            self._logger.exception("Auto logout callback failed", extra={"reason": "idle"})
            return
        if inspect.isawaitable(result):
            # fire-and-forget: in-flight requests are not awaited
            future = asyncio.ensure_future(result)
            self._pending.add(future)
            future.add_done_callback(self._on_expire_done)

    def _on_expire_done(self, future: asyncio.Future[None]) -> None:
        self._pending.discard(future)
        if not future.cancelled() and future.exception() is not None:
            self._logger.error(
                "Auto logout callback failed",
                extra={"reason": "idle", "error": str(future.exception())},
            )
