from __future__ import annotations

from govslots.application.ports.session_store import SessionStorePort
from govslots.domain.entities.session import SessionContext


class MemorySessionStore(SessionStorePort):
    def __init__(self, session: SessionContext | None = None) -> None:
        self._session = session

    def get(self) -> SessionContext | None:
        return self._session

    def put(self, session: SessionContext) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None

    def get_token(self) -> str | None:
        return self._session.access_token if self._session else None
