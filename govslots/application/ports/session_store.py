from abc import ABC, abstractmethod

from govslots.domain.entities.session import SessionContext


class SessionStorePort(ABC):
    @abstractmethod
    def get(self) -> SessionContext | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, session: SessionContext) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
