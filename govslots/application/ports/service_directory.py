from __future__ import annotations

from abc import ABC, abstractmethod

from govslots.domain.entities.service import Service


class ServiceDirectoryPort(ABC):
    @abstractmethod
    async def list_services(self, office_id: int) -> list[Service]:
        """List the services offered by a gov node (office)."""
        raise NotImplementedError
