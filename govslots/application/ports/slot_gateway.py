from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from govslots.domain.entities.slot_payload import CreateSlotPayload, UpdateSlotPayload
from govslots.domain.entities.time_slot import TimeSlot


class SlotGatewayPort(ABC):
    @abstractmethod
    async def list_slots(self, reservation_id: int) -> list[TimeSlot]:
        """List every slot of a service."""
        raise NotImplementedError

    @abstractmethod
    async def list_slots_for_date(self, reservation_id: int, booking_date: date) -> list[TimeSlot]:
        """List the slots of a service on one calendar date."""
        raise NotImplementedError

    @abstractmethod
    async def create_slot(self, payload: CreateSlotPayload) -> TimeSlot:
        """Create a slot. The backend assigns the slot id."""
        raise NotImplementedError

    @abstractmethod
    async def get_slot(self, slot_id: int) -> TimeSlot:
        raise NotImplementedError

    @abstractmethod
    async def update_slot(self, slot_id: int, payload: UpdateSlotPayload) -> TimeSlot | None:
        """Update a slot. Returns the updated slot when the backend echoes it."""
        raise NotImplementedError

    @abstractmethod
    async def delete_slot(self, slot_id: int) -> None:
        raise NotImplementedError
