from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from typing import Any, Iterable

from govslots.application.exceptions import GatewayError
from govslots.application.ports.service_directory import ServiceDirectoryPort
from govslots.application.ports.slot_gateway import SlotGatewayPort
from govslots.domain.entities.service import Service
from govslots.domain.entities.slot_payload import CreateSlotPayload, UpdateSlotPayload
from govslots.domain.entities.time_slot import TimeSlot


class MockGovGateway(SlotGatewayPort, ServiceDirectoryPort):
    """In-memory stand-in for the gov REST backend."""

    def __init__(
        self,
        slots: Iterable[TimeSlot] | None = None,
        services: Iterable[Service] | None = None,
    ) -> None:
        self._slots: dict[int, TimeSlot] = {slot.slot_id: slot for slot in slots or []}
        self._services: list[Service] = list(services or [])
        self._next_id = max(self._slots, default=0) + 1
        self._failures: dict[str, GatewayError] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._logger = logging.getLogger(__name__)

    def fail_next(self, operation: str, message: str = "Internal Server Error", status_code: int = 500) -> None:
        """Make the next call of `operation` fail with a GatewayError."""
        self._failures[operation] = GatewayError(message, status_code=status_code)

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        error = self._failures.pop(operation, None)
        if error is not None:
            raise error

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def list_slots(self, reservation_id: int) -> list[TimeSlot]:
        self._record("list_slots", reservation_id)
        return [slot for slot in self._slots.values() if slot.reservation_id == reservation_id]

    async def list_slots_for_date(self, reservation_id: int, booking_date: date) -> list[TimeSlot]:
        self._record("list_slots_for_date", reservation_id, booking_date)
        return [
            slot
            for slot in self._slots.values()
            if slot.reservation_id == reservation_id and slot.booking_date == booking_date
        ]

    async def create_slot(self, payload: CreateSlotPayload) -> TimeSlot:
        self._record("create_slot", payload)
        slot = TimeSlot(
            slot_id=self._next_id,
            booking_date=date.fromisoformat(payload.booking_date),
            start_time=time.fromisoformat(payload.start_time),
            end_time=time.fromisoformat(payload.end_time),
            max_capacity=payload.max_capacity,
            reserved_count=payload.reserved_count,
            recurrent_count=payload.recurrent_count,
            status=payload.status,
            reservation_id=payload.reservation_id,
        )
        self._slots[slot.slot_id] = slot
        self._next_id += 1
        self._logger.info("Mock time slot created", extra={"slot_id": slot.slot_id})
        return slot

    async def get_slot(self, slot_id: int) -> TimeSlot:
        self._record("get_slot", slot_id)
        slot = self._slots.get(slot_id)
        if slot is None:
            raise GatewayError("Slot not found", status_code=404)
        return slot

    async def update_slot(self, slot_id: int, payload: UpdateSlotPayload) -> TimeSlot | None:
        self._record("update_slot", slot_id, payload)
        current = self._slots.get(slot_id)
        if current is None:
            raise GatewayError("Slot not found", status_code=404)
        updated = replace(
            current,
            booking_date=date.fromisoformat(payload.booking_date),
            start_time=time.fromisoformat(payload.start_time),
            end_time=time.fromisoformat(payload.end_time),
            max_capacity=payload.max_capacity,
            reserved_count=payload.reserved_count,
            status=payload.status,
        )
        self._slots[slot_id] = updated
        return updated

    async def delete_slot(self, slot_id: int) -> None:
        self._record("delete_slot", slot_id)
        if self._slots.pop(slot_id, None) is None:
            raise GatewayError("Slot not found", status_code=404)
        self._logger.info("Mock time slot deleted", extra={"slot_id": slot_id})

    async def list_services(self, office_id: int) -> list[Service]:
        self._record("list_services", office_id)
        return [service for service in self._services if service.gov_node_id == office_id]
