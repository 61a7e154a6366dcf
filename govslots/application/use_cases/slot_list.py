from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date

from govslots.application.exceptions import GatewayError
from govslots.application.ports.service_directory import ServiceDirectoryPort
from govslots.application.ports.slot_gateway import SlotGatewayPort
from govslots.application.utils.request_guard import LatestRequestGuard
from govslots.application.utils.slot_filter import describe_filter, filter_slots
from govslots.core.config import settings
from govslots.domain.entities.filter_state import FilterState
from govslots.domain.entities.service import Service
from govslots.domain.entities.time_slot import TimeSlot

FETCH_FAILED_MESSAGE = "Failed to fetch slots"
DELETE_FAILED_MESSAGE = "Failed to delete slot"


@dataclass(frozen=True)
class DeleteDialogState:
    slot_id: int | None = None
    is_open: bool = False
    deleting: bool = False
    error: str | None = None
    error_status: int | None = None


class SlotListViewModel:
    """
    Slot management list: fetch lifecycle, client-side filtering and the
    delete confirmation flow.

    Every mutation is followed by a re-fetch instead of a local edit of the
    list, so the view always mirrors what the backend holds.
    """

    def __init__(
        self,
        gateway: SlotGatewayPort,
        directory: ServiceDirectoryPort,
        office_id: int,
        initial_service_id: int | None = None,
        default_service_id: int | None = None,
    ) -> None:
        self._gateway = gateway
        self._directory = directory
        self._office_id = office_id
        self._default_service_id = default_service_id or settings.DEFAULT_SERVICE_ID
        self._filter = FilterState(service_id=initial_service_id)
        self._slots: list[TimeSlot] = []
        self._services: list[Service] = []
        self._loading = False
        self._services_loading = False
        self._error: str | None = None
        self._delete = DeleteDialogState()
        self._guard = LatestRequestGuard()
        self._logger = logging.getLogger(__name__)

    @property
    def slots(self) -> list[TimeSlot]:
        return list(self._slots)

    @property
    def services(self) -> list[Service]:
        return list(self._services)

    @property
    def filter(self) -> FilterState:
        return self._filter

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def services_loading(self) -> bool:
        return self._services_loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def delete_dialog(self) -> DeleteDialogState:
        return self._delete

    @property
    def visible_slots(self) -> list[TimeSlot]:
        return filter_slots(self._slots, self._filter.selected_date, self._filter.service_id)

    @property
    def header_label(self) -> str:
        service = next(
            (s for s in self._services if s.service_id == self._filter.service_id),
            None,
        )
        return describe_filter(
            len(self.visible_slots),
            len(self._slots),
            selected_date=self._filter.selected_date,
            service=service,
        )

    def _fetch_context(self) -> int:
        return self._filter.service_id or self._default_service_id

    async def mount(self) -> None:
        await asyncio.gather(self.load(), self.load_services())

    async def load(self, service_id: int | None = None) -> list[TimeSlot]:
        if service_id is not None and service_id != self._filter.service_id:
            self._filter = replace(self._filter, service_id=service_id)

        context = self._fetch_context()
        ticket = self._guard.issue(context)
        self._loading = True
        self._error = None
        try:
            slots = await self._gateway.list_slots(context)
        except GatewayError as e:
            if self._guard.is_current(ticket, self._fetch_context()):
                self._error = str(e) or FETCH_FAILED_MESSAGE
                self._logger.error("Error fetching slots", extra={"service_id": context, "error": str(e)})
            return list(self._slots)
        finally:
            if self._guard.is_latest(ticket):
                self._loading = False

        if not self._guard.accept(ticket, self._fetch_context()):
            self._logger.info("Discarded stale slot response", extra={"service_id": context})
            return list(self._slots)

        self._slots = list(slots)
        return list(self._slots)

    async def retry(self) -> list[TimeSlot]:
        return await self.load()

    async def load_services(self) -> list[Service]:
        self._services_loading = True
        try:
            services = await self._directory.list_services(self._office_id)
        except GatewayError as e:
            # services only label the list, viewing works without them
            self._logger.warning("Error fetching services", extra={"error": str(e)})
            return list(self._services)
        finally:
            self._services_loading = False

        if not self._guard.closed:
            self._services = list(services)
        return list(self._services)

    def select_date(self, selected_date: date | None) -> None:
        self._filter = replace(self._filter, selected_date=selected_date)

    async def select_service(self, service_id: int | None) -> list[TimeSlot]:
        self._filter = replace(self._filter, service_id=service_id)
        return await self.load()

    def clear_date_filter(self) -> None:
        self.select_date(None)

    async def clear_service_filter(self) -> list[TimeSlot]:
        return await self.select_service(None)

    async def clear_all_filters(self) -> list[TimeSlot]:
        self._filter = FilterState()
        return await self.load()

    def request_delete(self, slot_id: int) -> None:
        self._delete = DeleteDialogState(slot_id=slot_id, is_open=True)

    def cancel_delete(self) -> None:
        self._delete = DeleteDialogState()

    async def confirm_delete(self) -> bool:
        slot_id = self._delete.slot_id
        if slot_id is None:
            return False

        self._delete = replace(self._delete, deleting=True, error=None, error_status=None)
        try:
            await self._gateway.delete_slot(slot_id)
        except GatewayError as e:
            self._delete = replace(
                self._delete,
                deleting=False,
                error=str(e) or DELETE_FAILED_MESSAGE,
                error_status=e.status_code,
            )
            self._logger.error("Error deleting slot", extra={"slot_id": slot_id, "error": str(e)})
            return False

        await self.load()
        self._delete = DeleteDialogState()
        return True

    def dispose(self) -> None:
        self._guard.close()
