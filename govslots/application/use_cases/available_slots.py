from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from govslots.application.exceptions import GatewayError
from govslots.application.ports.slot_gateway import SlotGatewayPort
from govslots.application.utils.request_guard import LatestRequestGuard
from govslots.application.utils.slot_filter import SlotGroup, group_by_date
from govslots.domain.entities.filter_state import FilterState
from govslots.domain.entities.time_slot import TimeSlot

FETCH_FAILED_MESSAGE = "Failed to fetch available slots"


class AvailableSlotsViewModel:
    """Read-only slot browser for one service: a single date or everything."""

    def __init__(
        self,
        gateway: SlotGatewayPort,
        category_id: int,
        selected_date: date | None = None,
        view_all: bool = False,
    ) -> None:
        self._gateway = gateway
        self._category_id = category_id
        self._filter = FilterState(selected_date=selected_date or date.today(), view_all=view_all)
        self._slots: list[TimeSlot] = []
        self._loading = False
        self._error: str | None = None
        self._guard = LatestRequestGuard()
        self._logger = logging.getLogger(__name__)

    @property
    def filter(self) -> FilterState:
        return self._filter

    @property
    def slots(self) -> list[TimeSlot]:
        return list(self._slots)

    @property
    def groups(self) -> list[SlotGroup]:
        return group_by_date(self._slots)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    def _snapshot(self) -> tuple[int, date | None, bool]:
        return (self._category_id, self._filter.selected_date, self._filter.view_all)

    async def load(self) -> list[TimeSlot]:
        if not self._category_id:
            return []
        if not self._filter.view_all and self._filter.selected_date is None:
            return list(self._slots)

        snapshot = self._snapshot()
        ticket = self._guard.issue(snapshot)
        self._loading = True
        self._error = None
        try:
            if self._filter.view_all:
                slots = await self._gateway.list_slots(self._category_id)
            else:
                slots = await self._gateway.list_slots_for_date(self._category_id, self._filter.selected_date)
        except GatewayError as e:
            if self._guard.is_current(ticket, self._snapshot()):
                self._error = str(e) or FETCH_FAILED_MESSAGE
                self._logger.error(
                    "Error fetching available slots",
                    extra={"service_id": self._category_id, "error": str(e)},
                )
            return list(self._slots)
        finally:
            if self._guard.is_latest(ticket):
                self._loading = False

        if not self._guard.accept(ticket, self._snapshot()):
            self._logger.info(
                "Discarded stale available slot response",
                extra={"service_id": self._category_id, "date": str(snapshot[1])},
            )
            return list(self._slots)

        self._slots = list(slots)
        return list(self._slots)

    async def select_date(self, selected_date: date | None) -> list[TimeSlot]:
        self._filter = replace(self._filter, selected_date=selected_date)
        return await self.load()

    async def set_view_all(self, view_all: bool) -> list[TimeSlot]:
        changes: dict[str, object] = {"view_all": view_all}
        if not view_all and self._filter.selected_date is None:
            changes["selected_date"] = date.today()
        self._filter = replace(self._filter, **changes)
        return await self.load()

    async def reset_to_today(self) -> list[TimeSlot]:
        return await self.select_date(date.today())

    def dispose(self) -> None:
        self._guard.close()
