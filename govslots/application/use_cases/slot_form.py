from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Awaitable, Callable

from govslots.application.exceptions import (
    GatewayError,
    InvalidTimeFormat,
    SlotValidationError,
    SubmissionInProgress,
)
from govslots.application.ports.service_directory import ServiceDirectoryPort
from govslots.application.ports.slot_gateway import SlotGatewayPort
from govslots.application.utils.time_codec import clamp_to_window, to_minutes, with_seconds
from govslots.core.config import settings
from govslots.domain.entities.service import Service
from govslots.domain.entities.slot_form import FormPhase, SlotFormState
from govslots.domain.entities.slot_payload import CreateSlotPayload, UpdateSlotPayload
from govslots.domain.entities.time_slot import TimeSlot

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields including service selection."
TIME_ORDER_MESSAGE = "End time must be after start time."
CAPACITY_MESSAGE = "Reserved count cannot exceed max capacity."
SAVE_FAILED_MESSAGE = "Failed to save time slot"

Callback = Callable[[], Awaitable[None] | None]

_FORM_FIELDS = frozenset(f.name for f in fields(SlotFormState))
_TIME_FIELDS = ("start_time", "end_time")


@dataclass(frozen=True)
class SubmitResult:
    ok: bool
    message: str
    slot: TimeSlot | None = None
    error_kind: str | None = None  # "validation" or "backend"


def populate_from_slot(slot: TimeSlot, services: list[Service]) -> SlotFormState:
    """
    Seed a draft from a persisted slot. The service is only set when the
    slot's reservation_id matches one of the office's services.
    """
    service_id = next(
        (service.service_id for service in services if service.service_id == slot.reservation_id),
        None,
    )
    return SlotFormState(
        booking_date=slot.booking_date,
        start_time=slot.start_time.strftime("%H:%M"),
        end_time=slot.end_time.strftime("%H:%M"),
        max_capacity=slot.max_capacity,
        reserved_count=slot.reserved_count,
        recurrent_count=slot.recurrent_count,
        status=slot.status,
        service_id=service_id,
    )


def validate_form(form: SlotFormState) -> None:
    """Fail-fast validation; the first broken rule wins."""
    if not form.booking_date or not form.start_time or not form.end_time or form.service_id is None:
        raise SlotValidationError(REQUIRED_FIELDS_MESSAGE)

    if to_minutes(form.start_time) >= to_minutes(form.end_time):
        raise SlotValidationError(TIME_ORDER_MESSAGE)

    if form.reserved_count > form.max_capacity:
        raise SlotValidationError(CAPACITY_MESSAGE)


def build_create_payload(form: SlotFormState) -> CreateSlotPayload:
    validate_form(form)
    return CreateSlotPayload(
        booking_date=form.booking_date.isoformat(),
        end_time=with_seconds(form.end_time),
        max_capacity=int(form.max_capacity),
        recurrent_count=int(form.recurrent_count),
        reservation_id=int(form.service_id),
        reserved_count=int(form.reserved_count),
        start_time=with_seconds(form.start_time),
        status=form.status,
    )


def build_update_payload(form: SlotFormState) -> UpdateSlotPayload:
    validate_form(form)
    return UpdateSlotPayload(
        booking_date=form.booking_date.isoformat(),
        end_time=with_seconds(form.end_time),
        max_capacity=int(form.max_capacity),
        reserved_count=int(form.reserved_count),
        start_time=with_seconds(form.start_time),
        status=form.status,
    )


async def _invoke(callback: Callback | None) -> None:
    if callback is None:
        return
    result = callback()
    if inspect.isawaitable(result):
        await result


class SlotFormReconciler:
    """Draft state, validation and submission for one create/edit dialog."""

    def __init__(
        self,
        gateway: SlotGatewayPort,
        services: list[Service],
        edit_slot: TimeSlot | None = None,
        on_refresh: Callback | None = None,
        on_close: Callback | None = None,
        close_delay: float | None = None,
        time_window: tuple[str | None, str | None] | None = None,
    ) -> None:
        self._gateway = gateway
        self._services = list(services)
        self._edit_slot = edit_slot
        self._on_refresh = on_refresh
        self._on_close = on_close
        self._close_delay = settings.FORM_CLOSE_DELAY_SECONDS if close_delay is None else close_delay
        self._time_window = time_window or (settings.SLOT_WINDOW_START, settings.SLOT_WINDOW_END)
        self._close_task: asyncio.Task[None] | None = None
        self._error: str | None = None
        self._success: str | None = None
        self._logger = logging.getLogger(__name__)

        if edit_slot is not None:
            self._form = populate_from_slot(edit_slot, self._services)
            self._phase = FormPhase.populated
        else:
            self._form = SlotFormState()
            self._phase = FormPhase.empty

    @classmethod
    async def open(
        cls,
        gateway: SlotGatewayPort,
        directory: ServiceDirectoryPort,
        office_id: int,
        edit_slot: TimeSlot | None = None,
        **kwargs: Any,
    ) -> "SlotFormReconciler":
        """
        Fetch the office's services before the dialog opens so an edited slot
        never shows up with its service unresolved.
        """
        services = await directory.list_services(office_id)
        reconciler = cls(gateway=gateway, services=services, edit_slot=edit_slot, **kwargs)
        if edit_slot is not None and reconciler.form.service_id is None:
            reconciler._logger.warning(
                "Edited slot belongs to an unknown service",
                extra={"slot_id": edit_slot.slot_id, "service_id": edit_slot.reservation_id},
            )
        return reconciler

    @property
    def form(self) -> SlotFormState:
        return self._form

    @property
    def phase(self) -> FormPhase:
        return self._phase

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def success_message(self) -> str | None:
        return self._success

    @property
    def services(self) -> list[Service]:
        return list(self._services)

    @property
    def is_edit(self) -> bool:
        return self._edit_slot is not None

    def _resolved_form(self) -> SlotFormState:
        """The draft with a service id outside the office's services treated as unset."""
        form = self._form
        if form.service_id is not None and not any(s.service_id == form.service_id for s in self._services):
            return replace(form, service_id=None)
        return form

    @property
    def is_form_valid(self) -> bool:
        form = self._resolved_form()
        return bool(
            form.booking_date
            and form.start_time.strip()
            and form.end_time.strip()
            and form.service_id is not None
        )

    @property
    def can_submit(self) -> bool:
        return self.is_form_valid and self._phase != FormPhase.submitting

    def update(self, **changes: Any) -> SlotFormState:
        unknown = set(changes) - _FORM_FIELDS
        if unknown:
            raise TypeError(f"Unknown slot form fields: {', '.join(sorted(unknown))}")

        minimum, maximum = self._time_window
        for key in _TIME_FIELDS:
            value = changes.get(key)
            if value:
                changes[key] = clamp_to_window(value, minimum, maximum)

        self._form = replace(self._form, **changes)
        if self._phase != FormPhase.submitting:
            self._phase = FormPhase.editing
            self._error = None
            self._success = None
        return self._form

    async def submit(self) -> SubmitResult:
        if self._phase == FormPhase.submitting:
            raise SubmissionInProgress("Time slot submission already in progress")

        self._error = None
        self._success = None
        form = self._resolved_form()
        try:
            if self.is_edit:
                payload: CreateSlotPayload | UpdateSlotPayload = build_update_payload(form)
            else:
                payload = build_create_payload(form)
        except (SlotValidationError, InvalidTimeFormat) as e:
            self._phase = FormPhase.error
            self._error = str(e)
            self._logger.info("Slot form validation failed", extra={"reason": str(e)})
            return SubmitResult(ok=False, message=str(e), error_kind="validation")

        self._phase = FormPhase.submitting
        try:
            if isinstance(payload, UpdateSlotPayload):
                slot = await self._gateway.update_slot(self._edit_slot.slot_id, payload)
                message = "Time slot updated successfully!"
            else:
                slot = await self._gateway.create_slot(payload)
                message = "Time slot created successfully!"
        except GatewayError as e:
            self._phase = FormPhase.error
            self._error = str(e) or SAVE_FAILED_MESSAGE
            self._logger.error("Saving time slot failed", extra={"error": self._error})
            return SubmitResult(ok=False, message=self._error, error_kind="backend")

        self._phase = FormPhase.success
        self._success = message
        self._form = SlotFormState()
        self._logger.info(message, extra={"slot_id": slot.slot_id if slot else None})

        await _invoke(self._on_refresh)
        self._schedule_close()
        return SubmitResult(ok=True, message=message, slot=slot)

    async def cancel(self) -> None:
        self._form = SlotFormState()
        self._phase = FormPhase.empty
        self._error = None
        self._success = None
        self.dispose()
        await _invoke(self._on_close)

    def dispose(self) -> None:
        if self._close_task is not None and not self._close_task.done():
            self._close_task.cancel()
        self._close_task = None

    def _schedule_close(self) -> None:
        if self._on_close is None:
            return
        self._close_task = asyncio.get_running_loop().create_task(self._close_later())

    async def _close_later(self) -> None:
        # success message stays visible for close_delay seconds
        await asyncio.sleep(self._close_delay)
        await _invoke(self._on_close)
