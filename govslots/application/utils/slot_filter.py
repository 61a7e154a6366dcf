from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from govslots.domain.entities.service import Service
from govslots.domain.entities.time_slot import TimeSlot


@dataclass(frozen=True)
class SlotGroup:
    booking_date: date
    slots: tuple[TimeSlot, ...]


def _as_calendar_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def filter_slots(
    slots: Iterable[TimeSlot],
    date: date | None = None,
    service_id: int | None = None,
) -> list[TimeSlot]:
    """
    Derive the visible subset of slots. Service and date criteria compose by
    conjunction; source order is kept and the input is never mutated.
    """
    filtered = list(slots)

    if service_id is not None:
        filtered = [slot for slot in filtered if slot.reservation_id == service_id]

    if date is not None:
        wanted = _as_calendar_date(date)
        filtered = [slot for slot in filtered if _as_calendar_date(slot.booking_date) == wanted]

    return filtered


def group_by_date(slots: Iterable[TimeSlot]) -> list[SlotGroup]:
    grouped: dict[date, list[TimeSlot]] = {}
    for slot in slots:
        grouped.setdefault(slot.booking_date, []).append(slot)

    return [
        SlotGroup(
            booking_date=day,
            slots=tuple(sorted(grouped[day], key=lambda s: s.start_time)),
        )
        for day in sorted(grouped)
    ]


def describe_filter(
    visible_count: int,
    total_count: int,
    selected_date: date | None = None,
    service: Service | None = None,
) -> str:
    if selected_date and service:
        label = f"{visible_count} Slots for {service.display_name()} on {selected_date:%b %d}"
    elif selected_date:
        label = f"{visible_count} Time Slots for {selected_date:%b %d, %Y}"
    elif service:
        label = f"{visible_count} Slots for {service.display_name()}"
    else:
        return f"{visible_count} Time Slots"
    return f"{label} of {total_count} total"
