from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from enum import Enum


class SlotStatus(str, Enum):
    available = "available"
    full = "full"
    unavailable = "unavailable"
    other = "other"

    @classmethod
    def classify(cls, raw: str | None) -> "SlotStatus":
        value = (raw or "").strip().lower()
        for member in (cls.available, cls.full, cls.unavailable):
            if member.value == value:
                return member
        return cls.other


@dataclass(frozen=True)
class TimeSlot:
    slot_id: int
    booking_date: date
    start_time: time
    end_time: time
    max_capacity: int
    reserved_count: int
    recurrent_count: int
    status: str
    reservation_id: int  # owning service id

    @property
    def status_kind(self) -> SlotStatus:
        return SlotStatus.classify(self.status)

    @property
    def remaining_capacity(self) -> int:
        return max(self.max_capacity - self.reserved_count, 0)
