from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class CreateSlotPayload:
    booking_date: str  # YYYY-MM-DD
    end_time: str  # HH:MM:SS
    max_capacity: int
    recurrent_count: int
    reservation_id: int
    reserved_count: int
    start_time: str  # HH:MM:SS
    status: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UpdateSlotPayload:
    # The update endpoint is scoped to one slot: no re-parenting, no recurrence.
    booking_date: str
    end_time: str
    max_capacity: int
    reserved_count: int
    start_time: str
    status: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
