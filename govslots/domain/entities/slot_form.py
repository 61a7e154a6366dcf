from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class FormPhase(str, Enum):
    empty = "empty"
    populated = "populated"
    editing = "editing"
    submitting = "submitting"
    success = "success"
    error = "error"


@dataclass(frozen=True)
class SlotFormState:
    booking_date: date | None = None
    start_time: str = ""  # HH:MM
    end_time: str = ""  # HH:MM
    max_capacity: int = 10
    reserved_count: int = 0
    recurrent_count: int = 1
    status: str = "available"
    service_id: int | None = None
