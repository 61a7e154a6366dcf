from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class FilterState:
    selected_date: date | None = None
    service_id: int | None = None
    view_all: bool = False  # "view all" vs "view by date"

    @property
    def is_active(self) -> bool:
        return self.selected_date is not None or self.service_id is not None
