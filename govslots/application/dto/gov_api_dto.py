from __future__ import annotations

from datetime import date, time

from pydantic import BaseModel, Field, field_validator

from govslots.domain.entities.service import Service
from govslots.domain.entities.time_slot import TimeSlot


class TimeSlotDTO(BaseModel):
    slot_id: int
    booking_date: date
    start_time: time
    end_time: time
    max_capacity: int
    reserved_count: int = 0
    recurrent_count: int = 0
    status: str = "available"
    reservation_id: int

    @field_validator("booking_date", mode="before")
    @classmethod
    def _calendar_part(cls, value: object) -> object:
        # the backend sometimes returns "YYYY-MM-DDT00:00:00"
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value

    def to_entity(self) -> TimeSlot:
        return TimeSlot(
            slot_id=self.slot_id,
            booking_date=self.booking_date,
            start_time=self.start_time,
            end_time=self.end_time,
            max_capacity=self.max_capacity,
            reserved_count=self.reserved_count,
            recurrent_count=self.recurrent_count,
            status=self.status,
            reservation_id=self.reservation_id,
        )


class ServiceDTO(BaseModel):
    service_id: int
    gov_node_id: int
    service_type: str = ""
    service_name_en: str
    service_name_si: str = ""
    service_name_ta: str = ""
    description_en: str = ""
    description_si: str = ""
    description_ta: str = ""
    is_active: bool = True
    required_document_types: list[int] = Field(default_factory=list)

    def to_entity(self) -> Service:
        return Service(
            service_id=self.service_id,
            gov_node_id=self.gov_node_id,
            service_type=self.service_type,
            service_name_en=self.service_name_en,
            service_name_si=self.service_name_si,
            service_name_ta=self.service_name_ta,
            description_en=self.description_en,
            description_si=self.description_si,
            description_ta=self.description_ta,
            is_active=self.is_active,
            required_document_types=tuple(self.required_document_types),
        )
