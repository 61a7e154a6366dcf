from datetime import date

from pydantic import BaseModel, Field

from govslots.application.utils.slot_filter import SlotGroup
from govslots.application.utils.time_codec import format_time
from govslots.core.config import settings
from govslots.domain.entities.time_slot import SlotStatus, TimeSlot


class SlotSchema(BaseModel):
    slot_id: int
    booking_date: date
    start_time: str
    end_time: str
    start_label: str
    end_label: str
    max_capacity: int
    reserved_count: int
    recurrent_count: int
    status: str
    status_kind: SlotStatus
    reservation_id: int

    @classmethod
    def from_entity(cls, slot: TimeSlot) -> "SlotSchema":
        start = slot.start_time.strftime("%H:%M")
        end = slot.end_time.strftime("%H:%M")
        return cls(
            slot_id=slot.slot_id,
            booking_date=slot.booking_date,
            start_time=start,
            end_time=end,
            start_label=format_time(start, settings.USE_12_HOUR_CLOCK),
            end_label=format_time(end, settings.USE_12_HOUR_CLOCK),
            max_capacity=slot.max_capacity,
            reserved_count=slot.reserved_count,
            recurrent_count=slot.recurrent_count,
            status=slot.status,
            status_kind=slot.status_kind,
            reservation_id=slot.reservation_id,
        )


class SlotListResponseSchema(BaseModel):
    label: str
    total: int
    slots: list[SlotSchema] = Field(default_factory=list)


class SlotGroupSchema(BaseModel):
    booking_date: date
    slots: list[SlotSchema]

    @classmethod
    def from_group(cls, group: SlotGroup) -> "SlotGroupSchema":
        return cls(
            booking_date=group.booking_date,
            slots=[SlotSchema.from_entity(s) for s in group.slots],
        )


class AvailableSlotsResponseSchema(BaseModel):
    view_all: bool
    selected_date: date | None = None
    groups: list[SlotGroupSchema] = Field(default_factory=list)


class SlotFormRequestSchema(BaseModel):
    booking_date: date | None = None
    start_time: str = ""
    end_time: str = ""
    max_capacity: int = Field(10, ge=1)
    reserved_count: int = Field(0, ge=0)
    recurrent_count: int = Field(1, ge=0)
    status: str = "available"
    service_id: int | None = None


class SlotFormResponseSchema(BaseModel):
    message: str
    slot: SlotSchema | None = None
