"""
Tests for slot filtering, date grouping and the list header label.
"""

from __future__ import annotations

from datetime import date, datetime, time

from govslots.application.utils.slot_filter import describe_filter, filter_slots, group_by_date
from govslots.domain.entities.service import Service
from govslots.domain.entities.time_slot import SlotStatus, TimeSlot


def _slot(slot_id: int, day: date, service_id: int, start: str = "09:00", end: str = "10:00") -> TimeSlot:
    return TimeSlot(
        slot_id=slot_id,
        booking_date=day,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        max_capacity=10,
        reserved_count=0,
        recurrent_count=1,
        status="available",
        reservation_id=service_id,
    )


SLOTS = [
    _slot(1, date(2024, 1, 15), 1),
    _slot(2, date(2024, 1, 16), 1),
    _slot(3, date(2024, 1, 15), 2),
    _slot(4, date(2024, 1, 16), 2, "08:00", "08:30"),
]


def test_filter_by_date_returns_matching_slot():
    slots = [_slot(1, date(2024, 1, 15), 1), _slot(2, date(2024, 1, 16), 1)]
    result = filter_slots(slots, date=date(2024, 1, 15))
    assert result == [slots[0]]


def test_filter_by_service():
    assert [s.slot_id for s in filter_slots(SLOTS, service_id=2)] == [3, 4]


def test_filters_compose_by_conjunction():
    both = filter_slots(SLOTS, date=date(2024, 1, 16), service_id=2)
    chained = filter_slots(filter_slots(SLOTS, date=date(2024, 1, 16)), service_id=2)
    assert both == chained
    assert [s.slot_id for s in both] == [4]


def test_no_criteria_is_identity():
    result = filter_slots(SLOTS)
    assert result == SLOTS
    assert result is not SLOTS


def test_filter_does_not_mutate_input():
    source = list(SLOTS)
    result = filter_slots(source, service_id=1)
    result.clear()
    assert source == SLOTS


def test_filter_uses_calendar_date_of_datetime():
    result = filter_slots(SLOTS, date=datetime(2024, 1, 15, 17, 45))
    assert [s.slot_id for s in result] == [1, 3]


def test_filter_is_idempotent():
    assert filter_slots(SLOTS, date(2024, 1, 15), 1) == filter_slots(SLOTS, date(2024, 1, 15), 1)


def test_group_by_date_orders_dates_and_start_times():
    groups = group_by_date(list(reversed(SLOTS)))
    assert [g.booking_date for g in groups] == [date(2024, 1, 15), date(2024, 1, 16)]
    assert [s.slot_id for s in groups[1].slots] == [4, 2]


def test_describe_filter_labels():
    service = Service(service_id=2, gov_node_id=7, service_name_en="Birth Certificate")
    assert describe_filter(4, 4) == "4 Time Slots"
    assert describe_filter(2, 4, selected_date=date(2024, 1, 15)) == "2 Time Slots for Jan 15, 2024 of 4 total"
    assert describe_filter(2, 4, service=service) == "2 Slots for Birth Certificate of 4 total"
    assert (
        describe_filter(1, 4, selected_date=date(2024, 1, 15), service=service)
        == "1 Slots for Birth Certificate on Jan 15 of 4 total"
    )


def test_status_classification():
    assert SlotStatus.classify("available") is SlotStatus.available
    assert SlotStatus.classify("FULL") is SlotStatus.full
    assert SlotStatus.classify("archived") is SlotStatus.other
    assert SlotStatus.classify(None) is SlotStatus.other
