"""
Tests for the slot management list: fetch lifecycle, filtering, delete flow
and stale response handling.
"""

from __future__ import annotations

import asyncio
from datetime import date, time

from govslots.application.use_cases.slot_list import SlotListViewModel
from govslots.domain.entities.service import Service
from govslots.domain.entities.time_slot import TimeSlot
from govslots.infrastructure.gov_api.mock_gateway import MockGovGateway

OFFICE_ID = 7
SERVICES = [
    Service(service_id=1, gov_node_id=OFFICE_ID, service_name_en="Birth Certificate"),
    Service(service_id=2, gov_node_id=OFFICE_ID, service_name_en="Passport Renewal"),
]


def _slot(slot_id: int, day: date, service_id: int) -> TimeSlot:
    return TimeSlot(
        slot_id=slot_id,
        booking_date=day,
        start_time=time(9, 0),
        end_time=time(10, 0),
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
]


def _view_model(gateway: MockGovGateway, **kwargs) -> SlotListViewModel:
    return SlotListViewModel(gateway=gateway, directory=gateway, office_id=OFFICE_ID, default_service_id=1, **kwargs)


def test_mount_loads_slots_and_services():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    vm = _view_model(gateway)

    asyncio.run(vm.mount())

    assert [s.slot_id for s in vm.slots] == [1, 2]
    assert [s.service_id for s in vm.services] == [1, 2]
    assert not vm.loading
    assert vm.error is None
    assert ("list_slots", (1,)) in gateway.calls


def test_date_filter_is_applied_locally():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    vm = _view_model(gateway)
    asyncio.run(vm.load())
    calls_before = len(gateway.calls)

    vm.select_date(date(2024, 1, 15))

    assert [s.slot_id for s in vm.visible_slots] == [1]
    assert len(gateway.calls) == calls_before
    assert vm.header_label == "1 Time Slots for Jan 15, 2024 of 2 total"

    vm.clear_date_filter()
    assert [s.slot_id for s in vm.visible_slots] == [1, 2]


def test_service_selection_refetches_for_that_service():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    vm = _view_model(gateway)

    async def scenario():
        await vm.mount()
        await vm.select_service(2)

    asyncio.run(scenario())

    assert gateway.calls[-1] == ("list_slots", (2,))
    assert [s.slot_id for s in vm.visible_slots] == [3]
    assert vm.header_label == "1 Slots for Passport Renewal of 1 total"


def test_load_failure_is_retryable():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    gateway.fail_next("list_slots", message="Service unavailable", status_code=503)
    vm = _view_model(gateway)

    asyncio.run(vm.load())
    assert vm.error == "Service unavailable"
    assert vm.slots == []

    asyncio.run(vm.retry())
    assert vm.error is None
    assert [s.slot_id for s in vm.slots] == [1, 2]


def test_service_list_failure_is_not_fatal():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    gateway.fail_next("list_services")
    vm = _view_model(gateway)

    asyncio.run(vm.mount())

    assert vm.error is None
    assert vm.services == []
    assert len(vm.slots) == 2


def test_confirmed_delete_refetches_instead_of_local_removal():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    vm = _view_model(gateway)

    async def scenario():
        await vm.load()
        vm.request_delete(2)
        assert vm.delete_dialog.is_open
        return await vm.confirm_delete()

    assert asyncio.run(scenario()) is True

    names = gateway.call_names()
    assert names[-2:] == ["delete_slot", "list_slots"]
    assert [s.slot_id for s in vm.slots] == [1]
    assert not vm.delete_dialog.is_open
    assert vm.delete_dialog.slot_id is None


def test_failed_delete_keeps_dialog_open():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    gateway.fail_next("delete_slot", message="Slot has reservations", status_code=409)
    vm = _view_model(gateway)

    async def scenario():
        await vm.load()
        vm.request_delete(1)
        return await vm.confirm_delete()

    assert asyncio.run(scenario()) is False
    assert vm.delete_dialog.is_open
    assert vm.delete_dialog.error == "Slot has reservations"
    assert not vm.delete_dialog.deleting
    assert gateway.call_names()[-1] == "delete_slot"


def test_cancel_delete_makes_no_backend_call():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    vm = _view_model(gateway)

    vm.request_delete(1)
    vm.cancel_delete()

    assert gateway.calls == []
    assert vm.delete_dialog.slot_id is None
    assert asyncio.run(vm.confirm_delete()) is False


class _GatedGateway(MockGovGateway):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.gates: dict[int, asyncio.Event] = {}

    async def list_slots(self, reservation_id: int) -> list[TimeSlot]:
        gate = self.gates.get(reservation_id)
        if gate is not None:
            await gate.wait()
        return await super().list_slots(reservation_id)


def test_stale_response_for_previous_filter_is_discarded():
    async def scenario():
        gateway = _GatedGateway(slots=SLOTS, services=SERVICES)
        gateway.gates[1] = asyncio.Event()
        vm = _view_model(gateway)

        slow = asyncio.create_task(vm.load())
        await asyncio.sleep(0)
        await vm.select_service(2)
        assert [s.slot_id for s in vm.slots] == [3]

        # the response for service 1 arrives late
        gateway.gates[1].set()
        await slow
        return vm

    vm = asyncio.run(scenario())
    assert [s.slot_id for s in vm.slots] == [3]
    assert not vm.loading


def test_late_response_after_dispose_is_ignored():
    async def scenario():
        gateway = _GatedGateway(slots=SLOTS, services=SERVICES)
        gateway.gates[1] = asyncio.Event()
        vm = _view_model(gateway)

        pending = asyncio.create_task(vm.load())
        await asyncio.sleep(0)
        vm.dispose()
        gateway.gates[1].set()
        await pending
        return vm

    vm = asyncio.run(scenario())
    assert vm.slots == []


def test_delete_of_missing_slot_keeps_backend_status():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    vm = _view_model(gateway)

    vm.request_delete(999)
    assert asyncio.run(vm.confirm_delete()) is False
    assert vm.delete_dialog.error == "Slot not found"
    assert vm.delete_dialog.error_status == 404


def test_failed_refresh_after_delete_is_reported():
    gateway = MockGovGateway(slots=SLOTS, services=SERVICES)
    vm = _view_model(gateway)

    async def scenario():
        await vm.load()
        vm.request_delete(1)
        gateway.fail_next("list_slots", message="Backend down", status_code=503)
        return await vm.confirm_delete()

    assert asyncio.run(scenario()) is True
    assert vm.error == "Backend down"
    # last good list is kept, not replaced by an empty one
    assert [s.slot_id for s in vm.slots] == [1, 2]
