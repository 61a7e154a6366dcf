from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from govslots.api.dependencies import get_gateway, get_session_context
from govslots.api.v1.schemas import (
    AvailableSlotsResponseSchema,
    SlotFormRequestSchema,
    SlotFormResponseSchema,
    SlotGroupSchema,
    SlotListResponseSchema,
    SlotSchema,
)
from govslots.application.exceptions import GatewayError, InvalidTimeFormat
from govslots.application.use_cases.available_slots import AvailableSlotsViewModel
from govslots.application.use_cases.slot_form import SlotFormReconciler
from govslots.application.use_cases.slot_list import SlotListViewModel
from govslots.domain.entities.session import SessionContext
from govslots.infrastructure.gov_api.gov_api_client import GovApiClient
from govslots.infrastructure.gov_api.mock_gateway import MockGovGateway

router = APIRouter()

Gateway = GovApiClient | MockGovGateway


def _list_response(vm: SlotListViewModel) -> SlotListResponseSchema:
    return SlotListResponseSchema(
        label=vm.header_label,
        total=len(vm.slots),
        slots=[SlotSchema.from_entity(s) for s in vm.visible_slots],
    )


async def _submit(form: SlotFormReconciler, req: SlotFormRequestSchema, fields: set[str]) -> SlotFormResponseSchema:
    changes = req.model_dump(include=fields) if fields else {}
    try:
        if changes:
            form.update(**changes)
    except InvalidTimeFormat as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = await form.submit()
    form.dispose()
    if not result.ok:
        status_code = 422 if result.error_kind == "validation" else 502
        raise HTTPException(status_code=status_code, detail=result.message)

    return SlotFormResponseSchema(
        message=result.message,
        slot=SlotSchema.from_entity(result.slot) if result.slot else None,
    )


@router.get("/slots", response_model=SlotListResponseSchema)
async def list_slots(
    service_id: int | None = Query(None),
    booking_date: date | None = Query(None, alias="date"),
    session: SessionContext = Depends(get_session_context),
    gateway: Gateway = Depends(get_gateway),
):
    vm = SlotListViewModel(gateway=gateway, directory=gateway, office_id=session.user_id, initial_service_id=service_id)
    await vm.mount()
    if vm.error:
        raise HTTPException(status_code=502, detail=vm.error)

    vm.select_date(booking_date)
    return _list_response(vm)


@router.get("/slots/available/{category_id}", response_model=AvailableSlotsResponseSchema)
async def available_slots(
    category_id: int,
    booking_date: date | None = Query(None, alias="date"),
    view_all: bool = Query(False),
    gateway: Gateway = Depends(get_gateway),
):
    vm = AvailableSlotsViewModel(gateway=gateway, category_id=category_id, selected_date=booking_date, view_all=view_all)
    await vm.load()
    if vm.error:
        raise HTTPException(status_code=502, detail=vm.error)

    return AvailableSlotsResponseSchema(
        view_all=vm.filter.view_all,
        selected_date=None if vm.filter.view_all else vm.filter.selected_date,
        groups=[SlotGroupSchema.from_group(g) for g in vm.groups],
    )


@router.post("/slots", response_model=SlotFormResponseSchema, status_code=201)
async def create_slot(
    req: SlotFormRequestSchema,
    session: SessionContext = Depends(get_session_context),
    gateway: Gateway = Depends(get_gateway),
):
    try:
        form = await SlotFormReconciler.open(gateway, gateway, session.user_id)
    except GatewayError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return await _submit(form, req, set(SlotFormRequestSchema.model_fields))


@router.put("/slots/{slot_id}", response_model=SlotFormResponseSchema)
async def update_slot(
    slot_id: int,
    req: SlotFormRequestSchema,
    session: SessionContext = Depends(get_session_context),
    gateway: Gateway = Depends(get_gateway),
):
    try:
        slot = await gateway.get_slot(slot_id)
        form = await SlotFormReconciler.open(gateway, gateway, session.user_id, edit_slot=slot)
    except GatewayError as e:
        raise HTTPException(status_code=404 if e.status_code == 404 else 502, detail=str(e))

    return await _submit(form, req, req.model_fields_set)


@router.delete("/slots/{slot_id}", response_model=SlotListResponseSchema)
async def delete_slot(
    slot_id: int,
    service_id: int | None = Query(None),
    session: SessionContext = Depends(get_session_context),
    gateway: Gateway = Depends(get_gateway),
):
    vm = SlotListViewModel(gateway=gateway, directory=gateway, office_id=session.user_id, initial_service_id=service_id)
    vm.request_delete(slot_id)
    if not await vm.confirm_delete():
        status_code = 404 if vm.delete_dialog.error_status == 404 else 502
        raise HTTPException(status_code=status_code, detail=vm.delete_dialog.error)
    # deleted, but the refreshed list could not be fetched
    if vm.error:
        raise HTTPException(status_code=502, detail=vm.error)

    await vm.load_services()
    return _list_response(vm)
