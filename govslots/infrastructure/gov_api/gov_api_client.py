from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from govslots.application.dto.gov_api_dto import ServiceDTO, TimeSlotDTO
from govslots.application.exceptions import GatewayContractError, GatewayError
from govslots.application.ports.service_directory import ServiceDirectoryPort
from govslots.application.ports.slot_gateway import SlotGatewayPort
from govslots.domain.entities.service import Service
from govslots.domain.entities.slot_payload import CreateSlotPayload, UpdateSlotPayload
from govslots.domain.entities.time_slot import TimeSlot

LOGIN_PATH = "/api/v1/gov/login"


class GovApiClient(SlotGatewayPort, ServiceDirectoryPort):
    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], str | None],
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("GOV_API_BASE_URL is required for the gov API client")

        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._attach_token]},
        )
        self._logger = logging.getLogger(__name__)

    async def _attach_token(self, request: httpx.Request) -> None:
        if request.url.path == LOGIN_PATH:
            return
        token = self._token_provider()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_slots(self, reservation_id: int) -> list[TimeSlot]:
        data = await self._request("GET", f"/api/v1/appointments/available_slots/{reservation_id}")
        return self._parse_slots(data)

    async def list_slots_for_date(self, reservation_id: int, booking_date: date) -> list[TimeSlot]:
        path = f"/api/v1/appointments/available_slots/{reservation_id}/{booking_date.isoformat()}"
        data = await self._request("GET", path)
        return self._parse_slots(data)

    async def create_slot(self, payload: CreateSlotPayload) -> TimeSlot:
        data = await self._request("POST", "/api/v1/appointments/create_slot", json=payload.to_dict())
        slot = self._parse_slot(data)
        self._logger.info(
            "Time slot created",
            extra={"slot_id": slot.slot_id, "service_id": payload.reservation_id, "date": payload.booking_date},
        )
        return slot

    async def get_slot(self, slot_id: int) -> TimeSlot:
        data = await self._request("GET", f"/api/v1/appointments/slot/{slot_id}")
        return self._parse_slot(data)

    async def update_slot(self, slot_id: int, payload: UpdateSlotPayload) -> TimeSlot | None:
        data = await self._request("PUT", f"/api/v1/appointments/slot/{slot_id}", json=payload.to_dict())
        self._logger.info("Time slot updated", extra={"slot_id": slot_id, "date": payload.booking_date})
        if not data:
            return None
        return self._parse_slot(data)

    async def delete_slot(self, slot_id: int) -> None:
        await self._request("DELETE", f"/api/v1/appointments/slot/delete/{slot_id}")
        self._logger.info("Time slot deleted", extra={"slot_id": slot_id})

    async def list_services(self, office_id: int) -> list[Service]:
        data = await self._request("GET", f"/api/v1/gov/services/{office_id}")
        if not isinstance(data, list):
            raise GatewayContractError("Expected a list of services")
        try:
            return [ServiceDTO.model_validate(item).to_entity() for item in data]
        except ValidationError as e:
            raise GatewayContractError(f"Malformed service record: {e}") from e

    async def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            self._logger.error("Gov API request failed", extra={"error": str(e), "path": path})
            raise GatewayError(f"Request to {path} failed: {e}") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            self._logger.error(
                "Gov API returned an error",
                extra={"status": resp.status_code, "path": path, "error": message},
            )
            raise GatewayError(message, status_code=resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise GatewayContractError(f"Response from {path} is not JSON") from e

    def _parse_slots(self, data: Any) -> list[TimeSlot]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise GatewayContractError("Expected a list of time slots")
        return [self._parse_slot(item) for item in data]

    def _parse_slot(self, data: Any) -> TimeSlot:
        try:
            return TimeSlotDTO.model_validate(data).to_entity()
        except ValidationError as e:
            raise GatewayContractError(f"Malformed time slot record: {e}") from e


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Request failed with status code {resp.status_code}"
