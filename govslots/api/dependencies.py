from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends, Header, HTTPException

from govslots.domain.entities.session import SessionContext
from govslots.infrastructure.gov_api.gov_api_client import GovApiClient
from govslots.infrastructure.gov_api.mock_gateway import MockGovGateway
from govslots.wiring.dependencies import build_gateway


def get_session_context(
    authorization: str | None = Header(None),
    x_office_id: int | None = Header(None),
) -> SessionContext:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Missing bearer token")
    if x_office_id is None:
        raise HTTPException(status_code=400, detail="Missing X-Office-Id header")
    return SessionContext(access_token=token.strip(), user_id=x_office_id)


async def get_gateway(
    session: SessionContext = Depends(get_session_context),
) -> AsyncIterator[GovApiClient | MockGovGateway]:
    gateway = build_gateway(lambda: session.access_token)
    try:
        yield gateway
    finally:
        if isinstance(gateway, GovApiClient):
            await gateway.aclose()
