from functools import lru_cache
import logging
from typing import Callable

from govslots.application.use_cases.auto_logout import AutoLogoutTimer, LogoutUseCase
from govslots.core.config import settings
from govslots.infrastructure.gov_api.gov_api_client import GovApiClient
from govslots.infrastructure.gov_api.mock_gateway import MockGovGateway
from govslots.infrastructure.store.memory_session_store import MemorySessionStore


_mock_gateway: MockGovGateway | None = None


def uses_mock_gateway() -> bool:
    return not settings.GOV_API_BASE_URL or settings.ENV.lower() in {"dev", "local"}


def get_mock_gateway() -> MockGovGateway:
    global _mock_gateway
    if _mock_gateway is None:
        _mock_gateway = MockGovGateway()
    return _mock_gateway


def build_gateway(token_provider: Callable[[], str | None]) -> GovApiClient | MockGovGateway:
    if uses_mock_gateway():
        logging.getLogger(__name__).info("Using MockGovGateway (ENV=%s)", settings.ENV)
        return get_mock_gateway()
    return GovApiClient(
        base_url=settings.GOV_API_BASE_URL,
        token_provider=token_provider,
        timeout=settings.GOV_API_TIMEOUT_SECONDS,
    )


@lru_cache
def get_session_store() -> MemorySessionStore:
    return MemorySessionStore()


def get_logout_use_case() -> LogoutUseCase:
    return LogoutUseCase(session_store=get_session_store())


def get_auto_logout_timer() -> AutoLogoutTimer:
    return AutoLogoutTimer(
        timeout_seconds=settings.AUTO_LOGOUT_SECONDS,
        on_expire=get_logout_use_case().execute,
    )
