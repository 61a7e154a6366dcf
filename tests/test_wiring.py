"""
Tests for gateway selection and the session/logout factories.
"""

from __future__ import annotations

import asyncio

import pytest

from govslots.core.config import settings
from govslots.domain.entities.session import SessionContext
from govslots.infrastructure.gov_api.gov_api_client import GovApiClient
from govslots.infrastructure.gov_api.mock_gateway import MockGovGateway
from govslots.wiring import dependencies


@pytest.fixture(autouse=True)
def _fresh_session_store():
    dependencies.get_session_store.cache_clear()
    yield
    dependencies.get_session_store.cache_clear()


def test_mock_gateway_without_base_url(monkeypatch):
    monkeypatch.setattr(settings, "GOV_API_BASE_URL", None)
    monkeypatch.setattr(settings, "ENV", "prod")

    gateway = dependencies.build_gateway(lambda: "t")

    assert isinstance(gateway, MockGovGateway)
    assert gateway is dependencies.get_mock_gateway()


def test_real_client_when_configured(monkeypatch):
    monkeypatch.setattr(settings, "GOV_API_BASE_URL", "https://gov.example.test")
    monkeypatch.setattr(settings, "ENV", "prod")

    gateway = dependencies.build_gateway(lambda: "t")

    assert isinstance(gateway, GovApiClient)
    asyncio.run(gateway.aclose())


def test_dev_env_always_uses_mock(monkeypatch):
    monkeypatch.setattr(settings, "GOV_API_BASE_URL", "https://gov.example.test")
    monkeypatch.setattr(settings, "ENV", "local")
    assert dependencies.uses_mock_gateway()


def test_auto_logout_timer_clears_shared_session(monkeypatch):
    monkeypatch.setattr(settings, "AUTO_LOGOUT_SECONDS", 2)
    store = dependencies.get_session_store()
    store.put(SessionContext(access_token="abc", user_id=7))

    timer = dependencies.get_auto_logout_timer()
    timer.tick()
    assert store.get_token() == "abc"

    timer.tick()
    assert timer.expired
    assert store.get() is None


def test_logout_use_case_uses_shared_store():
    store = dependencies.get_session_store()
    store.put(SessionContext(access_token="abc", user_id=7))

    dependencies.get_logout_use_case().execute()

    assert dependencies.get_session_store().get() is None
