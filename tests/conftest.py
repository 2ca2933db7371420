"""Test fixtures for the deal-won webhook.

Provides:
- Settings with test credentials (no .env lookup)
- FakeApis: in-memory HubSpot + Frontegg served through httpx.MockTransport
- FastAPI test app wired to the fake APIs, and an async HTTP client for it
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.dealwon.api.deps import get_app_settings
from src.dealwon.config import Settings
from src.dealwon.main import create_app
from tests.helpers import FakeApis, make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_apis() -> FakeApis:
    return FakeApis()


@pytest.fixture
def transport(fake_apis) -> httpx.MockTransport:
    return httpx.MockTransport(fake_apis.handler)


@pytest.fixture
def app(settings, transport):
    """FastAPI app whose outbound calls go to FakeApis."""
    application = create_app()
    application.dependency_overrides[get_app_settings] = lambda: settings
    application.state.http_transport = transport
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing the API."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
