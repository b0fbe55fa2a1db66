"""Integration test fixtures driving the ASGI app."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from timesheet_tracker.api.app import create_app
from timesheet_tracker.security import create_access_token


def auth_headers(settings, user) -> dict[str, str]:
    token = create_access_token(settings, user.id, user.role, user.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token_for(settings):
    """Raw access token for a user."""

    def _token(user) -> str:
        return create_access_token(settings, user.id, user.role, user.name)

    return _token


@pytest_asyncio.fixture
async def client(settings, session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app using the test database."""
    app = create_app(settings, session_factory=session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def admin_headers(settings, admin) -> dict[str, str]:
    return auth_headers(settings, admin)


@pytest_asyncio.fixture
async def alice_headers(settings, alice) -> dict[str, str]:
    return auth_headers(settings, alice)


@pytest_asyncio.fixture
async def bob_headers(settings, bob) -> dict[str, str]:
    return auth_headers(settings, bob)
