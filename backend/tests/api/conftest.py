"""Shared fixtures for API tests."""
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient

from core.config import get_settings
from core.session import SESSION_COOKIE_NAME, issue_session_token
from models.user import User

ClientFactory = Callable[[User], AbstractAsyncContextManager[AsyncClient]]


def session_cookie_for(user: User, ttl_seconds: int = 3600) -> str:
    """Mint a session token for ``user`` signed with the app's secret."""
    settings = get_settings()
    return issue_session_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        secret=settings.jwt_secret,
        ttl_seconds=ttl_seconds,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture
def client_for(client: AsyncClient) -> ClientFactory:  # noqa: ARG001 - installs overrides
    """
    Open an extra client that carries ``user``'s session cookie.

    Shares the app and dependency overrides installed by ``client``.
    """
    from api.main import app

    @asynccontextmanager
    async def _client_for(user: User) -> AsyncGenerator[AsyncClient]:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers={"Cookie": f"{SESSION_COOKIE_NAME}={session_cookie_for(user)}"},
        ) as user_client:
            yield user_client

    return _client_for


@pytest.fixture
async def admin_client(
    client_for: ClientFactory,
    admin_user: User,
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as the ADMIN user."""
    async with client_for(admin_user) as admin:
        yield admin


@pytest.fixture
async def user_client(
    client_for: ClientFactory,
    regular_user: User,
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as the USER account."""
    async with client_for(regular_user) as user:
        yield user
