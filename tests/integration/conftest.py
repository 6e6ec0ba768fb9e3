"""Integration test fixtures: the FastAPI app over an in-memory record store."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from tess_backoffice.api.app import create_app
from tess_backoffice.models import User
from tess_backoffice.services import UserService


@pytest.fixture
def app(store, clock, settings) -> FastAPI:
    """App bound to the test store.

    ASGITransport does not run the lifespan, so admins are seeded here.
    """
    UserService(store, clock, settings).seed_defaults()
    return create_app(store=store, clock=clock, settings=settings)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def bearer(store, clock, settings):
    """Build the Authorization header a logged-in user would send."""
    users = UserService(store, clock, settings)

    def _bearer(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {users.issue_token(user)}"}

    return _bearer


@pytest.fixture
def admin_user(app, store, clock, settings) -> User:
    """The seeded ``admin`` account."""
    return UserService(store, clock, settings).find_by_username("admin")


@pytest.fixture
def admin_headers(admin_user: User, bearer) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
def employee_user(store, clock, settings) -> User:
    """A signed-up employee account."""
    return UserService(store, clock, settings).sign_up_employee(
        "maria", "password1", "password1"
    )


@pytest.fixture
def employee_headers(employee_user: User, bearer) -> dict[str, str]:
    return bearer(employee_user)
