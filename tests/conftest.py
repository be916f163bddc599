"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from studyhub.catalog.seed import seed_quizzes
from studyhub.config import Settings
from studyhub.main import create_app
from studyhub.services import Services, build_services
from studyhub.session import SessionContext
from studyhub.store.memory import MemoryDocumentStore

TEST_PASSWORD = "Study1234"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment's Redis and database."""
    return Settings(
        redis_url="",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret="test-secret-for-studyhub-tokens-0123456789abcdef",
        ledger_mode="atomic",
        seed_quizzes=False,
        log_format="console",
    )


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def services(store: MemoryDocumentStore, settings: Settings) -> Services:
    return build_services(store, settings)


@pytest_asyncio.fixture
async def signed_in(services: Services) -> SessionContext:
    """A session signed in as alice@example.com."""
    session = services.new_session()
    await session.sign_up("alice@example.com", TEST_PASSWORD, name="Alice")
    return session


@pytest_asyncio.fixture
async def client(store: MemoryDocumentStore, settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against an app wired to the in-memory store, quizzes seeded."""
    app = create_app(settings, store=store)
    await seed_quizzes(app.state.services.catalog)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sign_up(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Register a user through the API. Returns the auth response plus ready-made headers."""

    async def _sign_up(email: str = "alice@example.com", name: str | None = "Alice") -> dict:
        response = await client.post(
            "/api/v1/auth/signup",
            json={"email": email, "password": TEST_PASSWORD, "name": name},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        data["headers"] = {"Authorization": f"Bearer {data['access_token']}"}
        return data

    return _sign_up
