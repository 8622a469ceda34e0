"""Shared test fixtures. Storage-backed fixtures run once per backend."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings
from app.main import create_app
from app.schemas.account import AccountRecord
from app.services.progression import ProgressionEngine
from app.storage.base import Storage
from app.storage.memory import MemoryStorage
from app.storage.sql import SqlStorage

BACKENDS = ["memory", "sql"]


async def make_storage(backend: str, tmp_path) -> Storage:
    if backend == "memory":
        store: Storage = MemoryStorage()
    else:
        store = SqlStorage(f"sqlite+aiosqlite:///{tmp_path / 'inner_flame.db'}")
    await store.connect()
    return store


@pytest_asyncio.fixture(params=BACKENDS)
async def storage(request, tmp_path) -> AsyncGenerator[Storage, None]:
    """A connected, empty storage backend."""
    store = await make_storage(request.param, tmp_path)
    yield store
    await store.close()


@pytest_asyncio.fixture
async def engine(storage: Storage) -> ProgressionEngine:
    return ProgressionEngine(storage)


@pytest_asyncio.fixture
async def account(storage: Storage) -> AccountRecord:
    """An account created straight through the store (no bcrypt)."""
    return await storage.create_user("seeker@example.com", "seeker", "stored-hash")


@pytest_asyncio.fixture
async def client(storage: Storage) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against an app wired to the storage fixture."""
    app = create_app(storage=storage, settings=Settings(database_url="", log_format="console"))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_user(
    client: AsyncClient,
    email: str = "seeker@example.com",
    username: str = "seeker",
    password: str = "InnerFl4me!",
) -> dict:
    """Register through the API and return the public user dict."""
    response = await client.post(
        "/api/auth/register",
        json={"email": email, "username": username, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["user"]
