"""Tests for backend selection at startup."""

from __future__ import annotations

import pytest

from app.core.config import Settings
from app.core.errors import StorageUnavailableError
from app.db.session import to_async_url, to_sync_url
from app.main import create_app, open_storage
from app.storage.memory import MemoryStorage
from app.storage.sql import SqlStorage

@pytest.mark.asyncio
class TestOpenStorage:
    async def test_no_database_url_uses_memory(self):
        storage = await open_storage(Settings(database_url=""))
        assert isinstance(storage, MemoryStorage)

    async def test_database_url_uses_sql(self, tmp_path):
        storage = await open_storage(Settings(database_url=f"sqlite:///{tmp_path / 'flame.db'}"))
        try:
            assert isinstance(storage, SqlStorage)
            user = await storage.create_user("a@example.com", "alpha", "h")
            assert len(await storage.get_user_progress(user.id)) == 6
        finally:
            await storage.close()

    async def test_unreachable_database_falls_back_to_memory(self, tmp_path):
        missing_dir = tmp_path / "does" / "not" / "exist"
        storage = await open_storage(Settings(database_url=f"sqlite+aiosqlite:///{missing_dir / 'flame.db'}"))
        assert isinstance(storage, MemoryStorage)

    async def test_unconnected_sql_storage_raises(self, tmp_path):
        storage = SqlStorage(f"sqlite+aiosqlite:///{tmp_path / 'flame.db'}")
        with pytest.raises(StorageUnavailableError):
            await storage.get_user(1)

    async def test_durable_storage_survives_reconnect(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'flame.db'}"
        first = SqlStorage(url)
        await first.connect()
        user = await first.create_user("a@example.com", "alpha", "h")
        await first.close()

        second = SqlStorage(url)
        await second.connect()
        try:
            assert (await second.get_user(user.id)).email == "a@example.com"
        finally:
            await second.close()


@pytest.mark.asyncio
class TestCreateApp:
    async def test_injected_storage_is_used(self):
        storage = MemoryStorage()
        app = create_app(storage=storage, settings=Settings(database_url=""))
        assert app.state.storage is storage


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("sqlite:///./x.db", "sqlite+aiosqlite:///./x.db"),
        ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("postgresql+psycopg2://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ("sqlite+aiosqlite:///./x.db", "sqlite+aiosqlite:///./x.db"),
    ],
)
def test_to_async_url(url, expected):
    assert to_async_url(url) == expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("sqlite+aiosqlite:///./x.db", "sqlite:///./x.db"),
        ("postgresql+asyncpg://u:p@h/db", "postgresql+psycopg2://u:p@h/db"),
        ("postgresql://u:p@h/db", "postgresql://u:p@h/db"),
        ("sqlite:///./x.db", "sqlite:///./x.db"),
    ],
)
def test_to_sync_url(url, expected):
    assert to_sync_url(url) == expected


@pytest.mark.parametrize("url", ["sqlite:///./x.db", "postgresql+psycopg2://u:p@h/db"])
def test_sync_and_async_urls_agree(url):
    assert to_sync_url(to_async_url(url)) == url
