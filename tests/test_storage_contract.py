"""Storage contract: every test runs against the memory and the SQL backend."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import ConflictError, ValidationError
from app.services.catalog import REALM_ORDER
from tests.conftest import make_storage

pytestmark = pytest.mark.asyncio


class TestAccountStore:
    async def test_create_and_find(self, storage):
        user = await storage.create_user("a@example.com", "alpha", "hash-a")
        assert user.id == 1
        assert user.created_at.tzinfo is not None

        assert (await storage.get_user(user.id)).email == "a@example.com"
        assert (await storage.get_user_by_email("a@example.com")).username == "alpha"
        assert (await storage.get_user_by_username("alpha")).id == user.id

    async def test_missing_account_is_none(self, storage):
        assert await storage.get_user(999) is None
        assert await storage.get_user_by_email("nobody@example.com") is None
        assert await storage.get_user_by_username("nobody") is None

    async def test_ids_are_monotonic(self, storage):
        first = await storage.create_user("a@example.com", "alpha", "h")
        second = await storage.create_user("b@example.com", "beta", "h")
        assert second.id == first.id + 1

    async def test_duplicate_email_conflicts(self, storage):
        first = await storage.create_user("a@example.com", "alpha", "hash-a")
        with pytest.raises(ConflictError):
            await storage.create_user("a@example.com", "other", "hash-b")

        kept = await storage.get_user(first.id)
        assert kept.username == "alpha"
        assert kept.password_hash == "hash-a"
        assert len(await storage.get_user_progress(first.id)) == 6

    async def test_duplicate_username_conflicts(self, storage):
        await storage.create_user("a@example.com", "alpha", "h")
        with pytest.raises(ConflictError):
            await storage.create_user("b@example.com", "alpha", "h")
        assert await storage.get_user_by_email("b@example.com") is None

    async def test_create_seeds_six_progress_records(self, storage):
        user = await storage.create_user("a@example.com", "alpha", "h")
        records = await storage.get_user_progress(user.id)

        assert sorted(r.realm_id for r in records) == sorted(REALM_ORDER)
        by_realm = {r.realm_id: r for r in records}
        assert by_realm["fear"].is_unlocked is True
        for realm_id in REALM_ORDER[1:]:
            assert by_realm[realm_id].is_unlocked is False
        for record in records:
            assert record.progress == 0
            assert record.is_completed is False
            assert record.completed_at is None


class TestProgressStore:
    async def test_get_missing_record_is_none(self, storage, account):
        assert await storage.get_realm_progress(account.id, "nowhere") is None
        assert await storage.get_realm_progress(999, "fear") is None

    async def test_list_unknown_user_is_empty(self, storage):
        assert await storage.get_user_progress(42) == []

    async def test_update_merges_and_refreshes_updated_at(self, storage, account):
        before = await storage.get_realm_progress(account.id, "fear")
        updated = await storage.update_user_progress(account.id, "fear", {"progress": 40})

        assert updated.id == before.id
        assert updated.progress == 40
        assert updated.is_unlocked is True
        assert updated.created_at == before.created_at
        assert updated.updated_at >= before.updated_at

        again = await storage.get_realm_progress(account.id, "fear")
        assert again.progress == 40

    async def test_update_returns_full_record(self, storage, account):
        record = await storage.update_user_progress(account.id, "doubt", {"is_unlocked": True})
        assert record.realm_id == "doubt"
        assert record.user_id == account.id
        assert record.progress == 0
        assert record.is_completed is False

    async def test_update_creates_missing_record_with_defaults(self, storage):
        # the store does not check ownership; no seeded rows exist for this id
        record = await storage.update_user_progress(4242, "anxiety", {"progress": 10})
        assert record.progress == 10
        assert record.is_unlocked is False
        assert record.is_completed is False
        assert await storage.get_realm_progress(4242, "anxiety") == record

    async def test_lazily_created_first_realm_starts_unlocked(self, storage):
        record = await storage.update_user_progress(4242, "fear", {"progress": 5})
        assert record.is_unlocked is True

    async def test_realms_are_independent(self, storage, account):
        await storage.update_user_progress(account.id, "fear", {"progress": 70})
        await storage.update_user_progress(account.id, "doubt", {"progress": 20, "is_unlocked": True})

        fear = await storage.get_realm_progress(account.id, "fear")
        doubt = await storage.get_realm_progress(account.id, "doubt")
        assert (fear.progress, fear.is_unlocked) == (70, True)
        assert (doubt.progress, doubt.is_unlocked) == (20, True)

    async def test_accounts_are_independent(self, storage, account):
        other = await storage.create_user("b@example.com", "beta", "h")
        await storage.update_user_progress(account.id, "fear", {"progress": 90})
        assert (await storage.get_realm_progress(other.id, "fear")).progress == 0

    async def test_completed_at_round_trips(self, storage, account):
        stamp = datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        await storage.update_user_progress(account.id, "fear", {"is_completed": True, "completed_at": stamp})
        record = await storage.get_realm_progress(account.id, "fear")
        assert record.completed_at == stamp

    async def test_offset_completed_at_stored_as_utc(self, storage, account):
        local = datetime(2026, 1, 2, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        written = await storage.update_user_progress(
            account.id, "fear", {"is_completed": True, "completed_at": local}
        )
        record = await storage.get_realm_progress(account.id, "fear")

        expected = datetime(2026, 1, 2, 8, 0, tzinfo=timezone.utc)
        assert written.completed_at == expected
        assert record.completed_at == expected
        assert record.completed_at.utcoffset() == timedelta(0)

    async def test_naive_completed_at_is_taken_as_utc(self, storage, account):
        await storage.update_user_progress(
            account.id, "fear", {"is_completed": True, "completed_at": datetime(2026, 1, 2, 10, 0)}
        )
        record = await storage.get_realm_progress(account.id, "fear")
        assert record.completed_at == datetime(2026, 1, 2, 10, 0, tzinfo=timezone.utc)
        assert record.completed_at.tzinfo is not None

    @pytest.mark.parametrize("value", [-1, 101, 150])
    async def test_out_of_range_progress_rejected(self, storage, account, value):
        with pytest.raises(ValidationError):
            await storage.update_user_progress(account.id, "fear", {"progress": value})
        assert (await storage.get_realm_progress(account.id, "fear")).progress == 0

    async def test_unknown_field_rejected(self, storage, account):
        with pytest.raises(ValueError, match="Unsupported progress fields"):
            await storage.update_user_progress(account.id, "fear", {"user_id": 7})


class TestReflectionStore:
    async def test_create_returns_full_entry(self, storage, account):
        entry = await storage.create_reflection(account.id, "fear", "  I fear the dark.  ", {"lessonId": "fear-3"})
        assert entry.id == 1
        assert entry.user_id == account.id
        assert entry.realm_id == "fear"
        assert entry.content == "I fear the dark."
        assert entry.metadata == {"lessonId": "fear-3"}
        assert entry.created_at.tzinfo is not None

    async def test_general_entry_without_realm(self, storage, account):
        entry = await storage.create_reflection(account.id, None, "A quiet day.")
        assert entry.realm_id is None
        assert entry.metadata is None

    async def test_newest_first(self, storage, account):
        for text in ("A", "B", "C"):
            await storage.create_reflection(account.id, None, text)
        entries = await storage.get_user_reflections(account.id)
        assert [e.content for e in entries] == ["C", "B", "A"]

    async def test_filter_by_realm(self, storage, account):
        await storage.create_reflection(account.id, "fear", "one")
        await storage.create_reflection(account.id, "doubt", "two")
        await storage.create_reflection(account.id, "fear", "three")
        await storage.create_reflection(account.id, None, "four")

        entries = await storage.get_realm_reflections(account.id, "fear")
        assert [e.content for e in entries] == ["three", "one"]

    async def test_filter_by_account(self, storage, account):
        other = await storage.create_user("b@example.com", "beta", "h")
        await storage.create_reflection(account.id, None, "mine")
        await storage.create_reflection(other.id, None, "theirs")
        assert [e.content for e in await storage.get_user_reflections(account.id)] == ["mine"]
        assert [e.content for e in await storage.get_user_reflections(other.id)] == ["theirs"]

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    async def test_blank_content_rejected_and_not_persisted(self, storage, account, content):
        with pytest.raises(ValidationError):
            await storage.create_reflection(account.id, "fear", content)
        assert await storage.get_user_reflections(account.id) == []


class TestBackendEquivalence:
    """The same sequence of calls yields the same records on both backends."""

    @staticmethod
    async def _run_sequence(store) -> dict:
        user = await store.create_user("a@example.com", "alpha", "h")
        await store.update_user_progress(user.id, "fear", {"progress": 55})
        await store.update_user_progress(user.id, "doubt", {"is_unlocked": True})
        await store.create_reflection(user.id, "fear", "first", {"lessonId": "fear-3"})
        await store.create_reflection(user.id, None, "second")
        return {
            "user": (await store.get_user(user.id)).model_dump(exclude={"created_at"}),
            "progress": [
                r.model_dump(exclude={"created_at", "updated_at"}) for r in await store.get_user_progress(user.id)
            ],
            "reflections": [
                r.model_dump(exclude={"created_at"}) for r in await store.get_user_reflections(user.id)
            ],
        }

    async def test_same_shapes_and_values(self, tmp_path):
        memory = await make_storage("memory", tmp_path)
        sql = await make_storage("sql", tmp_path)
        try:
            assert await self._run_sequence(memory) == await self._run_sequence(sql)
        finally:
            await memory.close()
            await sql.close()
