"""Process-lifetime storage used when no database is configured."""
from typing import Any

from app.core.errors import ConflictError
from app.schemas.account import AccountRecord
from app.schemas.progress import ProgressRecord
from app.schemas.reflection import ReflectionRecord
from app.services.catalog import REALM_ORDER
from app.storage.base import Storage, check_update, clean_content, default_progress, utcnow


class MemoryStorage(Storage):
    backend = "memory"

    def __init__(self) -> None:
        self._users: dict[int, AccountRecord] = {}
        self._progress: dict[tuple[int, str], ProgressRecord] = {}
        self._reflections: dict[int, ReflectionRecord] = {}
        self._next_user_id = 1
        self._next_progress_id = 1
        self._next_reflection_id = 1

    # --- accounts ---

    async def get_user(self, user_id: int) -> AccountRecord | None:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    async def get_user_by_email(self, email: str) -> AccountRecord | None:
        for user in self._users.values():
            if user.email == email:
                return user.model_copy()
        return None

    async def get_user_by_username(self, username: str) -> AccountRecord | None:
        for user in self._users.values():
            if user.username == username:
                return user.model_copy()
        return None

    async def create_user(self, email: str, username: str, password_hash: str) -> AccountRecord:
        if any(u.email == email or u.username == username for u in self._users.values()):
            raise ConflictError()

        user = AccountRecord(
            id=self._next_user_id,
            email=email,
            username=username,
            password_hash=password_hash,
            created_at=utcnow(),
        )
        self._next_user_id += 1
        self._users[user.id] = user

        for realm_id in REALM_ORDER:
            self._insert_progress(user.id, realm_id, {})
        return user.model_copy()

    # --- progress ---

    def _insert_progress(self, user_id: int, realm_id: str, update: dict[str, Any]) -> ProgressRecord:
        now = utcnow()
        fields = default_progress(realm_id)
        fields.update(update)
        record = ProgressRecord(
            id=self._next_progress_id,
            user_id=user_id,
            realm_id=realm_id,
            created_at=now,
            updated_at=now,
            **fields,
        )
        self._next_progress_id += 1
        self._progress[(user_id, realm_id)] = record
        return record

    async def get_user_progress(self, user_id: int) -> list[ProgressRecord]:
        records = [r for (uid, _), r in self._progress.items() if uid == user_id]
        return [r.model_copy() for r in sorted(records, key=lambda r: r.id)]

    async def get_realm_progress(self, user_id: int, realm_id: str) -> ProgressRecord | None:
        record = self._progress.get((user_id, realm_id))
        return record.model_copy() if record else None

    async def update_user_progress(self, user_id: int, realm_id: str, update: dict[str, Any]) -> ProgressRecord:
        update = check_update(update)
        existing = self._progress.get((user_id, realm_id))
        if existing is None:
            return self._insert_progress(user_id, realm_id, update).model_copy()

        updated = existing.model_copy(update={**update, "updated_at": utcnow()})
        self._progress[(user_id, realm_id)] = updated
        return updated.model_copy()

    # --- reflections ---

    def _newest_first(self, entries: list[ReflectionRecord]) -> list[ReflectionRecord]:
        ordered = sorted(entries, key=lambda e: (e.created_at, e.id), reverse=True)
        return [e.model_copy(deep=True) for e in ordered]

    async def get_user_reflections(self, user_id: int) -> list[ReflectionRecord]:
        return self._newest_first([e for e in self._reflections.values() if e.user_id == user_id])

    async def get_realm_reflections(self, user_id: int, realm_id: str) -> list[ReflectionRecord]:
        return self._newest_first(
            [e for e in self._reflections.values() if e.user_id == user_id and e.realm_id == realm_id]
        )

    async def create_reflection(
        self,
        user_id: int,
        realm_id: str | None,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> ReflectionRecord:
        text = clean_content(content)
        entry = ReflectionRecord(
            id=self._next_reflection_id,
            user_id=user_id,
            realm_id=realm_id,
            content=text,
            metadata=dict(metadata) if metadata is not None else None,
            created_at=utcnow(),
        )
        self._next_reflection_id += 1
        self._reflections[entry.id] = entry
        return entry.model_copy(deep=True)
