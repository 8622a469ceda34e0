"""Storage contract shared by the SQL and in-memory backends.

Accounts, per-realm progress and reflections are exposed through one
interface so the API layer never knows which backend it is talking to. Both
backends must return identical record shapes and follow the same merge rules;
``tests/test_storage_contract.py`` runs against each of them.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from app.core.errors import ValidationError
from app.schemas.account import AccountRecord
from app.schemas.progress import MAX_PROGRESS, MIN_PROGRESS, PROGRESS_FIELDS, ProgressRecord, as_utc
from app.schemas.reflection import ReflectionRecord
from app.services.catalog import starts_unlocked


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_progress(realm_id: str) -> dict[str, Any]:
    """Field values for a freshly seeded record."""
    return {
        "progress": 0,
        "is_unlocked": starts_unlocked(realm_id),
        "is_completed": False,
        "completed_at": None,
    }


def check_update(update: dict[str, Any]) -> dict[str, Any]:
    """Validate a partial progress update and normalise completed_at to UTC."""
    unknown = set(update) - PROGRESS_FIELDS
    if unknown:
        raise ValueError(f"Unsupported progress fields: {sorted(unknown)}")

    update = dict(update)
    progress = update.get("progress")
    if progress is not None and not MIN_PROGRESS <= progress <= MAX_PROGRESS:
        raise ValidationError(f"Progress must be between {MIN_PROGRESS} and {MAX_PROGRESS}")
    if "completed_at" in update:
        update["completed_at"] = as_utc(update["completed_at"])
    return update


def clean_content(content: str | None) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError("Reflection content must not be empty")
    return text


class Storage(ABC):
    """Accounts, progress and reflections behind one async interface."""

    backend: str = "abstract"

    async def connect(self) -> None:
        """Prepare the backend. Raises StorageUnavailableError if it cannot be reached."""

    async def close(self) -> None:
        """Release backend resources."""

    # --- accounts ---

    @abstractmethod
    async def get_user(self, user_id: int) -> AccountRecord | None: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> AccountRecord | None: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> AccountRecord | None: ...

    @abstractmethod
    async def create_user(self, email: str, username: str, password_hash: str) -> AccountRecord:
        """Create the account and seed one progress record per catalog realm.

        Raises ConflictError if the email or username is taken.
        """

    # --- progress ---

    @abstractmethod
    async def get_user_progress(self, user_id: int) -> list[ProgressRecord]: ...

    @abstractmethod
    async def get_realm_progress(self, user_id: int, realm_id: str) -> ProgressRecord | None: ...

    @abstractmethod
    async def update_user_progress(self, user_id: int, realm_id: str, update: dict[str, Any]) -> ProgressRecord:
        """Insert-or-merge the record for (user_id, realm_id) and return it in full."""

    # --- reflections ---

    @abstractmethod
    async def get_user_reflections(self, user_id: int) -> list[ReflectionRecord]:
        """Newest first."""

    @abstractmethod
    async def get_realm_reflections(self, user_id: int, realm_id: str) -> list[ReflectionRecord]:
        """Newest first, filtered by realm."""

    @abstractmethod
    async def create_reflection(
        self,
        user_id: int,
        realm_id: str | None,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> ReflectionRecord:
        """Append an entry. Raises ValidationError for blank content."""
