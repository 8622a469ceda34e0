"""Pydantic schemas for per-realm progress records and updates."""
from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

# Fields a progress update may touch
PROGRESS_FIELDS = frozenset({"progress", "is_unlocked", "is_completed", "completed_at"})

MIN_PROGRESS = 0
MAX_PROGRESS = 100


def as_utc(value: datetime | None) -> datetime | None:
    """Aware UTC datetime; naive values are taken to already be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ProgressRecord(BaseModel):
    """One (user, realm) progress row, identical for every storage backend."""

    id: int
    user_id: int
    realm_id: str
    progress: int = 0
    is_unlocked: bool = False
    is_completed: bool = False
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class ProgressUpdateSchema(BaseModel):
    """Partial update body; unset fields are left alone."""

    progress: int | None = Field(default=None, ge=MIN_PROGRESS, le=MAX_PROGRESS)
    is_unlocked: bool | None = None
    is_completed: bool | None = None
    completed_at: datetime | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("completed_at")
    @classmethod
    def completed_at_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    def to_update(self) -> dict:
        """Return only the fields the client sent, with explicit nulls dropped except completed_at."""
        sent = self.model_dump(exclude_unset=True)
        return {k: v for k, v in sent.items() if v is not None or k == "completed_at"}


class CompletionSchema(BaseModel):
    realm: ProgressRecord
    unlocked: ProgressRecord | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RealmStateSchema(BaseModel):
    realm_id: str
    name: str
    ordinal: int
    state: str  # locked | unlocked-in-progress | completed
    progress: int
    is_unlocked: bool
    is_completed: bool
    completed_at: datetime | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProgressSummarySchema(BaseModel):
    overall_progress: int
    current_realm: str
    realms: list[RealmStateSchema]

    class Config:
        alias_generator = to_camel
        populate_by_name = True
