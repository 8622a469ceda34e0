"""Pydantic schemas for reflection journal entries."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from app.services.catalog import is_known_realm


class ReflectionRecord(BaseModel):
    id: int
    user_id: int
    realm_id: str | None = None
    content: str
    metadata: dict[str, Any] | None = None
    created_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ReflectionCreateSchema(BaseModel):
    user_id: int
    realm_id: str | None = None
    content: str
    metadata: dict[str, Any] | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("realm_id")
    @classmethod
    def realm_in_catalog(cls, v: str | None) -> str | None:
        if v is not None and not is_known_realm(v):
            raise ValueError(f"Unknown realm: {v}")
        return v
