"""Pydantic schemas for accounts and auth payloads."""
from datetime import datetime

from pydantic import BaseModel


class AccountRecord(BaseModel):
    """Stored account. Carries the password hash; never returned to clients."""

    id: int
    email: str
    username: str
    password_hash: str
    created_at: datetime

    class Config:
        from_attributes = True


class RegisterSchema(BaseModel):
    email: str
    password: str
    username: str


class LoginSchema(BaseModel):
    email: str
    password: str


class UserPublicSchema(BaseModel):
    id: int
    email: str
    username: str

    class Config:
        from_attributes = True


class AuthResponseSchema(BaseModel):
    user: UserPublicSchema
