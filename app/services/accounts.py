"""Registration and login on top of the account store."""
import re

import structlog

from app.core.config import Settings, get_settings
from app.core.errors import AuthenticationError, ConflictError, ValidationError
from app.core.security import hash_password, verify_password
from app.schemas.account import AccountRecord
from app.storage.base import Storage

logger = structlog.get_logger()

# simple, practical email check
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


async def register_account(
    storage: Storage,
    email: str,
    username: str,
    password: str,
    settings: Settings | None = None,
) -> AccountRecord:
    """Validate input, hash the password and create the account with its seeded progress."""
    settings = settings or get_settings()
    email_norm = normalize_email(email)
    username = (username or "").strip()
    pwd = password or ""

    if not email_norm or not EMAIL_RE.match(email_norm):
        raise ValidationError("Invalid email address")
    if not username:
        raise ValidationError("Username is required")
    if len(pwd) < settings.password_min_length:
        raise ValidationError(f"Password must be at least {settings.password_min_length} characters")
    # bcrypt hard limit: 72 bytes (UTF-8)
    if len(pwd.encode("utf-8")) > settings.password_max_bytes:
        raise ValidationError("Password is too long")

    if await storage.get_user_by_email(email_norm):
        raise ConflictError("Email already registered")
    if await storage.get_user_by_username(username):
        raise ConflictError("Username already taken")

    user = await storage.create_user(email_norm, username, hash_password(pwd))
    logger.info("account_registered", user_id=user.id)
    return user


async def authenticate(storage: Storage, email: str, password: str) -> AccountRecord:
    """Return the account for matching credentials. Unknown email and wrong password look the same."""
    user = await storage.get_user_by_email(normalize_email(email))
    if user is None or not verify_password(password or "", user.password_hash):
        raise AuthenticationError()
    return user
