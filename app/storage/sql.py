"""Durable storage on async SQLAlchemy (SQLite via aiosqlite, PostgreSQL via asyncpg)."""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import structlog
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, StorageUnavailableError
from app.db.base import Base
from app.db.session import create_engine, create_sessionmaker
from app.models.progress import UserProgress
from app.models.reflection import Reflection
from app.models.user import User
from app.schemas.account import AccountRecord
from app.schemas.progress import ProgressRecord, as_utc
from app.schemas.reflection import ReflectionRecord
from app.services.catalog import REALM_ORDER
from app.storage.base import Storage, check_update, clean_content, default_progress, utcnow

logger = structlog.get_logger()


# SQLite hands timestamps back naive; everything is written as UTC

def _account(row: User) -> AccountRecord:
    return AccountRecord(
        id=row.id,
        email=row.email,
        username=row.username,
        password_hash=row.password_hash,
        created_at=as_utc(row.created_at),
    )


def _progress(row: UserProgress) -> ProgressRecord:
    return ProgressRecord(
        id=row.id,
        user_id=row.user_id,
        realm_id=row.realm_id,
        progress=row.progress,
        is_unlocked=row.is_unlocked,
        is_completed=row.is_completed,
        completed_at=as_utc(row.completed_at),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _reflection(row: Reflection) -> ReflectionRecord:
    return ReflectionRecord(
        id=row.id,
        user_id=row.user_id,
        realm_id=row.realm_id,
        content=row.content,
        metadata=row.meta,
        created_at=as_utc(row.created_at),
    )


class SqlStorage(Storage):
    backend = "sql"

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.database_url = database_url
        self.echo = echo
        self._engine = None
        self._sessionmaker = None

    async def connect(self) -> None:
        """Create the engine and make sure the tables exist."""
        try:
            engine = create_engine(self.database_url, echo=self.echo)
        except (SQLAlchemyError, ImportError) as exc:
            raise StorageUnavailableError(f"Database misconfigured: {exc}") from exc
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as exc:
            await engine.dispose()
            raise StorageUnavailableError(f"Database unreachable: {exc}") from exc
        self._engine = engine
        self._sessionmaker = create_sessionmaker(engine)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise StorageUnavailableError("Database not connected")
        async with self._sessionmaker() as session:
            try:
                yield session
            except (SQLAlchemyError, OSError) as exc:
                await session.rollback()
                logger.error("storage_error", error=str(exc))
                raise StorageUnavailableError() from exc

    # --- accounts ---

    async def get_user(self, user_id: int) -> AccountRecord | None:
        async with self._session() as db:
            row = await db.get(User, user_id)
            return _account(row) if row else None

    async def get_user_by_email(self, email: str) -> AccountRecord | None:
        async with self._session() as db:
            result = await db.execute(select(User).where(User.email == email))
            row = result.scalar_one_or_none()
            return _account(row) if row else None

    async def get_user_by_username(self, username: str) -> AccountRecord | None:
        async with self._session() as db:
            result = await db.execute(select(User).where(User.username == username))
            row = result.scalar_one_or_none()
            return _account(row) if row else None

    async def create_user(self, email: str, username: str, password_hash: str) -> AccountRecord:
        async with self._session() as db:
            result = await db.execute(select(User.id).where(or_(User.email == email, User.username == username)))
            if result.first() is not None:
                raise ConflictError()

            now = utcnow()
            user = User(email=email, username=username, password_hash=password_hash, created_at=now)
            db.add(user)
            try:
                await db.flush()
                # seeded in the same transaction as the account
                for realm_id in REALM_ORDER:
                    db.add(
                        UserProgress(
                            user_id=user.id,
                            realm_id=realm_id,
                            created_at=now,
                            updated_at=now,
                            **default_progress(realm_id),
                        )
                    )
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                raise ConflictError() from exc
            return _account(user)

    # --- progress ---

    async def get_user_progress(self, user_id: int) -> list[ProgressRecord]:
        async with self._session() as db:
            result = await db.execute(
                select(UserProgress).where(UserProgress.user_id == user_id).order_by(UserProgress.id.asc())
            )
            return [_progress(row) for row in result.scalars().all()]

    async def get_realm_progress(self, user_id: int, realm_id: str) -> ProgressRecord | None:
        async with self._session() as db:
            row = await self._find_progress(db, user_id, realm_id)
            return _progress(row) if row else None

    @staticmethod
    async def _find_progress(db: AsyncSession, user_id: int, realm_id: str) -> UserProgress | None:
        result = await db.execute(
            select(UserProgress).where(UserProgress.user_id == user_id, UserProgress.realm_id == realm_id)
        )
        return result.scalar_one_or_none()

    async def update_user_progress(self, user_id: int, realm_id: str, update: dict[str, Any]) -> ProgressRecord:
        update = check_update(update)
        async with self._session() as db:
            row = await self._find_progress(db, user_id, realm_id)
            if row is None:
                now = utcnow()
                fields = default_progress(realm_id)
                fields.update(update)
                row = UserProgress(user_id=user_id, realm_id=realm_id, created_at=now, updated_at=now, **fields)
                db.add(row)
                try:
                    await db.commit()
                    return _progress(row)
                except IntegrityError:
                    # another request inserted the same key first; merge into theirs
                    await db.rollback()
                    row = await self._find_progress(db, user_id, realm_id)
                    if row is None:
                        raise

            for key, value in update.items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            await db.commit()
            return _progress(row)

    # --- reflections ---

    async def get_user_reflections(self, user_id: int) -> list[ReflectionRecord]:
        async with self._session() as db:
            result = await db.execute(
                select(Reflection)
                .where(Reflection.user_id == user_id)
                .order_by(Reflection.created_at.desc(), Reflection.id.desc())
            )
            return [_reflection(row) for row in result.scalars().all()]

    async def get_realm_reflections(self, user_id: int, realm_id: str) -> list[ReflectionRecord]:
        async with self._session() as db:
            result = await db.execute(
                select(Reflection)
                .where(Reflection.user_id == user_id, Reflection.realm_id == realm_id)
                .order_by(Reflection.created_at.desc(), Reflection.id.desc())
            )
            return [_reflection(row) for row in result.scalars().all()]

    async def create_reflection(
        self,
        user_id: int,
        realm_id: str | None,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> ReflectionRecord:
        text = clean_content(content)
        async with self._session() as db:
            row = Reflection(
                user_id=user_id,
                realm_id=realm_id,
                content=text,
                meta=dict(metadata) if metadata is not None else None,
                created_at=utcnow(),
            )
            db.add(row)
            await db.commit()
            return _reflection(row)
