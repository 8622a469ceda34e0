"""Async SQLAlchemy engine/session factories and the declarative Base."""
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# (sync scheme, async scheme) pairs; the app runs async, Alembic runs sync
DRIVERS = (
    ("sqlite://", "sqlite+aiosqlite://"),
    ("postgresql+psycopg2://", "postgresql+asyncpg://"),
)


def to_async_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    for sync_scheme, async_scheme in DRIVERS:
        if url.startswith(sync_scheme):
            return url.replace(sync_scheme, async_scheme, 1)
    return url


def to_sync_url(url: str) -> str:
    for sync_scheme, async_scheme in DRIVERS:
        if url.startswith(async_scheme):
            return url.replace(async_scheme, sync_scheme, 1)
    return url


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for a database URL."""
    return create_async_engine(to_async_url(url), pool_pre_ping=True, echo=echo)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
