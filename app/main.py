"""Inner Flame - FastAPI app entry point."""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from app.core.config import Settings, get_settings
from app.core.errors import StorageUnavailableError
from app.core.handlers import setup_error_handlers
from app.core.logging import setup_logging
from app.routers import auth, progress, realms, reflections
from app.storage.base import Storage
from app.storage.memory import MemoryStorage
from app.storage.sql import SqlStorage

logger = structlog.get_logger()


async def open_storage(settings: Settings) -> Storage:
    """Pick the backend once at startup; fall back to memory if the database is unreachable."""
    if not settings.database_url:
        logger.info("storage_backend_selected", backend="memory", reason="no database_url")
        return MemoryStorage()

    storage = SqlStorage(settings.database_url, echo=settings.database_echo)
    try:
        await storage.connect()
    except StorageUnavailableError as exc:
        logger.warning("storage_unavailable_fallback", backend="memory", error=exc.message)
        return MemoryStorage()

    logger.info("storage_backend_selected", backend=storage.backend)
    return storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    owns_storage = app.state.storage is None
    if owns_storage:
        app.state.storage = await open_storage(app.state.settings)

    yield

    if owns_storage:
        await app.state.storage.close()
        app.state.storage = None


def create_app(storage: Storage | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the app. Pass a storage to skip backend selection (tests, embedding)."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        description="Guided journey through six inner realms",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage

    setup_error_handlers(app)
    app.include_router(auth.router)
    app.include_router(progress.router)
    app.include_router(reflections.router)
    app.include_router(realms.router)

    @app.get("/health")
    async def health():
        current = app.state.storage
        return {"status": "ok", "storage": current.backend if current else None}

    return app


app = create_app()
