"""FastAPI dependencies resolving the storage chosen at startup."""
from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings, get_settings
from app.core.errors import StorageUnavailableError
from app.services.progression import ProgressionEngine
from app.storage.base import Storage


def get_storage(request: Request) -> Storage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise StorageUnavailableError("Storage not initialised")
    return storage


def get_engine(storage: Annotated[Storage, Depends(get_storage)]) -> ProgressionEngine:
    return ProgressionEngine(storage)


StorageDep = Annotated[Storage, Depends(get_storage)]
EngineDep = Annotated[ProgressionEngine, Depends(get_engine)]


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
