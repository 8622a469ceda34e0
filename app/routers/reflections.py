"""Reflection journal routes."""
from fastapi import APIRouter

from app.core.errors import AccountNotFoundError, UnknownRealmError
from app.dependencies import StorageDep
from app.schemas.reflection import ReflectionCreateSchema, ReflectionRecord
from app.services.catalog import is_known_realm

router = APIRouter(prefix="/api/reflections", tags=["reflections"])


@router.get("/{user_id}", response_model=list[ReflectionRecord])
async def list_reflections(user_id: int, storage: StorageDep):
    """Newest first."""
    return await storage.get_user_reflections(user_id)


@router.get("/{user_id}/{realm_id}", response_model=list[ReflectionRecord])
async def list_realm_reflections(user_id: int, realm_id: str, storage: StorageDep):
    if not is_known_realm(realm_id):
        raise UnknownRealmError(realm_id)
    return await storage.get_realm_reflections(user_id, realm_id)


@router.post("", response_model=ReflectionRecord)
async def create_reflection(body: ReflectionCreateSchema, storage: StorageDep):
    if await storage.get_user(body.user_id) is None:
        raise AccountNotFoundError(body.user_id)
    return await storage.create_reflection(body.user_id, body.realm_id, body.content, body.metadata)
