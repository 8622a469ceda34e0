"""Realm catalog routes (read-only)."""
from fastapi import APIRouter

from app.core.errors import NotFoundError
from app.schemas.realm import RealmDetailSchema, RealmOutSchema
from app.services.catalog import REALMS, get_realm

router = APIRouter(prefix="/api/realms", tags=["realms"])


@router.get("", response_model=list[RealmOutSchema])
async def list_realms():
    """Realms in unlock order."""
    return [
        RealmOutSchema(
            id=r.id,
            name=r.name,
            description=r.description,
            ordinal=r.ordinal,
            lesson_count=len(r.lessons),
        )
        for r in REALMS
    ]


@router.get("/{realm_id}", response_model=RealmDetailSchema)
async def get_realm_detail(realm_id: str):
    realm = get_realm(realm_id)
    if realm is None:
        raise NotFoundError("Realm not found")
    return RealmDetailSchema.model_validate(realm)
