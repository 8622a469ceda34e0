"""Progress routes: per-realm records, manual updates, completion and the dashboard summary."""
from fastapi import APIRouter

from app.dependencies import EngineDep, StorageDep
from app.schemas.progress import CompletionSchema, ProgressRecord, ProgressSummarySchema, ProgressUpdateSchema

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("/{user_id}", response_model=list[ProgressRecord])
async def list_progress(user_id: int, storage: StorageDep):
    """All realm records for the user; empty for unknown users."""
    return await storage.get_user_progress(user_id)


@router.get("/{user_id}/summary", response_model=ProgressSummarySchema)
async def progress_summary(user_id: int, engine: EngineDep):
    return await engine.summary(user_id)


@router.put("/{user_id}/{realm_id}", response_model=ProgressRecord)
async def update_progress(user_id: int, realm_id: str, body: ProgressUpdateSchema, engine: EngineDep):
    """Merge the sent fields into the record. Never unlocks the next realm."""
    return await engine.apply_progress_update(user_id, realm_id, body.to_update())


@router.post("/{user_id}/{realm_id}/complete", response_model=CompletionSchema)
async def complete_realm(user_id: int, realm_id: str, engine: EngineDep):
    """Complete the realm and unlock its successor. Safe to retry."""
    realm, unlocked = await engine.complete_realm(user_id, realm_id)
    return CompletionSchema(realm=realm, unlocked=unlocked)
