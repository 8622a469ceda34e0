"""Realm progression: progress updates, completion and successor unlocking.

Per realm the state moves ``locked`` -> ``unlocked-in-progress`` ->
``completed``. A realm other than the first only leaves ``locked`` when its
predecessor is completed through :meth:`ProgressionEngine.complete_realm`;
``completed`` is terminal. Completion and the successor unlock are two
separate writes, so ``complete_realm`` is written to be re-run safely after a
partial failure.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import structlog

from app.core.errors import AccountNotFoundError, UnknownRealmError
from app.schemas.progress import MAX_PROGRESS, ProgressRecord, ProgressSummarySchema, RealmStateSchema
from app.services.catalog import FIRST_REALM, REALM_ORDER, REALMS, is_known_realm, successor_of
from app.storage.base import Storage, default_progress, utcnow

logger = structlog.get_logger()

LOCKED = "locked"
IN_PROGRESS = "unlocked-in-progress"
COMPLETED = "completed"


def realm_state(record: ProgressRecord | None, realm_id: str | None = None) -> str:
    """Map a progress record (or its absence) onto the realm state machine."""
    if record is None:
        return IN_PROGRESS if realm_id == FIRST_REALM else LOCKED
    if record.is_completed:
        return COMPLETED
    if record.is_unlocked:
        return IN_PROGRESS
    return LOCKED


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def mean_progress(records: list[ProgressRecord]) -> int:
    """Mean progress over catalog records, rounded half-up; 0 for none."""
    values = [r.progress for r in records if is_known_realm(r.realm_id)]
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def current_realm(records: list[ProgressRecord]) -> str:
    """First realm in catalog order that is unlocked, unfinished and below 100%."""
    by_realm = {r.realm_id: r for r in records}
    for realm_id in REALM_ORDER:
        record = by_realm.get(realm_id)
        if realm_state(record, realm_id) == IN_PROGRESS and (record is None or record.progress < MAX_PROGRESS):
            return realm_id
    return FIRST_REALM


class ProgressionEngine:
    """Applies progress events for one storage backend."""

    def __init__(self, storage: Storage):
        self.storage = storage

    async def _require_account(self, user_id: int) -> None:
        if await self.storage.get_user(user_id) is None:
            raise AccountNotFoundError(user_id)

    async def apply_progress_update(self, user_id: int, realm_id: str, update: dict[str, Any]) -> ProgressRecord:
        """Merge a partial update into the (user, realm) record, creating it if needed.

        Does not unlock the successor; callers use complete_realm for that.
        completed_at is only taken together with is_completed, and is stamped
        if the caller did not send one.
        A completed record is returned unchanged.
        """
        if not is_known_realm(realm_id):
            raise UnknownRealmError(realm_id)
        await self._require_account(user_id)

        existing = await self.storage.get_realm_progress(user_id, realm_id)
        if existing is not None and existing.is_completed:
            return existing

        update = dict(update)
        if not update.get("is_completed"):
            update.pop("completed_at", None)
        elif update.get("completed_at") is None:
            update["completed_at"] = utcnow()
        return await self.storage.update_user_progress(user_id, realm_id, update)

    async def complete_realm(self, user_id: int, realm_id: str) -> tuple[ProgressRecord, ProgressRecord | None]:
        """Complete realm_id and unlock its successor.

        Returns (completed record, successor record or None for the last realm).
        Store errors propagate; re-running the call converges to the same state.
        """
        if not is_known_realm(realm_id):
            raise UnknownRealmError(realm_id)
        await self._require_account(user_id)

        record = await self.storage.get_realm_progress(user_id, realm_id)
        if record is None or not record.is_completed:
            record = await self.storage.update_user_progress(
                user_id,
                realm_id,
                {
                    "progress": MAX_PROGRESS,
                    "is_unlocked": True,
                    "is_completed": True,
                    "completed_at": utcnow(),
                },
            )
            logger.info("realm_completed", user_id=user_id, realm_id=realm_id)

        next_id = successor_of(realm_id)
        if next_id is None:
            return record, None

        successor = await self.storage.get_realm_progress(user_id, next_id)
        if successor is None or not successor.is_unlocked:
            successor = await self.storage.update_user_progress(user_id, next_id, {"is_unlocked": True})
            logger.info("successor_unlocked", user_id=user_id, realm_id=next_id, after=realm_id)
        return record, successor

    async def aggregate_progress(self, user_id: int) -> int:
        return mean_progress(await self.storage.get_user_progress(user_id))

    async def summary(self, user_id: int) -> ProgressSummarySchema:
        """Overall progress, current realm and per-realm state in catalog order."""
        records = await self.storage.get_user_progress(user_id)
        by_realm = {r.realm_id: r for r in records}

        realms = []
        for realm in REALMS:
            record = by_realm.get(realm.id)
            fields = default_progress(realm.id) if record is None else record.model_dump(
                include={"progress", "is_unlocked", "is_completed", "completed_at"}
            )
            realms.append(
                RealmStateSchema(
                    realm_id=realm.id,
                    name=realm.name,
                    ordinal=realm.ordinal,
                    state=realm_state(record, realm.id),
                    **fields,
                )
            )

        return ProgressSummarySchema(
            overall_progress=mean_progress(records),
            current_realm=current_realm(records),
            realms=realms,
        )

