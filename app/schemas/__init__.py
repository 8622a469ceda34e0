from app.schemas.account import (
    AccountRecord,
    AuthResponseSchema,
    LoginSchema,
    RegisterSchema,
    UserPublicSchema,
)
from app.schemas.progress import (
    PROGRESS_FIELDS,
    CompletionSchema,
    ProgressRecord,
    ProgressSummarySchema,
    ProgressUpdateSchema,
    RealmStateSchema,
)
from app.schemas.realm import LessonSchema, RealmDetailSchema, RealmOutSchema
from app.schemas.reflection import ReflectionCreateSchema, ReflectionRecord

__all__ = [
    "AccountRecord",
    "AuthResponseSchema",
    "LoginSchema",
    "RegisterSchema",
    "UserPublicSchema",
    "PROGRESS_FIELDS",
    "CompletionSchema",
    "ProgressRecord",
    "ProgressSummarySchema",
    "ProgressUpdateSchema",
    "RealmStateSchema",
    "LessonSchema",
    "RealmDetailSchema",
    "RealmOutSchema",
    "ReflectionCreateSchema",
    "ReflectionRecord",
]
