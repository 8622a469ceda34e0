"""Auth routes: register and login. The client keeps the returned public user fields."""
from fastapi import APIRouter

from app.dependencies import SettingsDep, StorageDep
from app.schemas.account import AuthResponseSchema, LoginSchema, RegisterSchema, UserPublicSchema
from app.services.accounts import authenticate, register_account

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponseSchema, status_code=201)
async def register(body: RegisterSchema, storage: StorageDep, settings: SettingsDep):
    """Create an account; its six realm records are seeded with it."""
    user = await register_account(storage, body.email, body.username, body.password, settings)
    return AuthResponseSchema(user=UserPublicSchema.model_validate(user))


@router.post("/login", response_model=AuthResponseSchema)
async def login(body: LoginSchema, storage: StorageDep):
    user = await authenticate(storage, body.email, body.password)
    return AuthResponseSchema(user=UserPublicSchema.model_validate(user))
