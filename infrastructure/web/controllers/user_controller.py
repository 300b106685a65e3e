from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from config.settings import Settings
from core.services.token_service import TokenService
from core.use_cases.user_use_cases import register_user, login_user, get_credits
from infrastructure.db.sqlite import SQLiteUserRepository
from infrastructure.web.dependencies import get_current_user_id, get_settings, get_token_service, get_user_repo


router = APIRouter(prefix="/api/user", tags=["user"])


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class PublicUser(BaseModel):
    name: str

class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: PublicUser

class CreditsResponse(BaseModel):
    success: bool = True
    credits: int
    user: PublicUser


@router.post("/register", response_model=AuthResponse)
def register(
    payload: RegisterRequest,
    repo: SQLiteUserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
):
    token, user = register_user(
        repo,
        tokens,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        initial_credits=settings.INITIAL_CREDITS,
    )
    return AuthResponse(token=token, user=PublicUser(name=user.name))

@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    repo: SQLiteUserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    token, user = login_user(repo, tokens, email=payload.email, password=payload.password)
    return AuthResponse(token=token, user=PublicUser(name=user.name))

@router.get("/credits", response_model=CreditsResponse)
def credits(
    user_id: int = Depends(get_current_user_id),
    repo: SQLiteUserRepository = Depends(get_user_repo),
):
    user = get_credits(repo, user_id)
    return CreditsResponse(credits=user.credit_balance or 0, user=PublicUser(name=user.name))
