from __future__ import annotations

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from recipe_genie.app.deps import get_auth_service, get_current_user
from recipe_genie.app.domain.models import User
from recipe_genie.app.schemas.auth import (
    LoginRequest,
    MeResponse,
    RegisterRequest,
    TokenResponse,
    UserOut,
)
from recipe_genie.app.services.auth_service import AuthResult, AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_out(user: User) -> UserOut:
    return UserOut(id=user.id, name=user.name, email=user.email)


def _token_response(result: AuthResult) -> TokenResponse:
    return TokenResponse(token=result.token, user=_user_out(result.user))


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    result = await run_in_threadpool(auth.register, body.name, body.email, body.password)
    return _token_response(result)


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = await run_in_threadpool(auth.login, body.email, body.password)
    return _token_response(result)


@router.get("/me", response_model=MeResponse)
async def me(user: User = Depends(get_current_user)):
    return MeResponse(user=_user_out(user))
