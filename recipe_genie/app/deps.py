# recipe_genie/app/deps.py
# Collaborators are built by create_app() and kept on app.state;
# these dependencies only hand them to the routes.

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.concurrency import run_in_threadpool

from recipe_genie.app.config import Settings
from recipe_genie.app.domain.errors import AuthError
from recipe_genie.app.domain.models import User
from recipe_genie.app.infra.db.base import RecipeRepository, UserRepository
from recipe_genie.app.services.auth_service import AuthService
from recipe_genie.services.gemini_client import GeminiClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_recipe_repository(request: Request) -> RecipeRepository:
    return request.app.state.recipes


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.users


def get_text_model(request: Request):
    state = request.app.state
    if state.text_model is None:
        # built on first use so the API starts without GEMINI_API_KEY
        state.text_model = GeminiClient(
            api_key=state.settings.GEMINI_API_KEY,
            model_name=state.settings.GEMINI_MODEL,
        )
    return state.text_model


def get_auth_service(
    settings: Settings = Depends(get_app_settings),
    users: UserRepository = Depends(get_user_repository),
) -> AuthService:
    return AuthService(users, secret=settings.JWT_SECRET, expire_days=settings.JWT_EXPIRE_DAYS)


auth_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve Authorization: Bearer <jwt> to a stored user.
    Missing, invalid or expired tokens and unknown users all give 401.
    """
    if cred is None or cred.scheme.lower() != "bearer" or not cred.credentials:
        raise AuthError()
    return await run_in_threadpool(auth.resolve_user, cred.credentials)


async def get_optional_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    if cred is None:
        return None
    return await get_current_user(cred, auth)
