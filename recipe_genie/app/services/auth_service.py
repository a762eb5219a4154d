# recipe_genie/app/services/auth_service.py
"""
Registration, login and bearer-token handling.
Passwords are hashed with bcrypt, tokens are HS256 JWTs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

import bcrypt
import jwt

from recipe_genie.app.domain.errors import AuthError, InputValidationError, RecipeGenieError
from recipe_genie.app.domain.models import User, utcnow
from recipe_genie.app.infra.db.base import UserRepository

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
MIN_PASSWORD_LENGTH = 6


@dataclass
class AuthResult:
    user: User
    token: str


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # stored hash is not a bcrypt hash
        return False


class AuthService:
    def __init__(self, users: UserRepository, secret: str, expire_days: int = 30):
        self._users = users
        self._secret = secret
        self.expire_days = expire_days

    def _require_secret(self) -> str:
        if not self._secret:
            raise RecipeGenieError("Missing JWT secret (JWT_SECRET).")
        return self._secret

    def create_token(self, user_id: str) -> str:
        now = utcnow()
        payload = {"id": user_id, "iat": now, "exp": now + timedelta(days=self.expire_days)}
        return jwt.encode(payload, self._require_secret(), algorithm=JWT_ALGORITHM)

    def decode_token(self, token: str) -> str:
        """
        Returns:
            The user id carried by the token

        Raises:
            AuthError: bad signature, expired or malformed token
        """
        try:
            payload = jwt.decode(token, self._require_secret(), algorithms=[JWT_ALGORITHM])
        except jwt.PyJWTError as exc:
            logger.info("auth.invalid_token reason=%s", exc)
            raise AuthError() from exc
        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise AuthError()
        return user_id

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> AuthResult:
        errors = []
        if not name or not name.strip():
            errors.append("Please add a name")
        if not email or "@" not in email:
            errors.append("Please add a valid email")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if errors:
            raise InputValidationError(errors[0], errors=errors)

        user = self._users.create(name.strip(), email, hash_password(password))  # type: ignore[union-attr,arg-type]
        logger.info("auth.register user=%s", user.id)
        return AuthResult(user=user, token=self.create_token(user.id))

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        if not email or not password:
            raise InputValidationError("Please provide an email and password")
        user = self._users.get_by_email(email)
        if user is None or not check_password(password, user.password_hash):
            raise AuthError("Invalid credentials")
        logger.info("auth.login user=%s", user.id)
        return AuthResult(user=user, token=self.create_token(user.id))

    def resolve_user(self, token: str) -> User:
        user = self._users.get_by_id(self.decode_token(token))
        if user is None:
            raise AuthError()
        return user
