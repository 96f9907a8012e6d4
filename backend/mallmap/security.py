"""Password hashing, bearer tokens and the auth dependencies used by routers."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings, get_settings
from .errors import AuthError, AuthorizationError
from .models.user import ROLE_ADMIN
from .schemas.auth import Principal

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_token(settings: Settings, user_id: int, email: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(seconds=settings.jwt_expires_in),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(settings: Settings, token: str) -> Principal:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    try:
        return Principal(user_id=payload["userId"], email=payload["email"], role=payload["role"])
    except (KeyError, ValueError):
        raise AuthError("Invalid token")


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthError("No authentication token provided")
    return decode_token(settings, credentials.credentials)


def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[Principal]:
    if credentials is None or not credentials.credentials:
        return None
    return decode_token(settings, credentials.credentials)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if principal.role != ROLE_ADMIN:
        logger.warning(f"User {principal.user_id} ({principal.role}) denied admin access")
        raise AuthorizationError()
    return principal
