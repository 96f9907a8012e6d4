from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from .common import CamelModel


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal["admin", "user"] = "user"


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(CamelModel):
    id: int
    username: str
    email: str
    role: str
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class UserStatusUpdate(CamelModel):
    is_active: bool


class Principal(CamelModel):
    """Decoded bearer token claims attached to a request."""

    user_id: int
    email: str
    role: str


class AuthResult(CamelModel):
    user: UserOut
    token: str
