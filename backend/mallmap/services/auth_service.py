import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import Settings
from ..db import utcnow
from ..errors import AuthError, AuthorizationError, ConflictError
from ..models import User
from ..models.user import ROLE_ADMIN
from ..schemas.auth import AuthResult, LoginRequest, Principal, RegisterRequest, UserOut
from ..security import create_token, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _auth_result(settings: Settings, user: User) -> AuthResult:
    token = create_token(settings, user.id, user.email, user.role)
    return AuthResult(user=UserOut.model_validate(user), token=token)


def register(
    db: Session,
    settings: Settings,
    payload: RegisterRequest,
    principal: Optional[Principal] = None,
) -> AuthResult:
    if payload.role == ROLE_ADMIN and (principal is None or principal.role != ROLE_ADMIN):
        logger.warning(f"Refused admin registration for {payload.email}")
        raise AuthorizationError("Only admins can create admin accounts")

    email = payload.email.lower()
    existing = db.execute(
        select(User.id).where(or_(User.email == email, User.username == payload.username))
    ).first()
    if existing:
        raise ConflictError("Username or email already exists")

    user = User(
        username=payload.username,
        email=email,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username or email already exists")
    db.refresh(user)
    logger.info(f"Registered user {user.username} ({user.role})")
    return _auth_result(settings, user)


def login(db: Session, settings: Settings, payload: LoginRequest) -> AuthResult:
    user = db.scalars(select(User).where(User.email == payload.email.lower())).first()
    # One message for every failure so callers cannot tell which part was wrong.
    if user is None or not verify_password(payload.password, user.password_hash) or not user.is_active:
        logger.warning(f"Rejected login for {payload.email}")
        raise AuthError(INVALID_CREDENTIALS)

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)
    return _auth_result(settings, user)


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise AuthError("User does not exist")
    return user
