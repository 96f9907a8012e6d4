import logging
from typing import List, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..models import User
from ..schemas.auth import UserOut, UserStatusUpdate
from ..schemas.common import PageParams, Pagination
from .crud import get_or_404

logger = logging.getLogger(__name__)


def list_users(db: Session, params: PageParams) -> Tuple[List[UserOut], Pagination]:
    conditions = []
    if params.search:
        pattern = f"%{params.search}%"
        conditions.append(or_(User.username.ilike(pattern), User.email.ilike(pattern)))
    total = db.scalar(select(func.count(User.id)).where(*conditions)) or 0
    query = select(User).where(*conditions).order_by(User.created_at.desc(), User.id.desc())
    users = db.scalars(params.apply(query)).all()
    return [UserOut.model_validate(user) for user in users], params.pagination(total)


def set_user_status(db: Session, user_id: int, payload: UserStatusUpdate) -> UserOut:
    user = get_or_404(db, User, user_id, "User")
    user.is_active = payload.is_active
    db.commit()
    db.refresh(user)
    logger.info(f"User {user_id} is_active={user.is_active}")
    return UserOut.model_validate(user)
