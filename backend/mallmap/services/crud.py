"""Small helpers shared by the admin write services."""

from typing import Dict, Iterable, Tuple, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from ..db import Base
from ..errors import ConflictError, NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


def get_or_404(db: Session, model: Type[ModelT], obj_id: int, label: str) -> ModelT:
    obj = db.get(model, obj_id)
    if obj is None:
        raise NotFoundError(f"{label} not found")
    return obj


def apply_updates(obj: Base, values: Dict) -> None:
    for field, value in values.items():
        setattr(obj, field, value)


def commit_or_conflict(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(message)


def ensure_no_children(
    db: Session,
    label: str,
    obj_id: int,
    references: Iterable[Tuple[str, InstrumentedAttribute]],
) -> None:
    """Refuse to delete a row that other rows still point at.

    ``references`` pairs a human label with the foreign-key column to check.
    """
    blocking = []
    for child_label, column in references:
        count = db.scalar(select(func.count()).select_from(column.class_).where(column == obj_id)) or 0
        if count:
            blocking.append(f"{count} {child_label}")
    if blocking:
        raise ConflictError(f"Cannot delete {label}: still referenced by {', '.join(blocking)}")
