import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple, Union

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import ValidationError
from ..models import Dictionary
from ..schemas.common import PageParams, Pagination
from ..schemas.dictionary import BatchSort, DictionaryCreate, DictionaryOption, DictionaryOut, DictionaryUpdate
from .crud import apply_updates, get_or_404

logger = logging.getLogger(__name__)

DUPLICATE_VALUE = "Value already exists for this type"


def _ensure_value_unique(db: Session, type_: str, value: str, exclude_id: Optional[int] = None) -> None:
    query = select(Dictionary.id).where(Dictionary.type == type_, Dictionary.value == value)
    if exclude_id is not None:
        query = query.where(Dictionary.id != exclude_id)
    if db.execute(query).first():
        raise ValidationError(DUPLICATE_VALUE)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError(DUPLICATE_VALUE)


def list_dictionaries(
    db: Session,
    params: PageParams,
    type_: Optional[str] = None,
) -> Tuple[List[DictionaryOut], Pagination]:
    conditions = []
    if type_:
        conditions.append(Dictionary.type == type_)
    if params.search:
        pattern = f"%{params.search}%"
        conditions.append(
            or_(Dictionary.label.ilike(pattern), Dictionary.value.ilike(pattern), Dictionary.type.ilike(pattern))
        )

    total = db.scalar(select(func.count(Dictionary.id)).where(*conditions)) or 0
    query = (
        select(Dictionary)
        .where(*conditions)
        .order_by(Dictionary.type.asc(), Dictionary.sort.asc(), Dictionary.created_at.desc(), Dictionary.id.desc())
    )
    entries = db.scalars(params.apply(query)).all()
    return [DictionaryOut.model_validate(entry) for entry in entries], params.pagination(total)


def list_types(db: Session) -> List[str]:
    return list(db.scalars(select(Dictionary.type).distinct().order_by(Dictionary.type)).all())


def create_dictionary(db: Session, payload: DictionaryCreate) -> DictionaryOut:
    _ensure_value_unique(db, payload.type, payload.value)
    entry = Dictionary(**payload.model_dump())
    db.add(entry)
    _commit(db)
    db.refresh(entry)
    logger.info(f"Created dictionary entry {entry.type}/{entry.value}")
    return DictionaryOut.model_validate(entry)


def update_dictionary(db: Session, entry_id: int, payload: DictionaryUpdate) -> DictionaryOut:
    entry = get_or_404(db, Dictionary, entry_id, "Dictionary entry")
    values = payload.model_dump(exclude_unset=True)
    for field in ("type", "label", "value", "sort", "is_active"):
        if field in values and values[field] is None:
            values.pop(field)

    if "type" in values or "value" in values:
        _ensure_value_unique(db, values.get("type", entry.type), values.get("value", entry.value), exclude_id=entry_id)
    apply_updates(entry, values)
    _commit(db)
    db.refresh(entry)
    return DictionaryOut.model_validate(entry)


def delete_dictionary(db: Session, entry_id: int) -> None:
    entry = get_or_404(db, Dictionary, entry_id, "Dictionary entry")
    db.delete(entry)
    db.commit()
    logger.info(f"Deleted dictionary entry {entry_id}")


def batch_sort(db: Session, payload: BatchSort) -> int:
    """Set ``sort`` on each listed entry; unknown ids are ignored."""
    updated = 0
    for item in payload.items:
        entry = db.get(Dictionary, item.id)
        if entry is None:
            continue
        entry.sort = item.sort
        updated += 1
    db.commit()
    return updated


def lookup(
    db: Session,
    types: List[str],
) -> Union[List[DictionaryOption], Dict[str, List[DictionaryOption]]]:
    """Label/value pairs of active entries.

    One type gives a plain list, several types or none give a dict keyed by type.
    """
    query = select(Dictionary).where(Dictionary.is_active.is_(True))
    if types:
        query = query.where(Dictionary.type.in_(types))
    entries = db.scalars(query.order_by(Dictionary.type, Dictionary.sort, Dictionary.id)).all()

    grouped: "OrderedDict[str, List[DictionaryOption]]" = OrderedDict((type_, []) for type_ in types)
    for entry in entries:
        grouped.setdefault(entry.type, []).append(DictionaryOption(label=entry.label, value=entry.value))

    if len(types) == 1:
        return grouped[types[0]]
    return dict(grouped)
