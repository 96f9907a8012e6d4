import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..errors import ConflictError
from ..models import Brand, BrandStore
from ..schemas.brand import BrandCreate, BrandOut, BrandUpdate, BrandWithStoreCount
from ..schemas.common import PageParams, Pagination, RegionFilter
from .crud import apply_updates, commit_or_conflict, ensure_no_children, get_or_404
from .region_service import validate_location

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "sort", "is_active")


def _ensure_code_unique(db: Session, code: Optional[str], exclude_id: Optional[int] = None) -> None:
    if not code:
        return
    query = select(Brand.id).where(Brand.code == code)
    if exclude_id is not None:
        query = query.where(Brand.id != exclude_id)
    if db.execute(query).first():
        raise ConflictError(f"Brand code {code} already exists")


def create_brand(db: Session, payload: BrandCreate) -> BrandOut:
    values = payload.model_dump(mode="json", exclude_none=True)
    _ensure_code_unique(db, values.get("code"))
    validate_location(db, values.get("province_id"), values.get("city_id"), values.get("district_id"))

    brand = Brand(**values)
    db.add(brand)
    commit_or_conflict(db, "Brand code already exists")
    db.refresh(brand)
    logger.info(f"Created brand {brand.id} {brand.name}")
    return BrandOut.model_validate(brand)


def update_brand(db: Session, brand_id: int, payload: BrandUpdate) -> BrandOut:
    brand = get_or_404(db, Brand, brand_id, "Brand")
    values = payload.model_dump(mode="json", exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in values and values[field] is None:
            values.pop(field)

    if "code" in values:
        _ensure_code_unique(db, values["code"], exclude_id=brand_id)
    if {"province_id", "city_id", "district_id"} & values.keys():
        validate_location(
            db,
            values.get("province_id", brand.province_id),
            values.get("city_id", brand.city_id),
            values.get("district_id", brand.district_id),
        )

    apply_updates(brand, values)
    commit_or_conflict(db, "Brand code already exists")
    db.refresh(brand)
    return BrandOut.model_validate(brand)


def delete_brand(db: Session, brand_id: int) -> None:
    brand = get_or_404(db, Brand, brand_id, "Brand")
    ensure_no_children(db, "brand", brand_id, [("brand stores", BrandStore.brand_id)])
    db.delete(brand)
    db.commit()
    logger.info(f"Deleted brand {brand_id}")


def _store_counts(db: Session, brand_ids: List[int], region: RegionFilter) -> Dict[int, int]:
    if not brand_ids:
        return {}
    query = (
        select(BrandStore.brand_id, func.count(BrandStore.id))
        .where(BrandStore.brand_id.in_(brand_ids), BrandStore.is_active.is_(True))
        .group_by(BrandStore.brand_id)
    )
    if region.province_id is not None:
        query = query.where(BrandStore.province_id == region.province_id)
    if region.city_id is not None:
        query = query.where(BrandStore.city_id == region.city_id)
    if region.district_id is not None:
        query = query.where(BrandStore.district_id == region.district_id)
    return {brand_id: count for brand_id, count in db.execute(query).all()}


def list_brands(
    db: Session,
    params: PageParams,
    region: RegionFilter,
) -> Tuple[List[BrandWithStoreCount], Pagination]:
    conditions = [Brand.is_active.is_(True)]
    if region.province_id is not None:
        conditions.append(Brand.province_id == region.province_id)
    if region.city_id is not None:
        conditions.append(Brand.city_id == region.city_id)
    if region.district_id is not None:
        conditions.append(Brand.district_id == region.district_id)
    if params.search:
        conditions.append(Brand.name.ilike(f"%{params.search}%"))

    total = db.scalar(select(func.count(Brand.id)).where(*conditions)) or 0
    query = (
        select(Brand)
        .options(selectinload(Brand.province), selectinload(Brand.city), selectinload(Brand.district))
        .where(*conditions)
        .order_by(Brand.created_at.desc(), Brand.id.desc())
    )
    brands = db.scalars(params.apply(query)).all()

    counts = _store_counts(db, [brand.id for brand in brands], region)
    items = [
        BrandWithStoreCount.model_validate(brand).model_copy(update={"store_count": counts.get(brand.id, 0)})
        for brand in brands
    ]
    return items, params.pagination(total)
