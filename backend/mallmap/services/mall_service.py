import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..errors import ConflictError
from ..models import Brand, BrandStore, Mall
from ..schemas.common import PageParams, Pagination, RegionFilter
from ..schemas.mall import BrandInMall, MallCreate, MallOut, MallRef, MallUpdate
from .crud import apply_updates, commit_or_conflict, ensure_no_children, get_or_404
from .region_service import validate_location

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "province_id", "city_id", "floor_count", "total_area", "parking_spaces", "is_active")


def _ensure_code_unique(db: Session, code: Optional[str], exclude_id: Optional[int] = None) -> None:
    if not code:
        return
    query = select(Mall.id).where(Mall.code == code)
    if exclude_id is not None:
        query = query.where(Mall.id != exclude_id)
    if db.execute(query).first():
        raise ConflictError(f"Mall code {code} already exists")


def create_mall(db: Session, payload: MallCreate) -> MallOut:
    values = payload.model_dump(mode="json", exclude_none=True)
    _ensure_code_unique(db, values.get("code"))
    validate_location(db, payload.province_id, payload.city_id, payload.district_id)

    mall = Mall(**values)
    db.add(mall)
    commit_or_conflict(db, "Mall code already exists")
    db.refresh(mall)
    logger.info(f"Created mall {mall.id} {mall.name}")
    return MallOut.model_validate(mall)


def update_mall(db: Session, mall_id: int, payload: MallUpdate) -> MallOut:
    mall = get_or_404(db, Mall, mall_id, "Mall")
    values = payload.model_dump(mode="json", exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in values and values[field] is None:
            values.pop(field)

    if "code" in values:
        _ensure_code_unique(db, values["code"], exclude_id=mall_id)
    if {"province_id", "city_id", "district_id"} & values.keys():
        validate_location(
            db,
            values.get("province_id", mall.province_id),
            values.get("city_id", mall.city_id),
            values.get("district_id", mall.district_id),
        )

    apply_updates(mall, values)
    commit_or_conflict(db, "Mall code already exists")
    db.refresh(mall)
    return MallOut.model_validate(mall)


def delete_mall(db: Session, mall_id: int) -> None:
    mall = get_or_404(db, Mall, mall_id, "Mall")
    ensure_no_children(db, "mall", mall_id, [("brand stores", BrandStore.mall_id)])
    db.delete(mall)
    db.commit()
    logger.info(f"Deleted mall {mall_id}")


def list_malls(db: Session, params: PageParams, region: RegionFilter) -> Tuple[List[MallOut], Pagination]:
    conditions = [Mall.is_active.is_(True)]
    if region.province_id is not None:
        conditions.append(Mall.province_id == region.province_id)
    if region.city_id is not None:
        conditions.append(Mall.city_id == region.city_id)
    if region.district_id is not None:
        conditions.append(Mall.district_id == region.district_id)
    if params.search:
        conditions.append(Mall.name.ilike(f"%{params.search}%"))

    total = db.scalar(select(func.count(Mall.id)).where(*conditions)) or 0
    query = (
        select(Mall)
        .options(selectinload(Mall.province), selectinload(Mall.city), selectinload(Mall.district))
        .where(*conditions)
        .order_by(Mall.created_at.desc(), Mall.id.desc())
    )
    malls = db.scalars(params.apply(query)).all()
    return [MallOut.model_validate(mall) for mall in malls], params.pagination(total)


def list_mall_brands(db: Session, mall_id: int, params: PageParams) -> Tuple[MallRef, List[BrandInMall], Pagination]:
    """Brands with an active placement in the mall, each with its store count there."""
    mall = get_or_404(db, Mall, mall_id, "Mall")

    store_counts = (
        select(BrandStore.brand_id.label("brand_id"), func.count(BrandStore.id).label("store_count"))
        .where(BrandStore.mall_id == mall_id, BrandStore.is_active.is_(True))
        .group_by(BrandStore.brand_id)
        .subquery()
    )
    conditions = [Brand.is_active.is_(True)]
    if params.search:
        conditions.append(Brand.name.ilike(f"%{params.search}%"))

    base = select(Brand, store_counts.c.store_count).join(store_counts, store_counts.c.brand_id == Brand.id)
    total = db.scalar(
        select(func.count(Brand.id)).join(store_counts, store_counts.c.brand_id == Brand.id).where(*conditions)
    ) or 0
    query = base.where(*conditions).order_by(Brand.sort.asc(), Brand.created_at.desc(), Brand.id.desc())
    rows = db.execute(params.apply(query)).all()

    brands = [
        BrandInMall(
            id=brand.id,
            name=brand.name,
            logo=brand.logo,
            category=brand.category,
            description=brand.description,
            sort=brand.sort or 0,
            store_count=store_count or 0,
        )
        for brand, store_count in rows
    ]
    return MallRef.model_validate(mall), brands, params.pagination(total)
