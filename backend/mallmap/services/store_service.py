"""Placement (brand store) administration.

Bulk creation is best effort: malls that already host the brand are skipped and
reported, and each insert is committed on its own so a single failure leaves the
other placements in place.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..errors import ConflictError, ValidationError
from ..models import Brand, BrandStore, Mall
from ..schemas.common import PageParams, Pagination, RegionFilter
from ..schemas.store import (
    BrandStoreBulkCreate,
    BrandStoreOut,
    BrandStoreUpdate,
    BulkCreateResult,
    CreatedBrandStore,
    MallInfo,
)
from .crud import apply_updates, get_or_404
from .region_service import validate_location

logger = logging.getLogger(__name__)

STORE_OPTIONS = (
    selectinload(BrandStore.brand),
    selectinload(BrandStore.mall),
    selectinload(BrandStore.province),
    selectinload(BrandStore.city),
    selectinload(BrandStore.district),
)

COMMON_FIELDS = (
    "store_name",
    "score",
    "floor",
    "unit_number",
    "opening_hours",
    "phone",
    "is_ola",
    "is_active",
)


def _mall_info(mall: Mall) -> MallInfo:
    return MallInfo(
        name=mall.name,
        address=mall.address,
        province=mall.province.name if mall.province else None,
        city=mall.city.name if mall.city else None,
        district=mall.district.name if mall.district else None,
    )


def create_brand_stores(db: Session, payload: BrandStoreBulkCreate) -> Tuple[bool, str, BulkCreateResult]:
    """Place one brand into several malls.

    Returns ``(success, message, result)``. When every requested mall already
    hosts the brand the call is a reportable no-op with ``success`` False.
    """
    mall_ids = payload.mall_ids
    if not mall_ids:
        raise ValidationError("Please provide at least one valid mall id")
    get_or_404(db, Brand, payload.brand_id, "Brand")

    existing = db.scalars(
        select(BrandStore)
        .options(*STORE_OPTIONS)
        .where(BrandStore.brand_id == payload.brand_id, BrandStore.mall_id.in_(mall_ids))
    ).all()
    existing_mall_ids = {store.mall_id for store in existing}
    new_mall_ids = [mall_id for mall_id in mall_ids if mall_id not in existing_mall_ids]

    if not new_mall_ids:
        result = BulkCreateResult(
            skipped=len(mall_ids),
            total=len(mall_ids),
            skipped_malls=[store.mall.name for store in existing if store.mall],
            existing_stores=[BrandStoreOut.model_validate(store) for store in existing],
        )
        return False, "All selected malls already have this brand", result

    malls = db.scalars(
        select(Mall)
        .options(selectinload(Mall.province), selectinload(Mall.city), selectinload(Mall.district))
        .where(Mall.id.in_(new_mall_ids))
    ).all()
    if len(malls) != len(new_mall_ids):
        missing = sorted(set(new_mall_ids) - {mall.id for mall in malls})
        raise ValidationError(f"Some mall ids are invalid: {missing}")
    malls_by_id = {mall.id: mall for mall in malls}

    common = {field: getattr(payload, field) for field in COMMON_FIELDS}
    created: List[BrandStore] = []
    failed: List[int] = []
    for mall_id in new_mall_ids:
        mall = malls_by_id[mall_id]
        store = BrandStore(
            brand_id=payload.brand_id,
            mall_id=mall.id,
            province_id=mall.province_id,
            city_id=mall.city_id,
            district_id=mall.district_id,
            store_address=payload.store_address or mall.address,
            **common,
        )
        db.add(store)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.error(f"Failed to place brand {payload.brand_id} in mall {mall_id}: {exc}")
            failed.append(mall_id)
            continue
        created.append(store)

    created_out = []
    for store in created:
        db.refresh(store)
        out = BrandStoreOut.model_validate(store)
        created_out.append(CreatedBrandStore(**out.model_dump(), mall_info=_mall_info(malls_by_id[store.mall_id])))

    skipped_malls = [store.mall.name for store in existing if store.mall]
    message = f"Created {len(created_out)} brand stores"
    if existing_mall_ids:
        message += f", skipped {len(existing_mall_ids)} existing"
    if failed:
        message += f", {len(failed)} failed"
    logger.info(f"Brand {payload.brand_id}: {message}")

    result = BulkCreateResult(
        created=created_out,
        skipped=len(existing_mall_ids),
        skipped_malls=skipped_malls,
        failed=failed,
        total=len(mall_ids),
    )
    return bool(created_out), message, result


def update_brand_store(db: Session, store_id: int, payload: BrandStoreUpdate) -> BrandStoreOut:
    values = payload.model_dump(exclude_unset=True)
    for field in ("brand_id", "mall_id", "is_active", "is_ola"):
        if field in values and values[field] is None:
            values.pop(field)

    store = get_or_404(db, BrandStore, store_id, "Brand store")
    if "brand_id" in values and "mall_id" in values:
        clash = db.execute(
            select(BrandStore.id).where(
                BrandStore.brand_id == values["brand_id"],
                BrandStore.mall_id == values["mall_id"],
                BrandStore.id != store_id,
            )
        ).first()
        if clash:
            raise ConflictError("Brand already occupies this mall")

    if "brand_id" in values:
        get_or_404(db, Brand, values["brand_id"], "Brand")
    if "mall_id" in values:
        get_or_404(db, Mall, values["mall_id"], "Mall")
    if {"province_id", "city_id", "district_id"} & values.keys():
        validate_location(
            db,
            values.get("province_id", store.province_id),
            values.get("city_id", store.city_id),
            values.get("district_id", store.district_id),
        )

    apply_updates(store, values)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Brand already occupies this mall")
    db.refresh(store)
    return BrandStoreOut.model_validate(store)


def delete_brand_store(db: Session, store_id: int) -> None:
    store = get_or_404(db, BrandStore, store_id, "Brand store")
    db.delete(store)
    db.commit()
    logger.info(f"Deleted brand store {store_id}")


def list_brand_stores(
    db: Session,
    params: PageParams,
    region: RegionFilter,
    brand_id: Optional[int] = None,
    mall_id: Optional[int] = None,
) -> Tuple[List[BrandStoreOut], Pagination]:
    conditions = []
    if brand_id is not None:
        conditions.append(BrandStore.brand_id == brand_id)
    if mall_id is not None:
        conditions.append(BrandStore.mall_id == mall_id)
    if region.province_id is not None:
        conditions.append(BrandStore.province_id == region.province_id)
    if region.city_id is not None:
        conditions.append(BrandStore.city_id == region.city_id)
    if region.district_id is not None:
        conditions.append(BrandStore.district_id == region.district_id)

    total = db.scalar(select(func.count(BrandStore.id)).where(*conditions)) or 0
    query = (
        select(BrandStore)
        .options(*STORE_OPTIONS)
        .where(*conditions)
        .order_by(BrandStore.created_at.desc(), BrandStore.id.desc())
    )
    stores = db.scalars(params.apply(query)).all()
    return [BrandStoreOut.model_validate(store) for store in stores], params.pagination(total)
