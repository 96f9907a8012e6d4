"""Rebuild the cached brand/mall/district counters on the geography rows.

The counters are never maintained on write. Running this pass any number of
times leaves the same values behind.
"""

import logging
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import BrandStore, City, District, Mall, Province

logger = logging.getLogger(__name__)


def _count_by(db: Session, statement) -> Dict[int, int]:
    return {key: count for key, count in db.execute(statement).all() if key is not None}


def _mall_counts(db: Session, column) -> Dict[int, int]:
    return _count_by(db, select(column, func.count(Mall.id)).where(Mall.is_active.is_(True)).group_by(column))


def _brand_counts(db: Session, column) -> Dict[int, int]:
    return _count_by(
        db,
        select(column, func.count(func.distinct(BrandStore.brand_id)))
        .where(BrandStore.is_active.is_(True))
        .group_by(column),
    )


def _district_counts(db: Session, column) -> Dict[int, int]:
    return _count_by(db, select(column, func.count(District.id)).group_by(column))


def recompute_counters(db: Session) -> Dict[str, int]:
    """Recount every province, city and district. Returns how many rows changed per table."""
    changed = {"provinces": 0, "cities": 0, "districts": 0}
    plans = (
        ("provinces", Province, Mall.province_id, BrandStore.province_id, District.province_id),
        ("cities", City, Mall.city_id, BrandStore.city_id, District.city_id),
        ("districts", District, Mall.district_id, BrandStore.district_id, None),
    )
    for key, model, mall_column, store_column, district_column in plans:
        malls = _mall_counts(db, mall_column)
        brands = _brand_counts(db, store_column)
        districts = _district_counts(db, district_column) if district_column is not None else None

        for row in db.scalars(select(model)).all():
            values = {"mall_count": malls.get(row.id, 0), "brand_count": brands.get(row.id, 0)}
            if districts is not None:
                values["district_count"] = districts.get(row.id, 0)
            if any(getattr(row, field) != value for field, value in values.items()):
                for field, value in values.items():
                    setattr(row, field, value)
                changed[key] += 1

    db.commit()
    logger.info(f"Recomputed counters: {changed}")
    return changed
