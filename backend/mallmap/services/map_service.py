from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased, selectinload

from ..errors import NotFoundError, ValidationError
from ..models import Brand, BrandStore, City, District, Mall, Province
from ..schemas.common import PageParams, Pagination, RefOut, RegionFilter
from ..schemas.map import (
    DetailBrand,
    DetailMall,
    DetailStore,
    NationalSummary,
    ProvinceSummary,
    RegionStats,
)
from ..schemas.region import CityOut, DistrictOut, ProvinceOut


def get_national_summary(db: Session) -> NationalSummary:
    """Sum the cached counters of every active province; no joins."""
    provinces = db.scalars(select(Province).where(Province.is_active.is_(True)).order_by(Province.code)).all()
    summaries = [ProvinceSummary.model_validate(province) for province in provinces]
    return NationalSummary(
        total_provinces=len(summaries),
        total_brands=sum(item.brand_count or 0 for item in summaries),
        total_malls=sum(item.mall_count or 0 for item in summaries),
        total_districts=sum(item.district_count or 0 for item in summaries),
        provinces=summaries,
    )


def list_provinces(db: Session, params: PageParams) -> Tuple[List[ProvinceOut], Pagination]:
    conditions = [Province.is_active.is_(True)]
    if params.search:
        conditions.append(Province.name.ilike(f"%{params.search}%"))
    total = db.scalar(select(func.count(Province.id)).where(*conditions)) or 0
    query = select(Province).where(*conditions).order_by(Province.name)
    provinces = db.scalars(params.apply(query)).all()
    return [ProvinceOut.model_validate(item) for item in provinces], params.pagination(total)


def get_province_detail(db: Session, province_id: int) -> Tuple[ProvinceOut, List[CityOut]]:
    province = db.get(Province, province_id)
    if province is None:
        raise NotFoundError("Province not found")
    cities = db.scalars(
        select(City).where(City.province_id == province_id, City.is_active.is_(True)).order_by(City.name)
    ).all()
    return ProvinceOut.model_validate(province), [CityOut.model_validate(city) for city in cities]


def list_cities(
    db: Session,
    params: PageParams,
    province_id: Optional[int] = None,
) -> Tuple[List[CityOut], Pagination]:
    conditions = [City.is_active.is_(True)]
    if province_id is not None:
        conditions.append(City.province_id == province_id)
    if params.search:
        conditions.append(City.name.ilike(f"%{params.search}%"))
    total = db.scalar(select(func.count(City.id)).where(*conditions)) or 0
    query = select(City).options(selectinload(City.province)).where(*conditions).order_by(City.name)
    cities = db.scalars(params.apply(query)).all()
    return [CityOut.model_validate(city) for city in cities], params.pagination(total)


def get_city_detail(db: Session, city_id: int) -> Tuple[CityOut, List[DistrictOut]]:
    city = db.get(City, city_id)
    if city is None:
        raise NotFoundError("City not found")
    districts = db.scalars(
        select(District).where(District.city_id == city_id, District.is_active.is_(True)).order_by(District.name)
    ).all()
    return CityOut.model_validate(city), [DistrictOut.model_validate(district) for district in districts]


def list_districts(db: Session, params: PageParams, region: RegionFilter) -> Tuple[List[DistrictOut], Pagination]:
    conditions = [District.is_active.is_(True)]
    if region.city_id is not None:
        conditions.append(District.city_id == region.city_id)
    if region.province_id is not None:
        conditions.append(District.province_id == region.province_id)
    if params.search:
        conditions.append(District.name.ilike(f"%{params.search}%"))
    total = db.scalar(select(func.count(District.id)).where(*conditions)) or 0
    query = (
        select(District)
        .options(selectinload(District.city), selectinload(District.province))
        .where(*conditions)
        .order_by(District.name)
    )
    districts = db.scalars(params.apply(query)).all()
    return [DistrictOut.model_validate(district) for district in districts], params.pagination(total)


def get_statistics(db: Session, region: RegionFilter) -> Dict[str, int]:
    """Live counts of active brands and malls anchored in a region."""
    brand_query = select(func.count(Brand.id)).where(Brand.is_active.is_(True))
    mall_query = select(func.count(Mall.id)).where(Mall.is_active.is_(True))
    if region.province_id is not None:
        brand_query = brand_query.where(Brand.province_id == region.province_id)
        mall_query = mall_query.where(Mall.province_id == region.province_id)
    if region.city_id is not None:
        brand_query = brand_query.where(Brand.city_id == region.city_id)
        mall_query = mall_query.where(Mall.city_id == region.city_id)
    if region.district_id is not None:
        brand_query = brand_query.where(Brand.district_id == region.district_id)
        mall_query = mall_query.where(Mall.district_id == region.district_id)
    return {"brandCount": db.scalar(brand_query) or 0, "mallCount": db.scalar(mall_query) or 0}


def _detail_conditions(region: RegionFilter, brand_id: Optional[int], search: Optional[str]) -> list:
    conditions = [BrandStore.is_active.is_(True)]
    if region.province_id is not None:
        conditions.append(BrandStore.province_id == region.province_id)
    if region.city_id is not None:
        conditions.append(BrandStore.city_id == region.city_id)
    if region.district_id is not None:
        conditions.append(BrandStore.district_id == region.district_id)
    if brand_id is not None:
        conditions.append(BrandStore.brand_id == brand_id)
    if search:
        conditions.append(Brand.name.ilike(f"%{search}%"))
    return conditions


def _ref(obj) -> Optional[RefOut]:
    return RefOut(id=obj.id, name=obj.name, code=obj.code) if obj is not None else None


def get_region_detail(
    db: Session,
    region: RegionFilter,
    params: PageParams,
    brand_id: Optional[int] = None,
) -> Dict:
    """Flattened placements inside a province, city or district.

    Rows are sorted by brand name then mall name; ``params.search`` filters on
    brand name.
    """
    if region.is_empty:
        raise ValidationError("Please provide a province, city or district id")

    conditions = _detail_conditions(region, brand_id, params.search)
    ProvinceRef = aliased(Province)
    CityRef = aliased(City)
    DistrictRef = aliased(District)

    query = (
        select(BrandStore, Brand, Mall, ProvinceRef, CityRef, DistrictRef)
        .join(Brand, Brand.id == BrandStore.brand_id)
        .join(Mall, Mall.id == BrandStore.mall_id)
        .join(ProvinceRef, ProvinceRef.id == BrandStore.province_id)
        .join(CityRef, CityRef.id == BrandStore.city_id)
        .join(DistrictRef, DistrictRef.id == BrandStore.district_id, isouter=True)
        .where(*conditions)
        .order_by(Brand.name.asc(), Mall.name.asc(), BrandStore.id.asc())
    )
    rows = db.execute(params.apply(query)).all()

    stores = [
        DetailStore(
            id=store.id,
            is_active=store.is_active,
            store_name=store.store_name,
            address=store.store_address,
            phone=store.phone,
            opening_hours=store.opening_hours,
            floor=store.floor,
            created_at=store.created_at,
            updated_at=store.updated_at,
            brand=DetailBrand.model_validate(brand),
            mall=DetailMall(id=mall.id, name=mall.name, code=mall.code, address=mall.address, phone=mall.contact_phone),
            province=_ref(province),
            city=_ref(city),
            district=_ref(district),
        )
        for store, brand, mall, province, city, district in rows
    ]

    stats_row = db.execute(
        select(
            func.count(BrandStore.id).label("store_count"),
            func.count(func.distinct(BrandStore.mall_id)).label("mall_count"),
            func.count(func.distinct(BrandStore.brand_id)).label("brand_count"),
        )
        .join(Brand, Brand.id == BrandStore.brand_id)
        .where(*conditions)
    ).one()
    stats = RegionStats(
        store_count=stats_row.store_count or 0,
        mall_count=stats_row.mall_count or 0,
        brand_count=stats_row.brand_count or 0,
    )

    region_info = {}
    for key, model, obj_id in (
        ("province", Province, region.province_id),
        ("city", City, region.city_id),
        ("district", District, region.district_id),
    ):
        if obj_id is not None:
            obj = db.get(model, obj_id)
            if obj is not None:
                region_info[key] = _ref(obj)

    return {
        "stores": stores,
        "regionInfo": region_info,
        "stats": stats,
        "pagination": params.pagination(stats.store_count),
    }
