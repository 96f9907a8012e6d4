"""Province -> City -> District -> Mall -> Brand tree built from live placements.

Statistics never read the cached counters on the geography rows. Every level is
counted from active placements with a grouped query, so a brand present in two
cities of a province counts once for the province.
"""

from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import Brand, BrandStore, City, District, Mall, Province
from ..schemas.map import RegionStats, TreeBrand, TreeCity, TreeDistrict, TreeMall, TreeProvince, TreeQuery


def _placement_conditions(query: TreeQuery) -> list:
    conditions = [BrandStore.is_active.is_(True), Brand.is_active.is_(True), Mall.is_active.is_(True)]
    if query.province_id is not None:
        conditions.append(BrandStore.province_id == query.province_id)
    if query.city_id is not None:
        conditions.append(BrandStore.city_id == query.city_id)
    if query.district_id is not None:
        conditions.append(BrandStore.district_id == query.district_id)
    if query.brand_id is not None:
        conditions.append(BrandStore.brand_id == query.brand_id)
    if query.search:
        conditions.append(Brand.name.ilike(f"%{query.search}%"))
    return conditions


def _grouped_stats(db: Session, column, conditions: list) -> Dict[int, RegionStats]:
    rows = db.execute(
        select(
            column,
            func.count(BrandStore.id),
            func.count(func.distinct(BrandStore.mall_id)),
            func.count(func.distinct(BrandStore.brand_id)),
        )
        .join(Brand, Brand.id == BrandStore.brand_id)
        .join(Mall, Mall.id == BrandStore.mall_id)
        .where(*conditions, column.is_not(None))
        .group_by(column)
    ).all()
    return {
        key: RegionStats(store_count=stores, mall_count=malls, brand_count=brands)
        for key, stores, malls, brands in rows
    }


def _stats_fields(stats: Optional[RegionStats]) -> dict:
    stats = stats or RegionStats()
    return {"mall_count": stats.mall_count, "brand_count": stats.brand_count, "store_count": stats.store_count}


def _mall_trees(db: Session, conditions: list) -> Dict[tuple, List[TreeMall]]:
    """Malls with their distinct brands, keyed by (city_id, district_id).

    Malls outside any district land under ``(city_id, None)``.
    """
    rows = db.execute(
        select(
            BrandStore.city_id,
            BrandStore.district_id,
            Mall.id,
            Mall.name,
            Mall.code,
            Brand.id,
            Brand.name,
            Brand.code,
        )
        .join(Brand, Brand.id == BrandStore.brand_id)
        .join(Mall, Mall.id == BrandStore.mall_id)
        .where(*conditions)
        .order_by(Mall.name, Mall.id, Brand.name, Brand.id)
    ).all()

    grouped: Dict[tuple, "OrderedDict[int, TreeMall]"] = {}
    for city_id, district_id, mall_id, mall_name, mall_code, brand_id, brand_name, brand_code in rows:
        malls = grouped.setdefault((city_id, district_id), OrderedDict())
        mall = malls.get(mall_id)
        if mall is None:
            mall = malls[mall_id] = TreeMall(id=mall_id, name=mall_name, code=mall_code)
        if all(brand.id != brand_id for brand in mall.brands):
            mall.brands.append(TreeBrand(id=brand_id, name=brand_name, code=brand_code))
    return {key: list(malls.values()) for key, malls in grouped.items()}


def build_tree(db: Session, query: TreeQuery) -> List[TreeProvince]:
    conditions = _placement_conditions(query)

    province_query = select(Province).where(Province.is_active.is_(True)).order_by(Province.code)
    if query.province_id is not None:
        province_query = province_query.where(Province.id == query.province_id)
    provinces = db.scalars(province_query).all()
    province_stats = _grouped_stats(db, BrandStore.province_id, conditions)

    if query.level == 1:
        return [
            TreeProvince(id=p.id, name=p.name, code=p.code, **_stats_fields(province_stats.get(p.id)))
            for p in provinces
        ]

    city_query = (
        select(City)
        .where(City.is_active.is_(True), City.province_id.in_([p.id for p in provinces]))
        .order_by(City.name)
    )
    if query.city_id is not None:
        city_query = city_query.where(City.id == query.city_id)
    cities = db.scalars(city_query).all()
    city_stats = _grouped_stats(db, BrandStore.city_id, conditions)

    districts_by_city: Dict[int, List[TreeDistrict]] = {}
    mall_trees: Dict[tuple, List[TreeMall]] = {}
    if query.level >= 3:
        district_query = (
            select(District)
            .where(District.is_active.is_(True), District.city_id.in_([c.id for c in cities]))
            .order_by(District.name)
        )
        if query.district_id is not None:
            district_query = district_query.where(District.id == query.district_id)
        district_stats = _grouped_stats(db, BrandStore.district_id, conditions)
        mall_trees = _mall_trees(db, conditions)
        for district in db.scalars(district_query).all():
            districts_by_city.setdefault(district.city_id, []).append(
                TreeDistrict(
                    id=district.id,
                    name=district.name,
                    code=district.code,
                    malls=mall_trees.get((district.city_id, district.id), []),
                    **_stats_fields(district_stats.get(district.id)),
                )
            )

    cities_by_province: Dict[int, List[TreeCity]] = {}
    for city in cities:
        node = TreeCity(id=city.id, name=city.name, code=city.code, **_stats_fields(city_stats.get(city.id)))
        if query.level >= 3:
            node.districts = districts_by_city.get(city.id, [])
            node.malls = mall_trees.get((city.id, None), [])
        cities_by_province.setdefault(city.province_id, []).append(node)

    return [
        TreeProvince(
            id=p.id,
            name=p.name,
            code=p.code,
            cities=cities_by_province.get(p.id, []),
            **_stats_fields(province_stats.get(p.id)),
        )
        for p in provinces
    ]
