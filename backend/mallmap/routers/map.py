from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    CompareQuery,
    PageParams,
    RegionFilter,
    TreeQuery,
    compare_query,
    ok,
    page_params,
    region_filter,
    tree_query,
)
from ..services import (
    build_tree,
    compare_locations,
    get_city_detail,
    get_national_summary,
    get_province_detail,
    get_region_detail,
    get_statistics,
    list_brands,
    list_cities,
    list_districts,
    list_malls,
    list_provinces,
    lookup,
)

router = APIRouter(prefix="/map", tags=["map"])


@router.get("/national")
def national_summary(db: Session = Depends(get_db)):
    return ok(get_national_summary(db))


@router.get("/provinces")
def get_provinces(params: PageParams = Depends(page_params()), db: Session = Depends(get_db)):
    provinces, pagination = list_provinces(db, params)
    return ok({"provinces": provinces, "pagination": pagination})


@router.get("/provinces/{province_id}")
def get_province(province_id: int, db: Session = Depends(get_db)):
    province, cities = get_province_detail(db, province_id)
    return ok({"province": province, "cities": cities})


@router.get("/cities")
def get_cities(
    province_id: Optional[int] = Query(None, alias="provinceId"),
    params: PageParams = Depends(page_params()),
    db: Session = Depends(get_db),
):
    cities, pagination = list_cities(db, params, province_id=province_id)
    return ok({"cities": cities, "pagination": pagination})


@router.get("/cities/{city_id}")
def get_city(city_id: int, db: Session = Depends(get_db)):
    city, districts = get_city_detail(db, city_id)
    return ok({"city": city, "districts": districts})


@router.get("/districts")
def get_districts(
    params: PageParams = Depends(page_params()),
    region: RegionFilter = Depends(region_filter),
    db: Session = Depends(get_db),
):
    districts, pagination = list_districts(db, params, region)
    return ok({"districts": districts, "pagination": pagination})


@router.get("/malls")
def get_malls(
    params: PageParams = Depends(page_params()),
    region: RegionFilter = Depends(region_filter),
    db: Session = Depends(get_db),
):
    malls, pagination = list_malls(db, params, region)
    return ok({"malls": malls, "pagination": pagination})


@router.get("/brands")
def get_brands(
    params: PageParams = Depends(page_params()),
    region: RegionFilter = Depends(region_filter),
    db: Session = Depends(get_db),
):
    brands, pagination = list_brands(db, params, region)
    return ok({"brands": brands, "pagination": pagination})


@router.get("/statistics")
def statistics(region: RegionFilter = Depends(region_filter), db: Session = Depends(get_db)):
    return ok(get_statistics(db, region))


@router.get("/tree")
def tree(query: TreeQuery = Depends(tree_query), db: Session = Depends(get_db)):
    provinces = build_tree(db, query)
    return ok({"provinces": [province.model_dump(by_alias=True, exclude_none=True) for province in provinces]})


@router.get("/detail")
def region_detail(
    brand_id: Optional[int] = Query(None, alias="brandId"),
    params: PageParams = Depends(page_params(default_limit=20)),
    region: RegionFilter = Depends(region_filter),
    db: Session = Depends(get_db),
):
    return ok(get_region_detail(db, region, params, brand_id=brand_id))


@router.get("/compare")
def compare(query: CompareQuery = Depends(compare_query), db: Session = Depends(get_db)):
    return ok({"type": query.type, "locations": compare_locations(db, query)})


@router.get("/dictionaries")
def dictionaries(type_: Optional[str] = Query(None, alias="type"), db: Session = Depends(get_db)):
    types = [part.strip() for part in (type_ or "").split(",") if part.strip()]
    return ok(lookup(db, types))
