"""Admin endpoints: geography, brands, placements, users, dictionaries and counters.

Every mutation requires an admin token. Dictionary reads stay public because
the front end decodes category codes before anyone logs in.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import ValidationError, envelope
from ..schemas import (
    BatchSort,
    BrandCreate,
    BrandStoreBulkCreate,
    BrandStoreUpdate,
    BrandUpdate,
    CityCreate,
    CityUpdate,
    DictionaryCreate,
    DictionaryUpdate,
    DistrictCreate,
    DistrictUpdate,
    PageParams,
    Principal,
    ProvinceCreate,
    ProvinceUpdate,
    RegionFilter,
    UserStatusUpdate,
    ok,
    page_params,
    region_filter,
)
from ..security import get_current_principal, require_admin
from .. import services

router = APIRouter(prefix="/admin", tags=["admin"])


# Placements

@router.post("/brand-stores")
def create_brand_stores(
    payload: BrandStoreBulkCreate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    success, message, result = services.create_brand_stores(db, payload)
    if not success and not result.failed:
        raise ValidationError(message, data=jsonable_encoder(result, by_alias=True))
    return envelope(success, message, data=jsonable_encoder(result, by_alias=True))


@router.put("/brand-stores/{store_id}")
def update_brand_store(
    store_id: int,
    payload: BrandStoreUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    return ok(services.update_brand_store(db, store_id, payload), "Brand store updated")


@router.delete("/brand-stores/{store_id}")
def delete_brand_store(store_id: int, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    services.delete_brand_store(db, store_id)
    return ok(message="Brand store deleted")


@router.get("/brand-stores")
def list_brand_stores(
    brand_id: Optional[int] = Query(None, alias="brandId"),
    mall_id: Optional[int] = Query(None, alias="mallId"),
    params: PageParams = Depends(page_params(default_limit=20)),
    region: RegionFilter = Depends(region_filter),
    db: Session = Depends(get_db),
    _: Principal = Depends(get_current_principal),
):
    stores, pagination = services.list_brand_stores(db, params, region, brand_id=brand_id, mall_id=mall_id)
    return ok({"stores": stores, "pagination": pagination})


# Geography

@router.post("/provinces")
def create_province(payload: ProvinceCreate, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    return ok(services.create_province(db, payload), "Province created")


@router.put("/provinces/{province_id}")
def update_province(
    province_id: int,
    payload: ProvinceUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    return ok(services.update_province(db, province_id, payload), "Province updated")


@router.delete("/provinces/{province_id}")
def delete_province(province_id: int, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    services.delete_province(db, province_id)
    return ok(message="Province deleted")


@router.post("/cities")
def create_city(payload: CityCreate, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    return ok(services.create_city(db, payload), "City created")


@router.put("/cities/{city_id}")
def update_city(
    city_id: int,
    payload: CityUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    return ok(services.update_city(db, city_id, payload), "City updated")


@router.delete("/cities/{city_id}")
def delete_city(city_id: int, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    services.delete_city(db, city_id)
    return ok(message="City deleted")


@router.post("/districts")
def create_district(payload: DistrictCreate, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    return ok(services.create_district(db, payload), "District created")


@router.put("/districts/{district_id}")
def update_district(
    district_id: int,
    payload: DistrictUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    return ok(services.update_district(db, district_id, payload), "District updated")


@router.delete("/districts/{district_id}")
def delete_district(district_id: int, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    services.delete_district(db, district_id)
    return ok(message="District deleted")


# Brands

@router.post("/brands")
def create_brand(payload: BrandCreate, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    return ok(services.create_brand(db, payload), "Brand created")


@router.put("/brands/{brand_id}")
def update_brand(
    brand_id: int,
    payload: BrandUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    return ok(services.update_brand(db, brand_id, payload), "Brand updated")


@router.delete("/brands/{brand_id}")
def delete_brand(brand_id: int, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    services.delete_brand(db, brand_id)
    return ok(message="Brand deleted")


# Users

@router.get("/users")
def list_users(
    params: PageParams = Depends(page_params(default_limit=20)),
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    users, pagination = services.list_users(db, params)
    return ok({"users": users, "pagination": pagination})


@router.put("/users/{user_id}/status")
def update_user_status(
    user_id: int,
    payload: UserStatusUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    return ok(services.set_user_status(db, user_id, payload), "User status updated")


# Dictionaries

@router.get("/dictionaries")
def list_dictionaries(
    type_: Optional[str] = Query(None, alias="type"),
    params: PageParams = Depends(page_params(default_limit=20)),
    db: Session = Depends(get_db),
):
    entries, pagination = services.list_dictionaries(db, params, type_=type_)
    return ok({"dictionaries": entries, "pagination": pagination})


@router.get("/dictionaries/types")
def list_dictionary_types(db: Session = Depends(get_db)):
    return ok(services.list_types(db))


@router.post("/dictionaries")
def create_dictionary(payload: DictionaryCreate, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    return ok(services.create_dictionary(db, payload), "Dictionary entry created")


@router.put("/dictionaries/batch/sort")
def sort_dictionaries(payload: BatchSort, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    updated = services.batch_sort(db, payload)
    return ok({"updated": updated}, "Sort order updated")


@router.put("/dictionaries/{entry_id}")
def update_dictionary(
    entry_id: int,
    payload: DictionaryUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    return ok(services.update_dictionary(db, entry_id, payload), "Dictionary entry updated")


@router.delete("/dictionaries/{entry_id}")
def delete_dictionary(entry_id: int, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    services.delete_dictionary(db, entry_id)
    return ok(message="Dictionary entry deleted")


# Counters

@router.post("/counters/recompute")
def recompute_counters(db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    return ok(services.recompute_counters(db), "Counters recomputed")
