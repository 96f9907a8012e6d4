import logging
from typing import Optional

from sqlalchemy import and_, or_, select, update
from sqlalchemy.orm import Session

from ..errors import ConflictError, ValidationError
from ..models import Brand, BrandStore, City, District, Mall, Province
from ..schemas.region import (
    CityCreate,
    CityOut,
    CityUpdate,
    DistrictCreate,
    DistrictOut,
    DistrictUpdate,
    ProvinceCreate,
    ProvinceOut,
    ProvinceUpdate,
)
from .crud import apply_updates, commit_or_conflict, ensure_no_children, get_or_404

logger = logging.getLogger(__name__)


def _ensure_province_unique(db: Session, name: Optional[str], code: Optional[str], exclude_id: Optional[int] = None):
    conditions = []
    if name is not None:
        conditions.append(Province.name == name)
    if code is not None:
        conditions.append(Province.code == code)
    if not conditions:
        return
    query = select(Province.id).where(or_(*conditions))
    if exclude_id is not None:
        query = query.where(Province.id != exclude_id)
    if db.execute(query).first():
        raise ConflictError("Province name or code already exists")


def create_province(db: Session, payload: ProvinceCreate) -> ProvinceOut:
    _ensure_province_unique(db, payload.name, payload.code)
    province = Province(**payload.model_dump())
    db.add(province)
    commit_or_conflict(db, "Province name or code already exists")
    db.refresh(province)
    logger.info(f"Created province {province.id} {province.name}")
    return ProvinceOut.model_validate(province)


def update_province(db: Session, province_id: int, payload: ProvinceUpdate) -> ProvinceOut:
    province = get_or_404(db, Province, province_id, "Province")
    values = payload.model_dump(exclude_unset=True, exclude_none=True)
    _ensure_province_unique(db, values.get("name"), values.get("code"), exclude_id=province_id)
    apply_updates(province, values)
    commit_or_conflict(db, "Province name or code already exists")
    db.refresh(province)
    return ProvinceOut.model_validate(province)


def delete_province(db: Session, province_id: int) -> None:
    province = get_or_404(db, Province, province_id, "Province")
    ensure_no_children(
        db,
        "province",
        province_id,
        [
            ("cities", City.province_id),
            ("districts", District.province_id),
            ("malls", Mall.province_id),
            ("brands", Brand.province_id),
            ("brand stores", BrandStore.province_id),
        ],
    )
    db.delete(province)
    db.commit()
    logger.info(f"Deleted province {province_id}")


def _ensure_city_unique(db: Session, province_id: int, name: str, exclude_id: Optional[int] = None):
    query = select(City.id).where(and_(City.province_id == province_id, City.name == name))
    if exclude_id is not None:
        query = query.where(City.id != exclude_id)
    if db.execute(query).first():
        raise ConflictError("City already exists in this province")


def create_city(db: Session, payload: CityCreate) -> CityOut:
    get_or_404(db, Province, payload.province_id, "Province")
    _ensure_city_unique(db, payload.province_id, payload.name)
    city = City(**payload.model_dump())
    db.add(city)
    commit_or_conflict(db, "City already exists in this province")
    db.refresh(city)
    logger.info(f"Created city {city.id} {city.name}")
    return CityOut.model_validate(city)


def update_city(db: Session, city_id: int, payload: CityUpdate) -> CityOut:
    city = get_or_404(db, City, city_id, "City")
    values = payload.model_dump(exclude_unset=True, exclude_none=True)
    province_id = values.get("province_id", city.province_id)
    if "province_id" in values:
        get_or_404(db, Province, province_id, "Province")
    if "province_id" in values or "name" in values:
        _ensure_city_unique(db, province_id, values.get("name", city.name), exclude_id=city_id)
    moved = province_id != city.province_id
    apply_updates(city, values)
    if moved:
        # Rows anchored to the city follow it into the new province.
        for model in (District, Mall, Brand, BrandStore):
            db.execute(update(model).where(model.city_id == city_id).values(province_id=province_id))
    commit_or_conflict(db, "City already exists in this province")
    db.refresh(city)
    if moved:
        logger.info(f"Moved city {city_id} to province {province_id}")
    return CityOut.model_validate(city)


def delete_city(db: Session, city_id: int) -> None:
    city = get_or_404(db, City, city_id, "City")
    ensure_no_children(
        db,
        "city",
        city_id,
        [
            ("districts", District.city_id),
            ("malls", Mall.city_id),
            ("brands", Brand.city_id),
            ("brand stores", BrandStore.city_id),
        ],
    )
    db.delete(city)
    db.commit()
    logger.info(f"Deleted city {city_id}")


def _check_district_chain(db: Session, city_id: int, province_id: int) -> None:
    city = get_or_404(db, City, city_id, "City")
    get_or_404(db, Province, province_id, "Province")
    if city.province_id != province_id:
        raise ValidationError("District province must match the province of its city")


def _ensure_district_unique(db: Session, city_id: int, name: str, exclude_id: Optional[int] = None):
    query = select(District.id).where(and_(District.city_id == city_id, District.name == name))
    if exclude_id is not None:
        query = query.where(District.id != exclude_id)
    if db.execute(query).first():
        raise ConflictError("District already exists in this city")


def create_district(db: Session, payload: DistrictCreate) -> DistrictOut:
    _check_district_chain(db, payload.city_id, payload.province_id)
    _ensure_district_unique(db, payload.city_id, payload.name)
    district = District(**payload.model_dump())
    db.add(district)
    commit_or_conflict(db, "District already exists in this city")
    db.refresh(district)
    logger.info(f"Created district {district.id} {district.name}")
    return DistrictOut.model_validate(district)


def update_district(db: Session, district_id: int, payload: DistrictUpdate) -> DistrictOut:
    district = get_or_404(db, District, district_id, "District")
    values = payload.model_dump(exclude_unset=True, exclude_none=True)
    city_id = values.get("city_id", district.city_id)
    province_id = values.get("province_id", district.province_id)
    if "city_id" in values or "province_id" in values:
        _check_district_chain(db, city_id, province_id)
    if "city_id" in values or "name" in values:
        _ensure_district_unique(db, city_id, values.get("name", district.name), exclude_id=district_id)
    apply_updates(district, values)
    commit_or_conflict(db, "District already exists in this city")
    db.refresh(district)
    return DistrictOut.model_validate(district)


def delete_district(db: Session, district_id: int) -> None:
    district = get_or_404(db, District, district_id, "District")
    ensure_no_children(
        db,
        "district",
        district_id,
        [
            ("malls", Mall.district_id),
            ("brands", Brand.district_id),
            ("brand stores", BrandStore.district_id),
        ],
    )
    db.delete(district)
    db.commit()
    logger.info(f"Deleted district {district_id}")


def validate_location(
    db: Session,
    province_id: Optional[int],
    city_id: Optional[int],
    district_id: Optional[int],
) -> None:
    """Check that the given province/city/district ids exist and form one chain."""
    province = get_or_404(db, Province, province_id, "Province") if province_id is not None else None
    city = get_or_404(db, City, city_id, "City") if city_id is not None else None
    district = get_or_404(db, District, district_id, "District") if district_id is not None else None

    if city is not None and province is not None and city.province_id != province.id:
        raise ValidationError("City does not belong to the given province")
    if district is not None:
        if city is not None and district.city_id != city.id:
            raise ValidationError("District does not belong to the given city")
        if province is not None and district.province_id != province.id:
            raise ValidationError("District does not belong to the given province")
