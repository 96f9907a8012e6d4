from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from fastapi import Query
from pydantic import BaseModel, Field

from ..errors import ValidationError
from .common import CamelModel, RefOut, parse_id_list


class ProvinceSummary(CamelModel):
    id: int
    name: str
    code: str
    brand_count: int = 0
    mall_count: int = 0
    district_count: int = 0


class NationalSummary(CamelModel):
    total_provinces: int
    total_brands: int
    total_malls: int
    total_districts: int
    provinces: List[ProvinceSummary]


class RegionStats(CamelModel):
    mall_count: int = 0
    brand_count: int = 0
    store_count: int = 0


class TreeBrand(CamelModel):
    id: int
    name: str
    code: Optional[str] = None


class TreeMall(CamelModel):
    id: int
    name: str
    code: Optional[str] = None
    brands: List[TreeBrand] = Field(default_factory=list)


class TreeDistrict(RegionStats):
    id: int
    name: str
    code: str
    malls: List[TreeMall] = Field(default_factory=list)


class TreeCity(RegionStats):
    id: int
    name: str
    code: str
    districts: Optional[List[TreeDistrict]] = None
    malls: Optional[List[TreeMall]] = None


class TreeProvince(RegionStats):
    id: int
    name: str
    code: str
    cities: Optional[List[TreeCity]] = None


class TreeQuery(BaseModel):
    level: int = 3
    province_id: Optional[int] = None
    city_id: Optional[int] = None
    district_id: Optional[int] = None
    brand_id: Optional[int] = None
    search: Optional[str] = None


def tree_query(
    level: int = Query(3, ge=1, le=3, description="1=省 2=省市 3=省市区+商场品牌"),
    province_id: Optional[int] = Query(None, alias="provinceId"),
    city_id: Optional[int] = Query(None, alias="cityId"),
    district_id: Optional[int] = Query(None, alias="districtId"),
    brand_id: Optional[int] = Query(None, alias="brandId"),
    search: Optional[str] = Query(None, description="品牌名称模糊搜索"),
) -> TreeQuery:
    return TreeQuery(
        level=level,
        province_id=province_id,
        city_id=city_id,
        district_id=district_id,
        brand_id=brand_id,
        search=search.strip() if search and search.strip() else None,
    )


class DetailBrand(CamelModel):
    id: int
    name: str
    code: Optional[str] = None
    category: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None


class DetailMall(CamelModel):
    id: int
    name: str
    code: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None


class DetailStore(CamelModel):
    id: int
    is_active: bool
    store_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    opening_hours: Optional[str] = None
    floor: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    brand: DetailBrand
    mall: DetailMall
    province: Optional[RefOut] = None
    city: Optional[RefOut] = None
    district: Optional[RefOut] = None


class CompareQuery(BaseModel):
    type: Literal["mall", "city"]
    ids: List[int]
    brand_ids: List[int] = Field(default_factory=list)


def compare_query(
    type: Literal["mall", "city"] = Query("mall", description="mall 或 city"),
    ids: str = Query(..., description="商场或城市ID，逗号分隔"),
    brand_ids: Optional[str] = Query(None, alias="brandIds", description="品牌ID过滤，逗号分隔"),
) -> CompareQuery:
    location_ids = parse_id_list(ids, field="ids")
    if not location_ids:
        raise ValidationError("ids must contain at least one id")
    return CompareQuery(type=type, ids=location_ids, brand_ids=parse_id_list(brand_ids, field="brandIds"))


class CompareBrand(CamelModel):
    brand_id: int
    name: str
    category: Optional[str] = None
    store_count: int = 0
    average_score: float = 0


class CompareLocation(CamelModel):
    id: int
    name: str
    type: str
    rank: int = 0
    store_count: int = 0
    brand_count: int = 0
    total_score: float = 0
    average_score: float = 0
    brands: List[CompareBrand] = Field(default_factory=list)
