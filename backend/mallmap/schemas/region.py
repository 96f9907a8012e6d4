from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel, RefOut


class ProvinceCreate(CamelModel):
    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    brand_count: int = 0
    mall_count: int = 0
    district_count: int = 0


class ProvinceUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = Field(default=None, min_length=1)
    brand_count: Optional[int] = None
    mall_count: Optional[int] = None
    district_count: Optional[int] = None
    is_active: Optional[bool] = None


class ProvinceOut(CamelModel):
    id: int
    name: str
    code: str
    brand_count: int = 0
    mall_count: int = 0
    district_count: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CityCreate(CamelModel):
    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    province_id: int
    brand_count: int = 0
    mall_count: int = 0
    district_count: int = 0


class CityUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = Field(default=None, min_length=1)
    province_id: Optional[int] = None
    brand_count: Optional[int] = None
    mall_count: Optional[int] = None
    district_count: Optional[int] = None
    is_active: Optional[bool] = None


class CityOut(CamelModel):
    id: int
    name: str
    code: str
    province_id: int
    province: Optional[RefOut] = None
    brand_count: int = 0
    mall_count: int = 0
    district_count: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DistrictCreate(CamelModel):
    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    city_id: int
    province_id: int
    brand_count: int = 0
    mall_count: int = 0


class DistrictUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = Field(default=None, min_length=1)
    city_id: Optional[int] = None
    province_id: Optional[int] = None
    brand_count: Optional[int] = None
    mall_count: Optional[int] = None
    is_active: Optional[bool] = None


class DistrictOut(CamelModel):
    id: int
    name: str
    code: str
    city_id: int
    province_id: int
    city: Optional[RefOut] = None
    province: Optional[RefOut] = None
    brand_count: int = 0
    mall_count: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
