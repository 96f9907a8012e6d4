from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, EmailStr, Field, field_validator

from .common import CamelModel, RefOut, blank_to_none


class _MallFields(CamelModel):
    code: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[AnyHttpUrl] = None
    district_id: Optional[int] = None
    address: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    opening_hours: Optional[str] = None

    @field_validator("code", "website", "contact_email", "district_id", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        return blank_to_none(value)


class MallCreate(_MallFields):
    name: str = Field(min_length=1)
    province_id: int
    city_id: int
    floor_count: int = Field(default=1, ge=0)
    total_area: float = Field(default=0, ge=0)
    parking_spaces: int = Field(default=0, ge=0)


class MallUpdate(_MallFields):
    name: Optional[str] = Field(default=None, min_length=1)
    province_id: Optional[int] = None
    city_id: Optional[int] = None
    floor_count: Optional[int] = Field(default=None, ge=0)
    total_area: Optional[float] = Field(default=None, ge=0)
    parking_spaces: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class MallOut(CamelModel):
    id: int
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    province_id: int
    city_id: int
    district_id: Optional[int] = None
    province: Optional[RefOut] = None
    city: Optional[RefOut] = None
    district: Optional[RefOut] = None
    address: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    floor_count: int = 1
    total_area: float = 0
    parking_spaces: int = 0
    opening_hours: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MallRef(CamelModel):
    id: int
    name: str
    address: Optional[str] = None


class BrandInMall(CamelModel):
    id: int
    name: str
    logo: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    sort: int = 0
    store_count: int = 0
