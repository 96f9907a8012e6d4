from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AnyHttpUrl, EmailStr, Field, field_validator

from .common import CamelModel, RefOut, blank_to_none


class _BrandFields(CamelModel):
    code: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[AnyHttpUrl] = None
    category: Optional[str] = None
    province_id: Optional[int] = None
    city_id: Optional[int] = None
    district_id: Optional[int] = None
    address: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    sort: Optional[int] = None
    score: Optional[float] = None

    @field_validator("code", "website", "contact_email", "province_id", "city_id", "district_id", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        return blank_to_none(value)


class BrandCreate(_BrandFields):
    name: str = Field(min_length=1)


class BrandUpdate(_BrandFields):
    name: Optional[str] = Field(default=None, min_length=1)
    is_active: Optional[bool] = None


class BrandOut(CamelModel):
    id: int
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = None
    category: Optional[str] = None
    province_id: Optional[int] = None
    city_id: Optional[int] = None
    district_id: Optional[int] = None
    province: Optional[RefOut] = None
    city: Optional[RefOut] = None
    district: Optional[RefOut] = None
    address: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    sort: int = 0
    score: Optional[float] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BrandWithStoreCount(BrandOut):
    store_count: int = 0
