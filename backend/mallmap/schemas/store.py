from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..errors import ValidationError
from .common import CamelModel, RefOut, blank_to_none, parse_id_list
from .mall import MallRef


class _StoreFields(CamelModel):
    store_name: Optional[str] = None
    store_address: Optional[str] = None
    floor: Optional[str] = None
    unit_number: Optional[str] = None
    opening_hours: Optional[str] = None
    phone: Optional[str] = None
    score: Optional[float] = None


class BrandStoreBulkCreate(_StoreFields):
    """One brand placed into many malls; ``mallIds`` may be a list or ``"1,2,3"``."""

    brand_id: int
    mall_ids: List[int] = Field(default_factory=list)
    is_ola: bool = False
    is_active: bool = True

    @field_validator("mall_ids", mode="before")
    @classmethod
    def _parse_mall_ids(cls, value):
        try:
            return parse_id_list(value, field="mallIds")
        except ValidationError as exc:
            raise ValueError(exc.message)


class BrandStoreUpdate(_StoreFields):
    brand_id: Optional[int] = None
    mall_id: Optional[int] = None
    province_id: Optional[int] = None
    city_id: Optional[int] = None
    district_id: Optional[int] = None
    is_ola: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("district_id", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        return blank_to_none(value)


class BrandStoreOut(CamelModel):
    id: int
    brand_id: int
    mall_id: int
    province_id: Optional[int] = None
    city_id: Optional[int] = None
    district_id: Optional[int] = None
    brand: Optional[RefOut] = None
    mall: Optional[MallRef] = None
    province: Optional[RefOut] = None
    city: Optional[RefOut] = None
    district: Optional[RefOut] = None
    store_name: Optional[str] = None
    store_address: Optional[str] = None
    floor: Optional[str] = None
    unit_number: Optional[str] = None
    opening_hours: Optional[str] = None
    phone: Optional[str] = None
    score: Optional[float] = None
    is_ola: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MallInfo(CamelModel):
    name: str
    address: Optional[str] = None
    province: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None


class CreatedBrandStore(BrandStoreOut):
    mall_info: MallInfo


class BulkCreateResult(CamelModel):
    created: List[CreatedBrandStore] = Field(default_factory=list)
    skipped: int = 0
    skipped_malls: List[str] = Field(default_factory=list)
    failed: List[int] = Field(default_factory=list)
    total: int = 0
    existing_stores: List[BrandStoreOut] = Field(default_factory=list)
