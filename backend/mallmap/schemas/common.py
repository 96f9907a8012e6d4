from __future__ import annotations

import math
from typing import Any, Callable, List, Optional

from fastapi import Query
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import Select

from ..errors import ValidationError, envelope


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class RefOut(CamelModel):
    id: int
    name: str
    code: Optional[str] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = math.ceil(total / limit) if limit > 0 else 1
        return cls(page=page, limit=limit, total=total, pages=pages)


class PageParams(BaseModel):
    page: int = 1
    limit: int = 0
    search: Optional[str] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def apply(self, query: Select) -> Select:
        """Apply offset/limit; a limit of 0 means no limit."""
        if self.limit > 0:
            query = query.offset(self.offset).limit(self.limit)
        return query

    def pagination(self, total: int) -> Pagination:
        return Pagination.build(self.page, self.limit, total)


def page_params(default_limit: int = 0) -> Callable[..., PageParams]:
    def dependency(
        page: int = Query(1, ge=1),
        limit: int = Query(default_limit, ge=0, description="0 表示不分页"),
        search: Optional[str] = Query(None, description="名称模糊搜索"),
    ) -> PageParams:
        return PageParams(page=page, limit=limit, search=search.strip() if search and search.strip() else None)

    return dependency


class RegionFilter(BaseModel):
    province_id: Optional[int] = None
    city_id: Optional[int] = None
    district_id: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.province_id is None and self.city_id is None and self.district_id is None


def region_filter(
    province_id: Optional[int] = Query(None, alias="provinceId"),
    city_id: Optional[int] = Query(None, alias="cityId"),
    district_id: Optional[int] = Query(None, alias="districtId"),
) -> RegionFilter:
    return RegionFilter(province_id=province_id, city_id=city_id, district_id=district_id)


def parse_id_list(raw: Any, field: str = "ids") -> List[int]:
    """Turn ``"1, 2,2"`` or ``[1, 2]`` into a de-duplicated list of ints, keeping order."""
    if raw is None:
        return []
    if isinstance(raw, str):
        items = [part.strip() for part in raw.split(",") if part.strip()]
    elif isinstance(raw, (list, tuple)):
        items = list(raw)
    else:
        items = [raw]

    ids: List[int] = []
    for item in items:
        try:
            value = int(item)
        except (TypeError, ValueError):
            raise ValidationError(f"{field} contains an invalid id: {item!r}")
        if value not in ids:
            ids.append(value)
    return ids


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def ok(data: Any = None, message: Optional[str] = None) -> dict:
    return envelope(True, message, data=jsonable_encoder(data, by_alias=True) if data is not None else None)
