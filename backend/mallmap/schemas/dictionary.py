from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import CamelModel


class DictionaryCreate(CamelModel):
    type: str = Field(min_length=1)
    label: str = Field(min_length=1)
    value: str = Field(min_length=1)
    sort: int = 0
    description: Optional[str] = None
    is_active: bool = True


class DictionaryUpdate(CamelModel):
    type: Optional[str] = Field(default=None, min_length=1)
    label: Optional[str] = Field(default=None, min_length=1)
    value: Optional[str] = Field(default=None, min_length=1)
    sort: Optional[int] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class DictionaryOut(CamelModel):
    id: int
    type: str
    label: str
    value: str
    sort: int = 0
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DictionaryOption(CamelModel):
    label: str
    value: str


class SortItem(CamelModel):
    id: int
    sort: int


class BatchSort(CamelModel):
    items: List[SortItem]
