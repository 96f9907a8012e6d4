from .auth import AuthResult, LoginRequest, Principal, RegisterRequest, UserOut, UserStatusUpdate
from .brand import BrandCreate, BrandOut, BrandUpdate, BrandWithStoreCount
from .common import CamelModel, PageParams, Pagination, RegionFilter, RefOut, ok, page_params, region_filter
from .dictionary import BatchSort, DictionaryCreate, DictionaryOption, DictionaryOut, DictionaryUpdate
from .mall import BrandInMall, MallCreate, MallOut, MallRef, MallUpdate
from .map import CompareLocation, CompareQuery, NationalSummary, TreeProvince, TreeQuery, compare_query, tree_query
from .region import (
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
from .store import BrandStoreBulkCreate, BrandStoreOut, BrandStoreUpdate, BulkCreateResult

__all__ = [
    "AuthResult",
    "BatchSort",
    "BrandCreate",
    "BrandInMall",
    "BrandOut",
    "BrandStoreBulkCreate",
    "BrandStoreOut",
    "BrandStoreUpdate",
    "BrandUpdate",
    "BrandWithStoreCount",
    "BulkCreateResult",
    "CamelModel",
    "CityCreate",
    "CityOut",
    "CityUpdate",
    "CompareLocation",
    "CompareQuery",
    "DictionaryCreate",
    "DictionaryOption",
    "DictionaryOut",
    "DictionaryUpdate",
    "DistrictCreate",
    "DistrictOut",
    "DistrictUpdate",
    "LoginRequest",
    "MallCreate",
    "MallOut",
    "MallRef",
    "MallUpdate",
    "NationalSummary",
    "PageParams",
    "Pagination",
    "Principal",
    "ProvinceCreate",
    "ProvinceOut",
    "ProvinceUpdate",
    "RefOut",
    "RegionFilter",
    "RegisterRequest",
    "TreeProvince",
    "TreeQuery",
    "UserOut",
    "UserStatusUpdate",
    "compare_query",
    "ok",
    "page_params",
    "region_filter",
    "tree_query",
]
