from .auth_service import get_user, login, register
from .brand_service import create_brand, delete_brand, list_brands, update_brand
from .compare_service import compare_locations, store_score
from .counter_service import recompute_counters
from .dictionary_service import (
    batch_sort,
    create_dictionary,
    delete_dictionary,
    list_dictionaries,
    list_types,
    lookup,
    update_dictionary,
)
from .mall_service import create_mall, delete_mall, list_mall_brands, list_malls, update_mall
from .map_service import (
    get_city_detail,
    get_national_summary,
    get_province_detail,
    get_region_detail,
    get_statistics,
    list_cities,
    list_districts,
    list_provinces,
)
from .region_service import (
    create_city,
    create_district,
    create_province,
    delete_city,
    delete_district,
    delete_province,
    update_city,
    update_district,
    update_province,
)
from .store_service import create_brand_stores, delete_brand_store, list_brand_stores, update_brand_store
from .tree_service import build_tree
from .upload_service import delete_image, save_image
from .user_service import list_users, set_user_status

__all__ = [
    "batch_sort",
    "build_tree",
    "compare_locations",
    "create_brand",
    "create_brand_stores",
    "create_city",
    "create_dictionary",
    "create_district",
    "create_mall",
    "create_province",
    "delete_brand",
    "delete_brand_store",
    "delete_city",
    "delete_dictionary",
    "delete_district",
    "delete_image",
    "delete_mall",
    "delete_province",
    "get_city_detail",
    "get_national_summary",
    "get_province_detail",
    "get_region_detail",
    "get_statistics",
    "get_user",
    "list_brand_stores",
    "list_brands",
    "list_cities",
    "list_dictionaries",
    "list_districts",
    "list_mall_brands",
    "list_malls",
    "list_provinces",
    "list_types",
    "list_users",
    "login",
    "lookup",
    "recompute_counters",
    "register",
    "save_image",
    "set_user_status",
    "store_score",
    "update_brand",
    "update_brand_store",
    "update_city",
    "update_dictionary",
    "update_district",
    "update_mall",
    "update_province",
]
