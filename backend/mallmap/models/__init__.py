from .brand import Brand
from .dictionary import Dictionary
from .mall import Mall
from .region import City, District, Province
from .store import BrandStore
from .user import User

__all__ = ["Brand", "BrandStore", "City", "Dictionary", "District", "Mall", "Province", "User"]
