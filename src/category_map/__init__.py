"""Category descendant map package."""

from .config import AppConfig, load_config
from .errors import CategoryMapError, NotFoundError, QueryError
from .hashmap import DataCategoryHashMap, HashMapPool
from .schemas import Category

__all__ = [
    "AppConfig",
    "Category",
    "CategoryMapError",
    "DataCategoryHashMap",
    "HashMapPool",
    "NotFoundError",
    "QueryError",
    "load_config",
]
