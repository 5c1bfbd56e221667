"""Memoized category id maps."""

from .base import CategoryLookup, DescendantQuery, HashMap
from .category import DataCategoryHashMap
from .pool import HashMapPool

__all__ = [
    "CategoryLookup",
    "DataCategoryHashMap",
    "DescendantQuery",
    "HashMap",
    "HashMapPool",
]
