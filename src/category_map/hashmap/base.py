from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Protocol

from category_map.schemas import Category


class CategoryLookup(Protocol):
    def get(self, category_id: int) -> Category:
        """Return the category or raise NotFoundError."""


class DescendantQuery(Protocol):
    def find_ids_by_path_prefix(self, prefix: str) -> Sequence[int]:
        """Return ids of categories whose path starts with prefix."""


class HashMap(Protocol):
    def get_all_data(self, category_id: int) -> list[int]:
        """Return every value held for category_id."""

    def get_data(self, category_id: int, key: Hashable) -> list[int]:
        """Return a one-element list with the id in slot key, or an empty list."""

    def reset_data(self, category_id: int) -> None:
        """Drop any value held for category_id."""
