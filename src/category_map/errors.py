from __future__ import annotations


class CategoryMapError(Exception):
    """Base error for category map operations."""


class NotFoundError(CategoryMapError, LookupError):
    def __init__(self, category_id: int, message: str | None = None) -> None:
        self.category_id = category_id
        super().__init__(message or f"Category id={category_id} does not exist.")


class QueryError(CategoryMapError):
    """Raised when the underlying data access fails."""
