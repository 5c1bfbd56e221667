"""SQLite category storage."""

from .repo import CategoryRepository

__all__ = ["CategoryRepository"]
