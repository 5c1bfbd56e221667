from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from category_map.errors import NotFoundError, QueryError
from category_map.schemas import PATH_SEPARATOR, Category, join_path, split_path

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Category rows with materialized paths.

    Serves as both the category lookup (``get``) and the descendant query
    (``find_ids_by_path_prefix``) for ``DataCategoryHashMap``.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def create_category(self, name: str, parent_id: int | None = None) -> Category:
        normalized_name = name.strip()
        if not normalized_name:
            raise ValueError("category name must not be empty")

        try:
            with self._connect() as conn:
                parent_path: str | None = None
                if parent_id is not None:
                    parent = conn.execute(
                        "SELECT path FROM categories WHERE id = ?",
                        (parent_id,),
                    ).fetchone()
                    if parent is None:
                        raise NotFoundError(
                            parent_id, f"Parent category id={parent_id} does not exist."
                        )
                    parent_path = parent["path"]

                cursor = conn.execute(
                    "INSERT INTO categories (parent_id, name) VALUES (?, ?)",
                    (parent_id, normalized_name),
                )
                category_id = int(cursor.lastrowid)
                path = join_path(parent_path, category_id)
                level = len(split_path(path)) - 1
                conn.execute(
                    "UPDATE categories SET path = ?, level = ? WHERE id = ?",
                    (path, level, category_id),
                )
        except sqlite3.Error as exc:
            raise QueryError(f"failed to create category name={normalized_name}") from exc

        logger.info("category created id=%s path=%s", category_id, path)
        return Category(
            id=category_id,
            parent_id=parent_id,
            name=normalized_name,
            path=path,
            level=level,
        )

    def upsert_category(self, category: Category) -> None:
        payload = (
            category.id,
            category.parent_id,
            category.name,
            category.path,
            category.level,
        )
        query = """
        INSERT INTO categories (id, parent_id, name, path, level)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            parent_id=excluded.parent_id,
            name=excluded.name,
            path=excluded.path,
            level=excluded.level,
            updated_at=CURRENT_TIMESTAMP
        """
        try:
            with self._connect() as conn:
                conn.execute(query, payload)
        except sqlite3.Error as exc:
            raise QueryError(f"failed to upsert category id={category.id}") from exc

    def get(self, category_id: int) -> Category:
        category = self.find(category_id)
        if category is None:
            raise NotFoundError(category_id)
        return category

    def find(self, category_id: int) -> Category | None:
        query = """
        SELECT id, parent_id, name, path, level
        FROM categories
        WHERE id = ?
        """
        try:
            with self._connect() as conn:
                row = conn.execute(query, (category_id,)).fetchone()
        except sqlite3.Error as exc:
            raise QueryError(f"failed to load category id={category_id}") from exc

        if row is None:
            return None
        return self._row_to_category(row)

    def find_ids_by_path_prefix(self, prefix: str) -> list[int]:
        normalized = prefix.strip().strip(PATH_SEPARATOR)
        if not normalized:
            raise ValueError("path prefix must not be empty")
        split_path(normalized)

        # "1/2" must not match "1/23", so match the path itself or "1/2/..."
        query = """
        SELECT id
        FROM categories
        WHERE path = ? OR path LIKE ?
        ORDER BY level ASC, id ASC
        """
        params = (normalized, f"{normalized}{PATH_SEPARATOR}%")
        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise QueryError(f"failed to query categories by path prefix={normalized}") from exc

        return [int(row["id"]) for row in rows]

    def list_categories(self) -> list[Category]:
        query = """
        SELECT id, parent_id, name, path, level
        FROM categories
        ORDER BY path ASC
        """
        try:
            with self._connect() as conn:
                rows = conn.execute(query).fetchall()
        except sqlite3.Error as exc:
            raise QueryError("failed to list categories") from exc

        return [self._row_to_category(row) for row in rows]

    def _init_schema(self) -> None:
        schema_path = Path(__file__).with_name("schema.sql")
        schema = schema_path.read_text(encoding="utf-8")
        with self._connect() as conn:
            conn.executescript(schema)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @staticmethod
    def _row_to_category(row: sqlite3.Row) -> Category:
        return Category(
            id=row["id"],
            parent_id=row["parent_id"],
            name=row["name"],
            path=row["path"],
            level=row["level"],
        )
