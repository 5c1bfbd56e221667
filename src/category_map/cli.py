from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from category_map import load_config
from category_map.errors import CategoryMapError, NotFoundError
from category_map.hashmap import DataCategoryHashMap, HashMapPool
from category_map.schemas import Category
from category_map.storage import CategoryRepository

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

CATEGORY_MAP_NAME = "category"

app = typer.Typer(help="Category Map CLI")
debug_app = typer.Typer(help="Debug commands")
app.add_typer(debug_app, name="debug")


def build_hash_map_pool(repo: CategoryRepository) -> HashMapPool:
    """Wire the category hash map to its repository-backed collaborators."""
    category_map = DataCategoryHashMap(category_lookup=repo, descendant_query=repo)
    return HashMapPool({CATEGORY_MAP_NAME: category_map})


@app.command("add-category")
def add_category(
    name: str = typer.Option(..., "--name", "-n", help="Category name."),
    parent_id: int | None = typer.Option(
        None,
        "--parent-id",
        help="Parent category id. Omit to create a root category.",
        min=1,
    ),
    db_path: Path = typer.Option(
        Path("data/storage/categories.db"),
        "--db-path",
        help="SQLite DB file path.",
    ),
) -> None:
    """Create a category under an optional parent."""
    repo = CategoryRepository(db_path)
    try:
        category = repo.create_category(name, parent_id=parent_id)
    except (CategoryMapError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"id={category.id} path={category.path}")


@app.command("list-categories")
def list_categories(
    db_path: Path = typer.Option(
        Path("data/storage/categories.db"),
        "--db-path",
        help="SQLite DB file path.",
    ),
) -> None:
    """Print every category ordered by path."""
    repo = CategoryRepository(db_path)
    try:
        categories = repo.list_categories()
    except CategoryMapError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(_render_category_table(categories))


@app.command("descendants")
def descendants(
    category_id: int = typer.Argument(..., help="Category id to expand.", min=1),
    db_path: Path = typer.Option(
        Path("data/storage/categories.db"),
        "--db-path",
        help="SQLite DB file path.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print ids as a JSON array.",
    ),
) -> None:
    """Print the category id and all of its descendant ids."""
    repo = CategoryRepository(db_path)
    category_map = build_hash_map_pool(repo).get_data_map(CATEGORY_MAP_NAME)
    try:
        children_ids = category_map.get_all_data(category_id)
    except CategoryMapError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(children_ids))
        return
    for child_id in children_ids:
        typer.echo(str(child_id))


@app.command("warm")
def warm(
    config_path: Path = typer.Option(
        Path("config/config.example.yaml"),
        "--config",
        help="Config file path.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    db_path: Path | None = typer.Option(
        None,
        "--db-path",
        help="SQLite DB file path. Defaults to storage.db_path from config.",
    ),
) -> None:
    """Precompute descendant ids for cache.warm_category_ids."""
    try:
        config = load_config(config_path)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    logging.getLogger().setLevel(config.logging.level_number)

    repo = CategoryRepository(db_path or Path(config.storage.db_path))
    category_map = build_hash_map_pool(repo).get_data_map(CATEGORY_MAP_NAME)

    warmed = 0
    missing = 0
    for category_id in config.cache.warm_category_ids:
        try:
            category_map.get_all_data(category_id)
        except NotFoundError:
            logging.warning("warm skipped unknown category_id=%s", category_id)
            missing += 1
            continue
        except CategoryMapError as exc:
            logging.exception("warm failed category_id=%s", category_id)
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
        warmed += 1

    typer.echo(f"warmed={warmed} missing={missing}")


@debug_app.command("storage")
def debug_storage(
    db_path: Path = typer.Option(
        Path("data/storage/categories.db"),
        "--db-path",
        help="SQLite DB file path.",
    ),
) -> None:
    """Run storage smoke test."""
    repo = CategoryRepository(db_path)
    pool = build_hash_map_pool(repo)
    category_map = pool.get_data_map(CATEGORY_MAP_NAME)

    root = repo.create_category("debug root")
    child = repo.create_category("debug child", parent_id=root.id)

    first = category_map.get_all_data(root.id)
    pool.reset_all(root.id)
    second = category_map.get_all_data(root.id)

    if set(first) != {root.id, child.id} or first != second:
        typer.echo("storage smoke test failed", err=True)
        raise typer.Exit(code=1)

    typer.echo("storage ok")


def _render_category_table(categories: list[Category]) -> str:
    if not categories:
        return "no categories found"

    headers = ("id", "path", "name")
    rows = [
        (str(category.id), category.path, _truncate(category.name, limit=60))
        for category in categories
    ]

    widths = [
        max(len(headers[column]), *(len(row[column]) for row in rows))
        for column in range(len(headers))
    ]

    def _line(values: tuple[str, str, str]) -> str:
        return " | ".join(
            value.ljust(widths[index]) for index, value in enumerate(values)
        )

    divider = "-+-".join("-" * width for width in widths)
    body = [_line(headers), divider]
    body.extend(_line(row) for row in rows)
    return "\n".join(body)


def _truncate(text: str, *, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[: limit - 3]}..."


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
