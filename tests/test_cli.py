from __future__ import annotations

import json

from typer.testing import CliRunner

from category_map.cli import app
from category_map.storage import CategoryRepository


def _seed(db_path) -> dict[str, int]:
    repo = CategoryRepository(db_path)
    root = repo.create_category("Root")
    apparel = repo.create_category("Apparel", parent_id=root.id)
    shirts = repo.create_category("Shirts", parent_id=apparel.id)
    return {"root": root.id, "apparel": apparel.id, "shirts": shirts.id}


def test_cli_add_and_list_categories(tmp_path) -> None:
    runner = CliRunner()
    db_path = tmp_path / "storage.db"

    root = runner.invoke(app, ["add-category", "--name", "Root", "--db-path", str(db_path)])
    child = runner.invoke(
        app,
        ["add-category", "--name", "Child", "--parent-id", "1", "--db-path", str(db_path)],
    )
    listing = runner.invoke(app, ["list-categories", "--db-path", str(db_path)])

    assert root.exit_code == 0
    assert "id=1 path=1" in root.output
    assert child.exit_code == 0
    assert "id=2 path=1/2" in child.output
    assert listing.exit_code == 0
    assert "Child" in listing.output
    assert "1/2" in listing.output


def test_cli_add_category_unknown_parent_fails(tmp_path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "add-category",
            "--name",
            "Orphan",
            "--parent-id",
            "9",
            "--db-path",
            str(tmp_path / "storage.db"),
        ],
    )

    assert result.exit_code == 1


def test_cli_descendants_json(tmp_path) -> None:
    runner = CliRunner()
    db_path = tmp_path / "storage.db"
    ids = _seed(db_path)

    result = runner.invoke(
        app,
        ["descendants", str(ids["apparel"]), "--db-path", str(db_path), "--json"],
    )

    assert result.exit_code == 0
    assert set(json.loads(result.stdout)) == {ids["apparel"], ids["shirts"]}


def test_cli_descendants_unknown_category_fails(tmp_path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["descendants", "404", "--db-path", str(tmp_path / "storage.db")])

    assert result.exit_code == 1


def test_cli_warm_reports_missing_ids(tmp_path) -> None:
    runner = CliRunner()
    db_path = tmp_path / "storage.db"
    ids = _seed(db_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "storage:\n"
        f"  db_path: {db_path}\n"
        "cache:\n"
        f"  warm_category_ids: [{ids['root']}, {ids['shirts']}, 404]\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["warm", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "warmed=2 missing=1" in result.output


def test_cli_debug_storage_smoke(tmp_path) -> None:
    runner = CliRunner()
    db_path = tmp_path / "storage.db"

    result = runner.invoke(app, ["debug", "storage", "--db-path", str(db_path)])

    assert result.exit_code == 0
    assert "storage ok" in result.output
    assert db_path.exists()
