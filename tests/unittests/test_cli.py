"""ABOUTME: Tests for the Typer CLI.
ABOUTME: Verifies the slug, backfill and duplicates commands."""

import sqlite3
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sluggable.cli import app

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """SQLite file with an articles table: two rows without slug, one with."""
    path = tmp_path / "articles.sqlite"
    conn = sqlite3.connect(str(path))
    conn.execute("CREATE TABLE articles (id INTEGER PRIMARY KEY, title TEXT NOT NULL, slug VARCHAR(32))")
    conn.executemany(
        "INSERT INTO articles (title, slug) VALUES (?, ?)",
        [("Hello World", None), ("Hello World", ""), ("Kept", "kept-slug")],
    )
    conn.commit()
    conn.close()
    return path


def _slugs(path: Path) -> list[str]:
    conn = sqlite3.connect(str(path))
    try:
        return [row[0] for row in conn.execute("SELECT slug FROM articles ORDER BY id").fetchall()]
    finally:
        conn.close()


class TestSlugCommand:
    """Tests for the slug command."""

    def test_default(self) -> None:
        """Text is printed as a slug."""
        result = runner.invoke(app, ["slug", "Hello World"])

        assert result.exit_code == 0
        assert result.output.strip() == "hello-world"

    def test_options(self) -> None:
        """Separator, style and length options are applied."""
        result = runner.invoke(app, ["slug", "Hello Big World", "-s", "_", "--style", "camel", "-l", "9"])

        assert result.exit_code == 0
        assert result.output.strip() == "Hello_Big"


class TestBackfillCommand:
    """Tests for the backfill command."""

    def test_fills_empty_slugs(self, db_path: Path) -> None:
        """Rows without a slug get unique slugs; existing slugs stay."""
        result = runner.invoke(
            app, ["backfill", str(db_path), "--table", "articles", "--field", "slug", "--source", "title"]
        )

        assert result.exit_code == 0, result.output
        assert "Updated 2 slug(s)" in result.output
        assert _slugs(db_path) == ["hello-world", "hello-world-1", "kept-slug"]

    def test_all_rows(self, db_path: Path) -> None:
        """--all regenerates existing slugs too."""
        result = runner.invoke(
            app,
            ["backfill", str(db_path), "-t", "articles", "-f", "slug", "--source", "title", "--all", "--no-unique"],
        )

        assert result.exit_code == 0, result.output
        assert _slugs(db_path) == ["hello-world", "hello-world", "kept"]

    def test_unknown_source_field(self, db_path: Path) -> None:
        """An unknown source column fails without touching the table."""
        result = runner.invoke(
            app, ["backfill", str(db_path), "--table", "articles", "--field", "slug", "--source", "headline"]
        )

        assert result.exit_code == 1
        assert "headline" in result.output
        assert _slugs(db_path) == [None, "", "kept-slug"]

    def test_missing_database(self, tmp_path: Path) -> None:
        """A missing database file exits with an error."""
        result = runner.invoke(
            app, ["backfill", str(tmp_path / "nope.sqlite"), "-t", "articles", "-f", "slug", "--source", "title"]
        )

        assert result.exit_code == 1
        assert "Database not found" in result.output


class TestDuplicatesCommand:
    """Tests for the duplicates command."""

    def test_no_duplicates(self, db_path: Path) -> None:
        """A table without repeated slugs exits cleanly."""
        result = runner.invoke(app, ["duplicates", str(db_path), "--table", "articles", "--field", "slug"])

        assert result.exit_code == 0
        assert "No duplicate slugs" in result.output

    def test_duplicates_listed(self, db_path: Path) -> None:
        """Repeated slugs are listed and the command exits with 1."""
        conn = sqlite3.connect(str(db_path))
        conn.execute("UPDATE articles SET slug = 'same'")
        conn.commit()
        conn.close()

        result = runner.invoke(app, ["duplicates", str(db_path), "--table", "articles", "--field", "slug"])

        assert result.exit_code == 1
        assert "same" in result.output
        assert "3" in result.output


class TestLogConfigOption:
    """Tests for the global --log-config option."""

    def test_missing_log_config(self, tmp_path: Path) -> None:
        """A missing logging config exits with an error."""
        result = runner.invoke(app, ["--log-config", str(tmp_path / "none.yml"), "slug", "x"])

        assert result.exit_code == 1
        assert "Logging config not found" in result.output
