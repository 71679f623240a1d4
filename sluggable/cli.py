"""ABOUTME: CLI entry point for sluggable commands.
ABOUTME: Provides slug, backfill and duplicates commands via Typer."""

import sqlite3
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from sluggable.core import MetadataRegistry, SluggableListener
from sluggable.errors import SluggableError
from sluggable.logs import init_logging
from sluggable.settings import settings
from sluggable.store import (
    SqliteSlugRepository,
    TableRow,
    UnitOfWork,
    find_duplicate_slugs,
    load_rows,
    table_accessor,
)
from sluggable.store.sqlite import get_connection
from sluggable.text import SlugStyle, normalize_slug

app = typer.Typer(
    name="sluggable",
    help="Derive readable, collision-free slugs from record fields.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    log_config: Path | None = typer.Option(None, "--log-config", help="Logging configuration YAML file"),
) -> None:
    """Configure logging before running a command."""
    if log_config is not None:
        try:
            init_logging(log_config)
        except FileNotFoundError as e:
            console.print(f"[red]Error:[/] {e}")
            raise typer.Exit(1) from None


@app.command()
def slug(
    text: str = typer.Argument(..., help="Text to turn into a slug"),
    separator: str = typer.Option(settings.DEFAULT_SEPARATOR, "--separator", "-s", help="Word separator"),
    style: SlugStyle = typer.Option(SlugStyle.NONE, "--style", help="Casing style"),
    max_length: int | None = typer.Option(None, "--max-length", "-l", min=1, help="Maximum slug length"),
) -> None:
    """Print the normalized slug for TEXT."""
    result = normalize_slug(text, separator=separator, style=style, max_length=max_length)
    console.print(result, highlight=False, markup=False)


@app.command()
def backfill(
    db_path: Path = typer.Argument(..., help="SQLite database file"),
    table: str = typer.Option(..., "--table", "-t", help="Table holding the records"),
    field: str = typer.Option(..., "--field", "-f", help="Slug column"),
    sources: list[str] = typer.Option(..., "--source", help="Source column, repeat for several"),
    separator: str = typer.Option(settings.DEFAULT_SEPARATOR, "--separator", "-s", help="Word separator"),
    style: SlugStyle = typer.Option(SlugStyle.NONE, "--style", help="Casing style"),
    unique: bool = typer.Option(True, "--unique/--no-unique", help="Disambiguate colliding slugs"),
    unique_base: str | None = typer.Option(None, "--unique-base", help="Column partitioning uniqueness"),
    max_length: int | None = typer.Option(None, "--max-length", "-l", min=1, help="Override the column length"),
    id_column: str = typer.Option("id", "--id-column", help="Identifier column"),
    all_rows: bool = typer.Option(False, "--all", help="Regenerate every slug, not only empty ones"),
) -> None:
    """Generate slugs for rows of a SQLite table and write them back."""
    try:
        conn = get_connection(db_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None

    try:
        accessor = table_accessor(conn, table, id_column)
        options: dict[str, object] = {
            "fields": sources,
            "separator": separator,
            "style": style,
            "unique": unique,
            "unique_base": unique_base,
        }
        if max_length is not None:
            options["max_length"] = max_length

        registry = MetadataRegistry()
        registry.register(TableRow, accessor, {field: options}, root_type=table)
        repository = SqliteSlugRepository(conn, id_column=id_column)
        uow = UnitOfWork(registry, repository, [SluggableListener(registry, repository)])

        where = None if all_rows else f"{field} IS NULL OR {field} = ''"
        for row in load_rows(conn, table, where):
            uow.track(row)
            # Any change that leaves the slug field empty forces regeneration
            accessor.set(row, field, "" if accessor.get(row, field) is None else None)

        results = uow.flush()
        conn.commit()
    except (SluggableError, sqlite3.Error, ValueError) as e:
        conn.rollback()
        console.print(f"[red]Backfill failed:[/] {e}")
        raise typer.Exit(1) from None
    finally:
        conn.close()

    result_table = Table("id", "old", "new")
    for result in results:
        result_table.add_row(str(accessor.identifier(result.record)), str(result.old_value), str(result.value))
    console.print(result_table)
    console.print(f"[green]Updated {len(results)} slug(s) in {table}.{field}[/]")


@app.command()
def duplicates(
    db_path: Path = typer.Argument(..., help="SQLite database file"),
    table: str = typer.Option(..., "--table", "-t", help="Table holding the records"),
    field: str = typer.Option(..., "--field", "-f", help="Slug column"),
    unique_base: str | None = typer.Option(None, "--unique-base", help="Column partitioning uniqueness"),
) -> None:
    """List slugs held by more than one row. Exits with 1 if any are found."""
    try:
        conn = get_connection(db_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None

    try:
        rows = find_duplicate_slugs(conn, table, field, unique_base)
    except (sqlite3.Error, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None
    finally:
        conn.close()

    if not rows:
        console.print("[green]No duplicate slugs.[/]")
        return

    headers = [unique_base, field, "count"] if unique_base else [field, "count"]
    result_table = Table(*headers)
    for row in rows:
        result_table.add_row(*(str(value) for value in row))
    console.print(result_table)
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
