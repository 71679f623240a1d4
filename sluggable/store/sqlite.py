# ABOUTME: SQLite-backed slug repository and table helpers.
# ABOUTME: Answers prefix lookups with LIKE queries and loads/saves rows as TableRow records.

import logging
import re
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sluggable.core.interfaces import RecordAccessor, SlugRow
from sluggable.store.records import MappingAccessor, TableRow

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_LENGTH = re.compile(r"\(\s*(\d+)\s*\)")


def _checked(name: str) -> str:
    """Return `name` if it is a plain SQL identifier, so it can be formatted into a query."""
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_connection(db_path: Path) -> sqlite3.Connection:
    """Get a connection to an existing database.

    Args:
        db_path: Path to the database file.

    Returns:
        SQLite connection.

    Raises:
        FileNotFoundError: If database doesn't exist.
    """
    if not db_path.exists():
        raise FileNotFoundError(f"Database not found: {db_path}")

    return sqlite3.connect(str(db_path))


def table_accessor(conn: sqlite3.Connection, table: str, id_column: str = "id") -> MappingAccessor:
    """Build a MappingAccessor from a table's schema.

    Column lengths come from declared types such as VARCHAR(64); columns
    without NOT NULL are nullable.

    Args:
        conn: SQLite connection.
        table: Table name.
        id_column: Identifier column.

    Returns:
        Accessor for rows of the table.

    Raises:
        ValueError: If the table does not exist.
    """
    columns = conn.execute(f"PRAGMA table_info('{_checked(table)}')").fetchall()
    if not columns:
        raise ValueError(f"Table not found: {table}")

    names = []
    lengths = {}
    nullable = []
    for _cid, name, declared_type, not_null, _default, _pk in columns:
        names.append(name)
        match = _LENGTH.search(declared_type or "")
        if match:
            lengths[name] = int(match.group(1))
        if not not_null:
            nullable.append(name)

    return MappingAccessor(names, id_field=id_column, lengths=lengths, nullable=nullable)


def load_rows(conn: sqlite3.Connection, table: str, where: str | None = None) -> list[TableRow]:
    """Load rows of a table as TableRow records.

    Args:
        conn: SQLite connection.
        table: Table name.
        where: Optional SQL condition, trusted input only.

    Returns:
        Rows in rowid order.
    """
    sql = f"SELECT * FROM {_checked(table)}"  # noqa: S608
    if where:
        sql += f" WHERE {where}"
    cursor = conn.execute(sql + " ORDER BY rowid")
    column_names = [desc[0] for desc in cursor.description]
    return [TableRow(dict(zip(column_names, row, strict=True))) for row in cursor.fetchall()]


def find_duplicate_slugs(
    conn: sqlite3.Connection,
    table: str,
    field: str,
    group_field: str | None = None,
) -> list[tuple[Any, ...]]:
    """List slug values held by more than one row.

    Args:
        conn: SQLite connection.
        table: Table name.
        field: Slug column.
        group_field: Optional uniqueness base column; duplicates are counted per group.

    Returns:
        Tuples of (slug, count) or (group, slug, count), ordered by slug.
    """
    columns = f"{_checked(group_field)}, {_checked(field)}" if group_field else _checked(field)
    sql = (
        f"SELECT {columns}, COUNT(*) FROM {_checked(table)} "  # noqa: S608
        f"WHERE {field} IS NOT NULL GROUP BY {columns} HAVING COUNT(*) > 1 ORDER BY {field}"
    )
    return [tuple(row) for row in conn.execute(sql).fetchall()]


class SqliteSlugRepository:
    """Slug repository over SQLite tables, one table per root record type.

    Rows whose soft-delete column is set are hidden from lookups unless
    filters are suspended. Tables without that column are never filtered.

    Args:
        conn: SQLite connection.
        tables: Root type name mapped to table name; unmapped names are used as-is.
        id_column: Identifier column of every table.
        soft_delete_column: Column marking a row as deleted when not NULL.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        tables: Mapping[str, str] | None = None,
        id_column: str = "id",
        soft_delete_column: str = "deleted_at",
    ) -> None:
        self.conn = conn
        self.tables = dict(tables or {})
        self.id_column = _checked(id_column)
        self.soft_delete_column = _checked(soft_delete_column)
        self._filters_enabled = True
        self._columns: dict[str, set[str]] = {}

    @property
    def filters_enabled(self) -> bool:
        """Whether soft-deleted rows are hidden from lookups."""
        return self._filters_enabled

    @contextmanager
    def suspend_filters(self) -> Iterator[None]:
        """Show soft-deleted rows for the duration of the block."""
        previous = self._filters_enabled
        self._filters_enabled = False
        try:
            yield
        finally:
            self._filters_enabled = previous

    def table_for(self, root_type: str) -> str:
        """Return the table holding records of a root type."""
        return _checked(self.tables.get(root_type, root_type))

    def find_by_prefix(
        self,
        root_type: str,
        field: str,
        prefix: str,
        group_field: str | None = None,
        group_value: Any = None,
        exclude_id: Any = None,
    ) -> list[SlugRow]:
        """Return stored slugs of `field` starting with `prefix`.

        SQLite's LIKE makes the prefix match case-insensitive for ASCII.
        """
        table = self.table_for(root_type)
        field = _checked(field)
        # Identifiers below are validated by _checked
        sql = f"SELECT {self.id_column}, {field} FROM {table} WHERE {field} LIKE ? ESCAPE '\\'"  # noqa: S608
        params: list[Any] = [_escape_like(prefix) + "%"]

        if group_field is not None:
            group_field = _checked(group_field)
            if group_value is None:
                sql += f" AND {group_field} IS NULL"
            else:
                sql += f" AND {group_field} = ?"
                params.append(group_value)

        if exclude_id is not None:
            sql += f" AND {self.id_column} != ?"
            params.append(exclude_id)

        if self._filters_enabled and self.soft_delete_column in self._table_columns(table):
            sql += f" AND {self.soft_delete_column} IS NULL"

        rows = self.conn.execute(sql, params).fetchall()
        logger.debug("Found %d stored slug(s) like '%s' in %s.%s", len(rows), prefix, table, field)
        return [SlugRow(id=row[0], slug=row[1]) for row in rows]

    def save(
        self,
        root_type: str,
        record: object,
        accessor: RecordAccessor,
        insert: bool | None = None,
        key: Any = None,
    ) -> Any:
        """Insert or update a record's row. Does not commit.

        Args:
            root_type: Root record type name.
            record: Record to save.
            accessor: Accessor for the record.
            insert: Whether the row is new. None inserts records without an identifier
                and updates the rest.
            key: Identifier the row is stored under, for updates that change the
                identifier column. Defaults to the record's current identifier.

        Returns:
            The record's identifier.

        Raises:
            ValueError: If an update matched no stored row.
        """
        table = self.table_for(root_type)
        known = self._table_columns(table)
        identifier = accessor.identifier(record)
        if insert is None:
            insert = identifier is None
        values = {
            _checked(name): accessor.get(record, name)
            for name in accessor.field_names()
            if name in known and not (accessor.is_identifier_field(name) and identifier is None)
        }

        if insert:
            columns = ", ".join(values)
            marks = ", ".join("?" for _ in values)
            cursor = self.conn.execute(
                f"INSERT INTO {table} ({columns}) VALUES ({marks})",  # noqa: S608
                list(values.values()),
            )
            if identifier is None:
                identifier = cursor.lastrowid
                accessor.set(record, self.id_column, identifier)
        else:
            stored_key = identifier if key is None else key
            set_clause = ", ".join(f"{name} = ?" for name in values)
            cursor = self.conn.execute(
                f"UPDATE {table} SET {set_clause} WHERE {self.id_column} = ?",  # noqa: S608
                [*values.values(), stored_key],
            )
            if cursor.rowcount == 0:
                raise ValueError(f"No row in {table} with {self.id_column} = {stored_key!r}")
        return identifier

    def _table_columns(self, table: str) -> set[str]:
        if table not in self._columns:
            rows = self.conn.execute(f"PRAGMA table_info('{table}')").fetchall()
            self._columns[table] = {row[1] for row in rows}
        return self._columns[table]
