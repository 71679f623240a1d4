"""ABOUTME: Bundled collaborators for the slug core.
ABOUTME: Record accessors, an in-memory unit of work/store and a SQLite repository."""

from sluggable.store.memory import InMemorySlugRepository
from sluggable.store.records import AttributeAccessor, MappingAccessor, TableRow
from sluggable.store.sqlite import SqliteSlugRepository, find_duplicate_slugs, load_rows, table_accessor
from sluggable.store.unit_of_work import UnitOfWork

__all__ = [
    "AttributeAccessor",
    "InMemorySlugRepository",
    "MappingAccessor",
    "SqliteSlugRepository",
    "TableRow",
    "UnitOfWork",
    "find_duplicate_slugs",
    "load_rows",
    "table_accessor",
]
