# ABOUTME: In-memory record store that answers slug prefix lookups.
# ABOUTME: Keeps committed field values per root type and hides soft-deleted rows unless filters are suspended.

import itertools
import logging
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sluggable.core.interfaces import RecordAccessor, SlugRow

logger = logging.getLogger(__name__)


class InMemorySlugRepository:
    """Stores committed record values and serves `find_by_prefix` over them.

    Values are copied when a record is saved, so edits made to a live record
    during a batch are not visible until the next save.

    Args:
        soft_delete_field: Field marking a row as deleted when not None.
    """

    def __init__(self, soft_delete_field: str = "deleted_at") -> None:
        self.soft_delete_field = soft_delete_field
        self._rows: defaultdict[str, dict[Any, dict[str, Any]]] = defaultdict(dict)
        self._ids = itertools.count(1)
        self._filters_enabled = True

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

    def save(
        self,
        root_type: str,
        record: object,
        accessor: RecordAccessor,
        insert: bool | None = None,
        key: Any = None,
    ) -> Any:
        """Store a copy of the record's values, assigning an identifier if it has none.

        Args:
            root_type: Root record type name.
            record: Record to save.
            accessor: Accessor for the record.
            insert: Whether the record is new. Only affects identifier renames.
            key: Identifier the record is stored under, when an update changed it.

        Returns:
            The record's identifier.
        """
        identifier = accessor.identifier(record)
        if identifier is None:
            identifier = next(self._ids)
            id_field = next(name for name in accessor.field_names() if accessor.is_identifier_field(name))
            accessor.set(record, id_field, identifier)

        if not insert and key is not None and key != identifier:
            self._rows[root_type].pop(key, None)
        self._rows[root_type][identifier] = {name: accessor.get(record, name) for name in accessor.field_names()}
        return identifier

    def rows(self, root_type: str) -> list[dict[str, Any]]:
        """Return copies of the stored rows of a root type."""
        return [dict(values) for values in self._rows[root_type].values()]

    def find_by_prefix(
        self,
        root_type: str,
        field: str,
        prefix: str,
        group_field: str | None = None,
        group_value: Any = None,
        exclude_id: Any = None,
    ) -> list[SlugRow]:
        """Return stored slugs of `field` starting with `prefix`, case-insensitive."""
        lowered = prefix.lower()
        found = []
        for identifier, values in self._rows[root_type].items():
            if self._filters_enabled and values.get(self.soft_delete_field) is not None:
                continue
            if exclude_id is not None and identifier == exclude_id:
                continue
            if group_field is not None and values.get(group_field) != group_value:
                continue
            slug = values.get(field)
            if isinstance(slug, str) and slug.lower().startswith(lowered):
                found.append(SlugRow(id=identifier, slug=slug))

        logger.debug("Found %d stored slug(s) like '%s' in %s.%s", len(found), prefix, root_type, field)
        return found
