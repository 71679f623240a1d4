"""ABOUTME: Collaborator protocols consumed by the slug core.
ABOUTME: Change tracking, record field access and persisted slug lookups."""

from collections.abc import Iterator, Mapping, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol

ChangeSet = Mapping[str, tuple[Any, Any]]
"""Changed fields of a record mapped to (old, new) values."""


@dataclass(frozen=True)
class SlugRow:
    """A stored record's identifier and slug value as returned by a repository.

    Attributes:
        id: Identifier of the stored record.
        slug: Slug value held by the queried field.
    """

    id: Any
    slug: str


class ChangeTracker(Protocol):
    """Tracks scheduled inserts/updates and per-record field changes for one batch."""

    def scheduled_insertions(self) -> Sequence[object]: ...

    def scheduled_updates(self) -> Sequence[object]: ...

    def is_scheduled_for_insert(self, record: object) -> bool: ...

    def change_set_of(self, record: object) -> ChangeSet: ...

    def notify_field_changed(self, record: object, field: str, old: Any, new: Any) -> None: ...

    def recompute_change_set(self, record: object) -> None: ...


class RecordAccessor(Protocol):
    """Reads and writes named fields of one record type and describes their storage constraints."""

    def get(self, record: object, field: str) -> Any: ...

    def set(self, record: object, field: str, value: Any) -> None: ...

    def has_field(self, field: str) -> bool: ...

    def is_identifier_field(self, field: str) -> bool: ...

    def identifier(self, record: object) -> Any: ...

    def field_length_limit(self, field: str) -> int | None: ...

    def field_is_nullable(self, field: str) -> bool: ...

    def field_names(self) -> tuple[str, ...]: ...


class SlugRepository(Protocol):
    """Looks up slugs already stored for a root record type."""

    def find_by_prefix(
        self,
        root_type: str,
        field: str,
        prefix: str,
        group_field: str | None = None,
        group_value: Any = None,
        exclude_id: Any = None,
    ) -> list[SlugRow]: ...

    def suspend_filters(self) -> AbstractContextManager[None]: ...


def iter_group_matches(
    records: Sequence[object],
    accessor: RecordAccessor,
    group_field: str | None,
    group_value: Any,
) -> Iterator[object]:
    """Yield the records whose grouping field equals group_value.

    With no group field every record matches.
    """
    for record in records:
        if group_field is None or accessor.get(record, group_field) == group_value:
            yield record
