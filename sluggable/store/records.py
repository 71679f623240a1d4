# ABOUTME: Record accessors for attribute-based records and dict-backed table rows.
# ABOUTME: Each accessor serves one record type and knows its identifier and column constraints.

import dataclasses
from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sluggable.errors import InvalidConfiguration


class _ConstraintsMixin:
    """Field list, identifier and storage constraints shared by the accessors."""

    def __init__(
        self,
        fields: Iterable[str],
        id_field: str,
        lengths: Mapping[str, int] | None,
        nullable: Collection[str] | None,
    ) -> None:
        self._fields = tuple(fields)
        self.id_field = id_field
        self._lengths = dict(lengths or {})
        self._nullable = frozenset(nullable or ())

    def has_field(self, field: str) -> bool:
        return field in self._fields

    def field_names(self) -> tuple[str, ...]:
        return self._fields

    def is_identifier_field(self, field: str) -> bool:
        return field == self.id_field

    def field_length_limit(self, field: str) -> int | None:
        return self._lengths.get(field)

    def field_is_nullable(self, field: str) -> bool:
        return field in self._nullable


class AttributeAccessor(_ConstraintsMixin):
    """Accessor for records whose fields are plain attributes, such as dataclasses.

    Args:
        record_type: Class of the records.
        id_field: Name of the identifier attribute.
        lengths: Field name mapped to its maximum stored length.
        nullable: Names of fields that may be stored as None.
        fields: Field names; defaults to the dataclass fields of `record_type`.

    Raises:
        InvalidConfiguration: If `fields` is omitted for a non-dataclass type.
    """

    def __init__(
        self,
        record_type: type,
        id_field: str = "id",
        lengths: Mapping[str, int] | None = None,
        nullable: Collection[str] | None = None,
        fields: Iterable[str] | None = None,
    ) -> None:
        if fields is None:
            if not dataclasses.is_dataclass(record_type):
                raise InvalidConfiguration(f"Field names are required for non-dataclass type {record_type.__name__}")
            fields = [f.name for f in dataclasses.fields(record_type)]
        super().__init__(fields, id_field, lengths, nullable)
        self.record_type = record_type

    def get(self, record: object, field: str) -> Any:
        return getattr(record, field)

    def set(self, record: object, field: str, value: Any) -> None:
        setattr(record, field, value)

    def identifier(self, record: object) -> Any:
        return getattr(record, self.id_field, None)


@dataclass
class TableRow:
    """A database row held as a column-to-value mapping."""

    values: dict[str, Any] = field(default_factory=dict)


class MappingAccessor(_ConstraintsMixin):
    """Accessor for TableRow records of one table."""

    def __init__(
        self,
        columns: Iterable[str],
        id_field: str = "id",
        lengths: Mapping[str, int] | None = None,
        nullable: Collection[str] | None = None,
    ) -> None:
        super().__init__(columns, id_field, lengths, nullable)

    def get(self, record: object, field: str) -> Any:
        return _values(record).get(field)

    def set(self, record: object, field: str, value: Any) -> None:
        _values(record)[field] = value

    def identifier(self, record: object) -> Any:
        return _values(record).get(self.id_field)


def _values(record: object) -> dict[str, Any]:
    if not isinstance(record, TableRow):
        raise TypeError(f"Expected TableRow, got {type(record).__name__}")
    return record.values
