"""ABOUTME: Registry of resolved slug configuration per record type.
ABOUTME: Validates fields against the record accessor once, at registration time."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sluggable.config import SlugFieldConfig, SluggableConfig, parse_field_options
from sluggable.core.interfaces import RecordAccessor
from sluggable.errors import MissingSourceField, UnknownField

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlugMetadata:
    """Resolved slug configuration for one record type.

    Attributes:
        record_type: The registered class.
        root_type: Name of the uniqueness scope shared with related record types.
        accessor: Field access for records of this type.
        fields: Slug field name mapped to its resolved options.
    """

    record_type: type
    root_type: str
    accessor: RecordAccessor
    fields: Mapping[str, SlugFieldConfig]


class MetadataRegistry:
    """Caches SlugMetadata by record type.

    Subclasses of a registered type resolve to the nearest registered base,
    and a subclass registered on its own shares the root type of that base.
    """

    def __init__(self) -> None:
        self._by_type: dict[type, SlugMetadata] = {}

    def register(
        self,
        record_type: type,
        accessor: RecordAccessor,
        options: Mapping[str, Mapping[str, Any] | SlugFieldConfig],
        root_type: str | None = None,
    ) -> SlugMetadata:
        """Validate and cache the slug configuration of a record type.

        Args:
            record_type: Class of the records.
            accessor: Accessor for that class.
            options: Slug field name mapped to raw options or a SlugFieldConfig.
            root_type: Uniqueness scope name. Defaults to the root of the nearest
                registered base, or the class name.

        Returns:
            The cached metadata.

        Raises:
            InvalidConfiguration: If options are malformed.
            UnknownField: If a slug or unique_base field does not exist.
            MissingSourceField: If a source field does not exist.
        """
        type_name = record_type.__name__
        resolved: dict[str, SlugFieldConfig] = {}

        for slug_field, raw in options.items():
            config = parse_field_options(raw)

            if not accessor.has_field(slug_field):
                raise UnknownField(type_name, slug_field, role="slug field")
            for source in config.fields:
                if not accessor.has_field(source):
                    raise MissingSourceField(type_name, source)
            if config.unique_base is not None and not accessor.has_field(config.unique_base):
                raise UnknownField(type_name, config.unique_base, role="unique base field")

            # Storage constraints fill in whatever the options left open
            updates: dict[str, Any] = {}
            if config.max_length is None:
                updates["max_length"] = accessor.field_length_limit(slug_field)
            if not config.nullable and accessor.field_is_nullable(slug_field):
                updates["nullable"] = True
            resolved[slug_field] = config.model_copy(update=updates) if updates else config

        if root_type is None:
            root_type = self._inherited_root(record_type) or type_name

        metadata = SlugMetadata(
            record_type=record_type,
            root_type=root_type,
            accessor=accessor,
            fields=resolved,
        )
        self._by_type[record_type] = metadata
        logger.debug("Registered slug fields %s for %s (root %s)", list(resolved), type_name, root_type)
        return metadata

    def register_from_config(
        self,
        config: SluggableConfig,
        accessors: Mapping[type, RecordAccessor],
    ) -> list[SlugMetadata]:
        """Register every record type that has both an accessor and a config entry.

        Base classes should appear before their subclasses in `accessors`.

        Args:
            config: Loaded sluggable configuration keyed by type name.
            accessors: Record type mapped to its accessor.

        Returns:
            Metadata of the registered types.
        """
        registered = []
        for record_type, accessor in accessors.items():
            options = config.types.get(record_type.__name__)
            if options is None:
                logger.debug("No slug configuration for %s", record_type.__name__)
                continue
            registered.append(self.register(record_type, accessor, options))
        return registered

    def get(self, record: object) -> SlugMetadata | None:
        """Return the metadata for a record's class or its nearest registered base."""
        for cls in type(record).__mro__:
            metadata = self._by_type.get(cls)
            if metadata is not None:
                return metadata
        return None

    def _inherited_root(self, record_type: type) -> str | None:
        for cls in record_type.__mro__[1:]:
            metadata = self._by_type.get(cls)
            if metadata is not None:
                return metadata.root_type
        return None

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._by_type
