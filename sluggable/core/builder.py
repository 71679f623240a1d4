"""ABOUTME: Builds slug field values from source fields during a batch.
ABOUTME: Decides whether a slug needs regenerating, normalizes it and hands unique slugs to the resolver."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from sluggable.config import SlugFieldConfig
from sluggable.core.interfaces import ChangeSet, ChangeTracker
from sluggable.core.ledger import BatchLedger
from sluggable.core.metadata import SlugMetadata
from sluggable.core.resolver import UniquenessResolver
from sluggable.settings import settings
from sluggable.text.normalize import Transliterator, Urlizer, normalize_slug

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Outcome of a slug field that was (re)built.

    Attributes:
        record: The record that was built.
        field: The slug field.
        old_value: Value stored before this batch.
        value: Final slug, None when an empty slug was nulled.
    """

    record: object
    field: str
    old_value: Any
    value: str | None


def _stringify(value: Any, date_format: str) -> str:
    """Render a source field value for concatenation."""
    if value is None:
        return ""
    if isinstance(value, date):
        return value.strftime(date_format)
    return str(value)


def concatenate_sources(record: object, metadata: SlugMetadata, config: SlugFieldConfig) -> str:
    """Join the record's source field values with single spaces, in configured order."""
    words = [_stringify(metadata.accessor.get(record, name), config.date_format) for name in config.fields]
    return " ".join(words).strip()


class SlugBuilder:
    """Computes slug field values for records scheduled in a batch."""

    def __init__(
        self,
        resolver: UniquenessResolver,
        tracker: ChangeTracker,
        transliterator: Transliterator,
        urlizer: Urlizer,
    ) -> None:
        self.resolver = resolver
        self.tracker = tracker
        self.transliterator = transliterator
        self.urlizer = urlizer

    def build(
        self,
        record: object,
        slug_field: str,
        metadata: SlugMetadata,
        change_set: ChangeSet,
        is_insert: bool,
        ledger: BatchLedger,
    ) -> BuildResult | None:
        """Build one slug field of a record.

        Args:
            record: Record being processed.
            slug_field: Configured slug field.
            metadata: Resolved configuration of the record's type.
            change_set: Changed fields of the record as (old, new) pairs.
            is_insert: Whether the record is scheduled for insert.
            ledger: Records finalized earlier in this batch.

        Returns:
            BuildResult when the field was rebuilt, None when it is skipped.
        """
        accessor = metadata.accessor
        config = metadata.fields[slug_field]
        placeholder = settings.IDENTIFIER_PLACEHOLDER
        current = accessor.get(record, slug_field)
        field_changed = slug_field in change_set

        if not config.updatable and not is_insert and not field_changed and current != placeholder:
            logger.debug("Slug field %s is not updatable, skipping", slug_field)
            return None

        old_value = change_set[slug_field][0] if field_changed else current

        if current is None or current == "" or current == placeholder or not field_changed:
            raw = concatenate_sources(record, metadata, config)
            changed = field_changed or any(name in change_set for name in config.fields)
        else:
            # Slug was set manually
            raw = str(current)
            changed = True

        if not changed:
            return None

        slug: str | None = normalize_slug(
            raw,
            separator=config.separator,
            style=config.style,
            max_length=config.max_length,
            transliterator=self.transliterator,
            urlizer=self.urlizer,
            record=record,
        )
        # A cut to max_length may leave a dangling separator on unique slugs
        sep = config.separator
        if config.unique and slug and sep and slug.endswith(sep):
            slug = slug[: -len(sep)]
        if not slug and config.nullable:
            slug = None

        accessor.set(record, slug_field, slug)

        if config.unique and slug is not None:
            slug = self.resolver.resolve(record, slug_field, metadata, slug, ledger)

        logger.debug("Slug field %s: %r -> %r", slug_field, old_value, slug)
        self.tracker.notify_field_changed(record, slug_field, old_value, slug)
        self.tracker.recompute_change_set(record)

        return BuildResult(record=record, field=slug_field, old_value=old_value, value=slug)
