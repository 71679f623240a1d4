"""ABOUTME: Lifecycle hooks that keep slug fields correct as records are created and flushed.
ABOUTME: Owns the replaceable transliterator/urlizer and drives builds for a whole batch."""

import logging
from collections.abc import Callable

from sluggable.core.builder import BuildResult, SlugBuilder
from sluggable.core.interfaces import ChangeTracker, SlugRepository
from sluggable.core.ledger import BatchLedger
from sluggable.core.metadata import MetadataRegistry, SlugMetadata
from sluggable.core.resolver import UniquenessResolver
from sluggable.errors import InvalidConfiguration
from sluggable.settings import settings
from sluggable.text.normalize import Transliterator, Urlizer, transliterate, urlize

logger = logging.getLogger(__name__)


class SluggableListener:
    """Generates slugs for records scheduled in a batch.

    Hook `before_create` into the "record about to be persisted" event and
    `on_batch` into the "batch is being flushed" event of the surrounding
    persistence layer.
    """

    def __init__(
        self,
        registry: MetadataRegistry,
        repository: SlugRepository,
        transliterator: Transliterator | None = None,
        urlizer: Urlizer | None = None,
    ) -> None:
        self.registry = registry
        self.repository = repository
        self._transliterator: Transliterator = transliterate
        self._urlizer: Urlizer = urlize
        if transliterator is not None:
            self.set_transliterator(transliterator)
        if urlizer is not None:
            self.set_urlizer(urlizer)

    @property
    def transliterator(self) -> Transliterator:
        """Currently used transliteration callable."""
        return self._transliterator

    @property
    def urlizer(self) -> Urlizer:
        """Currently used urlization callable."""
        return self._urlizer

    def set_transliterator(self, transliterator: Callable[..., str]) -> None:
        """Replace the transliteration callable.

        Raises:
            InvalidConfiguration: If `transliterator` is not callable.
        """
        if not callable(transliterator):
            raise InvalidConfiguration("Invalid transliterator callable parameter given")
        self._transliterator = transliterator

    def set_urlizer(self, urlizer: Callable[..., str]) -> None:
        """Replace the urlization callable.

        Raises:
            InvalidConfiguration: If `urlizer` is not callable.
        """
        if not callable(urlizer):
            raise InvalidConfiguration("Invalid urlizer callable parameter given")
        self._urlizer = urlizer

    def before_create(self, record: object) -> None:
        """Put the identifier placeholder into slug fields that are also the record's identifier."""
        metadata = self.registry.get(record)
        if metadata is None:
            return
        for slug_field in metadata.fields:
            if metadata.accessor.is_identifier_field(slug_field):
                metadata.accessor.set(record, slug_field, settings.IDENTIFIER_PLACEHOLDER)

    def on_batch(self, tracker: ChangeTracker, ledger: BatchLedger | None = None) -> list[BuildResult]:
        """Build slugs for every qualifying scheduled insertion and update.

        Insertions are processed before updates; updates also scheduled for
        insert are not processed twice. Repository read filters stay suspended
        for the whole batch.

        Args:
            tracker: Change tracker of the batch being flushed.
            ledger: Ledger to use for this batch, cleared first. A new one by default.

        Returns:
            One BuildResult per slug field that was rebuilt.
        """
        if ledger is None:
            ledger = BatchLedger()
        ledger.clear()
        builder = SlugBuilder(UniquenessResolver(self.repository), tracker, self._transliterator, self._urlizer)
        results: list[BuildResult] = []

        with self.repository.suspend_filters():
            for record in tracker.scheduled_insertions():
                metadata = self.registry.get(record)
                if metadata is not None:
                    results.extend(self._build_record(builder, tracker, ledger, record, metadata))

            for record in tracker.scheduled_updates():
                metadata = self.registry.get(record)
                if metadata is not None and not tracker.is_scheduled_for_insert(record):
                    results.extend(self._build_record(builder, tracker, ledger, record, metadata))

        logger.info("Built %d slug(s) for %d record(s)", len(results), len(ledger))
        return results

    def _build_record(
        self,
        builder: SlugBuilder,
        tracker: ChangeTracker,
        ledger: BatchLedger,
        record: object,
        metadata: SlugMetadata,
    ) -> list[BuildResult]:
        change_set = tracker.change_set_of(record)
        is_insert = tracker.is_scheduled_for_insert(record)

        built = []
        for slug_field in metadata.fields:
            result = builder.build(record, slug_field, metadata, change_set, is_insert, ledger)
            if result is not None:
                built.append(result)

        if built:
            ledger.record(metadata.root_type, record)
        return built
