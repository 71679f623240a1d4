# ABOUTME: Change tracker that schedules inserts/updates and computes per-record change sets.
# ABOUTME: Flushing runs the batch hooks of its listeners, then saves every scheduled record.

import logging
from collections.abc import Iterable, Sequence
from contextlib import AbstractContextManager
from typing import Any, Protocol

from sluggable.core.builder import BuildResult
from sluggable.core.interfaces import ChangeSet, ChangeTracker, RecordAccessor, SlugRow
from sluggable.core.metadata import MetadataRegistry, SlugMetadata

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """A slug repository that can also save records."""

    def save(
        self,
        root_type: str,
        record: object,
        accessor: RecordAccessor,
        insert: bool | None = None,
        key: Any = None,
    ) -> Any: ...

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


class BatchListener(Protocol):
    """Hooks called by the unit of work."""

    def before_create(self, record: object) -> None: ...

    def on_batch(self, tracker: ChangeTracker) -> list[BuildResult]: ...


class UnitOfWork:
    """Tracks new and loaded records and flushes their changes as one batch.

    Change sets are computed when a flush starts and only recomputed on
    request, so hooks see a stable view unless they ask for a refresh.

    Args:
        registry: Metadata of the record types that may be tracked.
        store: Where flushed records are saved.
        listeners: Hooks run on persist and on flush.
    """

    def __init__(
        self,
        registry: MetadataRegistry,
        store: RecordStore,
        listeners: Iterable[BatchListener] = (),
    ) -> None:
        self.registry = registry
        self.store = store
        self.listeners = list(listeners)
        self._insertions: list[object] = []
        self._managed: list[object] = []
        self._updates: list[object] = []
        self._snapshots: dict[int, dict[str, Any]] = {}
        self._change_sets: dict[int, dict[str, tuple[Any, Any]]] = {}

    def persist(self, record: object) -> None:
        """Schedule a new record for insertion on the next flush."""
        self._metadata(record)
        if self._contains(self._insertions, record) or self._contains(self._managed, record):
            return
        for listener in self.listeners:
            listener.before_create(record)
        self._insertions.append(record)

    def track(self, record: object) -> None:
        """Manage an already stored record; later edits to it are flushed as updates."""
        metadata = self._metadata(record)
        if not self._contains(self._managed, record):
            self._managed.append(record)
        self._snapshots[id(record)] = self._values(record, metadata.accessor)

    def flush(self) -> list[BuildResult]:
        """Run the batch hooks and save every scheduled insertion and changed record.

        Returns:
            Slug build results reported by the listeners.
        """
        self._change_sets = {}
        self._updates = []
        for record in self._insertions:
            self._change_sets[id(record)] = self._compute_change_set(record)
        for record in self._managed:
            change_set = self._compute_change_set(record)
            if change_set:
                self._change_sets[id(record)] = change_set
                self._updates.append(record)

        results: list[BuildResult] = []
        for listener in self.listeners:
            results.extend(listener.on_batch(self))

        for record in self._insertions:
            metadata = self._metadata(record)
            self.store.save(metadata.root_type, record, metadata.accessor, insert=True)
        for record in self._updates:
            metadata = self._metadata(record)
            key = self._stored_identifier(record, metadata.accessor)
            self.store.save(metadata.root_type, record, metadata.accessor, insert=False, key=key)

        inserted = self._insertions
        self._insertions = []
        self._updates = []
        self._change_sets = {}
        for record in inserted:
            self.track(record)
        for record in self._managed:
            self._snapshots[id(record)] = self._values(record, self._metadata(record).accessor)

        logger.debug("Flushed %d insertion(s) and %d tracked record(s)", len(inserted), len(self._managed))
        return results

    # ChangeTracker

    def scheduled_insertions(self) -> Sequence[object]:
        return tuple(self._insertions)

    def scheduled_updates(self) -> Sequence[object]:
        return tuple(self._updates)

    def is_scheduled_for_insert(self, record: object) -> bool:
        return self._contains(self._insertions, record)

    def change_set_of(self, record: object) -> ChangeSet:
        change_set = self._change_sets.get(id(record))
        if change_set is None:
            change_set = self._compute_change_set(record)
        return dict(change_set)

    def notify_field_changed(self, record: object, field: str, old: Any, new: Any) -> None:
        self._change_sets.setdefault(id(record), {})[field] = (old, new)

    def recompute_change_set(self, record: object) -> None:
        self._change_sets[id(record)] = self._compute_change_set(record)

    def _compute_change_set(self, record: object) -> dict[str, tuple[Any, Any]]:
        accessor = self._metadata(record).accessor
        current = self._values(record, accessor)
        if self.is_scheduled_for_insert(record):
            return {name: (None, value) for name, value in current.items()}

        snapshot = self._snapshots.get(id(record), {})
        return {name: (snapshot.get(name), value) for name, value in current.items() if snapshot.get(name) != value}

    def _metadata(self, record: object) -> SlugMetadata:
        metadata = self.registry.get(record)
        if metadata is None:
            raise ValueError(f"Record type {type(record).__name__} is not registered")
        return metadata

    def _stored_identifier(self, record: object, accessor: RecordAccessor) -> Any:
        """Return the identifier the record had when it was last loaded or flushed."""
        snapshot = self._snapshots.get(id(record), {})
        for name in accessor.field_names():
            if accessor.is_identifier_field(name) and name in snapshot:
                return snapshot[name]
        return accessor.identifier(record)

    @staticmethod
    def _values(record: object, accessor: RecordAccessor) -> dict[str, Any]:
        return {name: accessor.get(record, name) for name in accessor.field_names()}

    @staticmethod
    def _contains(records: list[object], record: object) -> bool:
        return any(r is record for r in records)
