"""ABOUTME: Tests for the in-memory unit of work and store.
ABOUTME: Verifies scheduling, change sets, notifications and saving."""

from dataclasses import dataclass

import pytest

from sluggable.core.metadata import MetadataRegistry
from sluggable.store.memory import InMemorySlugRepository
from sluggable.store.records import AttributeAccessor
from sluggable.store.unit_of_work import UnitOfWork


@dataclass
class Note:
    title: str = ""
    slug: str | None = None
    id: int | None = None


@pytest.fixture
def registry() -> MetadataRegistry:
    """Registry with Note configured."""
    registry = MetadataRegistry()
    registry.register(Note, AttributeAccessor(Note), {"slug": {"fields": ["title"]}})
    return registry


@pytest.fixture
def repository() -> InMemorySlugRepository:
    """Empty in-memory store."""
    return InMemorySlugRepository()


class TestUnitOfWork:
    """Tests for UnitOfWork without listeners."""

    def test_persist_schedules_insert(self, registry: MetadataRegistry, repository: InMemorySlugRepository) -> None:
        """Persisted records are scheduled for insert once."""
        uow = UnitOfWork(registry, repository)
        note = Note(title="A")

        uow.persist(note)
        uow.persist(note)

        assert uow.scheduled_insertions() == (note,)
        assert uow.is_scheduled_for_insert(note)

    def test_insert_change_set(self, registry: MetadataRegistry, repository: InMemorySlugRepository) -> None:
        """New records report every field as changed from None."""
        uow = UnitOfWork(registry, repository)
        note = Note(title="A")
        uow.persist(note)

        assert uow.change_set_of(note) == {"title": (None, "A"), "slug": (None, None), "id": (None, None)}

    def test_flush_saves_and_assigns_ids(self, registry: MetadataRegistry, repository: InMemorySlugRepository) -> None:
        """Flushed insertions are stored with fresh identifiers."""
        uow = UnitOfWork(registry, repository)
        first, second = Note(title="A"), Note(title="B")
        uow.persist(first)
        uow.persist(second)

        uow.flush()

        assert (first.id, second.id) == (1, 2)
        assert [row["title"] for row in repository.rows("Note")] == ["A", "B"]
        assert uow.scheduled_insertions() == ()

    def test_tracked_changes_saved(self, registry: MetadataRegistry, repository: InMemorySlugRepository) -> None:
        """Edits to tracked records are detected and saved on flush."""
        uow = UnitOfWork(registry, repository)
        note = Note(title="A")
        uow.persist(note)
        uow.flush()

        note.title = "B"
        assert uow.change_set_of(note) == {"title": ("A", "B")}
        uow.flush()

        assert repository.rows("Note")[0]["title"] == "B"
        assert uow.change_set_of(note) == {}

    def test_notify_and_recompute(self, registry: MetadataRegistry, repository: InMemorySlugRepository) -> None:
        """Notifications add to the change set until it is recomputed."""
        uow = UnitOfWork(registry, repository)
        note = Note(title="A")
        uow.track(note)

        uow.notify_field_changed(note, "slug", None, "a")
        assert uow.change_set_of(note) == {"slug": (None, "a")}

        uow.recompute_change_set(note)
        assert uow.change_set_of(note) == {}

    def test_unregistered_record_rejected(self, registry: MetadataRegistry, repository: InMemorySlugRepository) -> None:
        """Only registered record types can be managed."""
        uow = UnitOfWork(registry, repository)

        with pytest.raises(ValueError, match="not registered"):
            uow.persist(object())


class TestInMemorySlugRepository:
    """Tests for InMemorySlugRepository lookups."""

    def test_saved_values_are_copies(self, repository: InMemorySlugRepository) -> None:
        """Later edits to a record are invisible until it is saved again."""
        accessor = AttributeAccessor(Note)
        note = Note(title="A", slug="a")
        repository.save("Note", note, accessor)

        note.slug = "b"

        assert [row.slug for row in repository.find_by_prefix("Note", "slug", "a")] == ["a"]
        assert repository.find_by_prefix("Note", "slug", "b") == []

    def test_exclude_id(self, repository: InMemorySlugRepository) -> None:
        """The excluded identifier is not returned."""
        accessor = AttributeAccessor(Note)
        repository.save("Note", Note(slug="a", id=7), accessor)

        assert repository.find_by_prefix("Note", "slug", "a", exclude_id=7) == []
