"""ABOUTME: Slug core: builder, uniqueness resolver, batch ledger and lifecycle listener.
ABOUTME: Backend agnostic; talks to collaborators through the protocols in interfaces."""

from sluggable.core.builder import BuildResult, SlugBuilder
from sluggable.core.interfaces import ChangeTracker, RecordAccessor, SlugRepository, SlugRow
from sluggable.core.ledger import BatchLedger
from sluggable.core.listener import SluggableListener
from sluggable.core.metadata import MetadataRegistry, SlugMetadata
from sluggable.core.resolver import UniquenessResolver

__all__ = [
    "BatchLedger",
    "BuildResult",
    "ChangeTracker",
    "MetadataRegistry",
    "RecordAccessor",
    "SlugBuilder",
    "SlugMetadata",
    "SlugRepository",
    "SlugRow",
    "SluggableListener",
    "UniquenessResolver",
]
