"""ABOUTME: Uniqueness resolution for slugs that must not collide.
ABOUTME: Searches batch and stored slugs sharing a prefix and appends the first free numeric suffix."""

import logging
import re
from typing import Any

from sluggable.core.interfaces import SlugRepository, iter_group_matches
from sluggable.core.ledger import BatchLedger
from sluggable.core.metadata import SlugMetadata
from sluggable.errors import UnresolvableSlug
from sluggable.settings import settings

logger = logging.getLogger(__name__)


class UniquenessResolver:
    """Disambiguates a preferred slug against stored slugs and slugs assigned earlier in the batch."""

    def __init__(self, repository: SlugRepository) -> None:
        self.repository = repository

    def resolve(
        self,
        record: object,
        slug_field: str,
        metadata: SlugMetadata,
        preferred: str,
        ledger: BatchLedger,
        exponent: int = 0,
    ) -> str:
        """Return a slug for `record` that no other record of its root type (and group) holds.

        The suffix search starts at 10**exponent. On the top-level attempt
        (exponent 0) only slugs equal to `preferred` or `preferred` + separator
        + digits count as collisions; once a suffix no longer fits max_length the
        preferred part is cut and the search repeats at the suffix's digit width,
        where every prefix match counts.

        Args:
            record: Record being built.
            slug_field: Slug field being resolved.
            metadata: Resolved configuration of the record's type.
            preferred: Normalized (and length-cut) slug.
            ledger: Records finalized earlier in this batch.
            exponent: Starting suffix exponent.

        Returns:
            The final slug, also written to the record.

        Raises:
            UnresolvableSlug: If max_length leaves no room for a suffix.
        """
        accessor = metadata.accessor
        config = metadata.fields[slug_field]
        sep = config.separator
        group_value = accessor.get(record, config.unique_base) if config.unique_base else None

        while True:
            taken = self._similar_slugs(record, slug_field, metadata, preferred, ledger, group_value)

            if exponent == 0:
                strict = re.compile(f"{re.escape(preferred)}(?:{re.escape(sep)}\\d+)?", re.IGNORECASE)
                taken = [slug for slug in taken if strict.fullmatch(slug)]

            if not taken:
                break

            taken_set = set(taken)
            i = 10**exponent
            while f"{preferred}{sep}{i}" in taken_set:
                i += 1
            candidate = f"{preferred}{sep}{i}"

            if config.max_length is None or len(candidate) <= config.max_length:
                logger.debug("Slug '%s' taken %d time(s), using '%s'", preferred, len(taken_set), candidate)
                preferred = candidate
                break

            digits = len(str(i))
            cut = config.max_length - len(sep) - digits
            truncated = preferred[:cut] if cut > 0 else ""
            if sep and truncated.endswith(sep):
                truncated = truncated[: -len(sep)]
            if not truncated:
                raise UnresolvableSlug(
                    f"Cannot fit '{preferred}' with suffix {sep}{i} into {config.max_length} characters"
                )

            logger.debug(
                "Suffixed slug '%s' exceeds %d characters, retrying with '%s'",
                candidate,
                config.max_length,
                truncated,
            )
            accessor.set(record, slug_field, truncated)
            preferred = truncated
            exponent = digits - 1

        accessor.set(record, slug_field, preferred)
        return preferred

    def _similar_slugs(
        self,
        record: object,
        slug_field: str,
        metadata: SlugMetadata,
        preferred: str,
        ledger: BatchLedger,
        group_value: Any,
    ) -> list[str]:
        """Collect slugs starting with `preferred` (case-insensitive) from the batch and the store."""
        accessor = metadata.accessor
        group_field = metadata.fields[slug_field].unique_base
        prefix = preferred.lower()

        similar = []
        for other in iter_group_matches(ledger.candidates_for(metadata.root_type), accessor, group_field, group_value):
            if other is record:
                continue
            slug = accessor.get(other, slug_field)
            if isinstance(slug, str) and slug.lower().startswith(prefix):
                similar.append(slug)

        exclude_id = None
        if not accessor.is_identifier_field(slug_field):
            identifier = accessor.identifier(record)
            if identifier is not None and identifier != settings.IDENTIFIER_PLACEHOLDER:
                exclude_id = identifier

        rows = self.repository.find_by_prefix(
            metadata.root_type,
            slug_field,
            preferred,
            group_field=group_field,
            group_value=group_value,
            exclude_id=exclude_id,
        )
        similar.extend(row.slug for row in rows)
        return similar
