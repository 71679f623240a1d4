# ABOUTME: Per-batch registry of records whose slugs were finalized earlier in the batch.
# ABOUTME: Keyed by root record type so later records see earlier ones, never themselves.

from collections import defaultdict
from collections.abc import Sequence


class BatchLedger:
    """Records already assigned a slug in the current batch, grouped by root record type.

    A ledger belongs to exactly one batch. Reads and appends are not
    synchronized; records must be built one at a time.
    """

    def __init__(self) -> None:
        self._entries: defaultdict[str, list[object]] = defaultdict(list)

    def clear(self) -> None:
        """Forget every recorded record."""
        self._entries.clear()

    def record(self, root_type: str, record: object) -> None:
        """Append a record whose slug was just finalized.

        Args:
            root_type: Root record type name the record belongs to.
            record: The record itself; its slug is read back when resolving later records.
        """
        self._entries[root_type].append(record)

    def candidates_for(self, root_type: str) -> Sequence[object]:
        """Return the records recorded for a root type, in recording order."""
        return tuple(self._entries.get(root_type, ()))

    def __len__(self) -> int:
        return sum(len(records) for records in self._entries.values())
