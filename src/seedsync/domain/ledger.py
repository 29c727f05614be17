"""In-memory identity ledger used during one sync pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from .identity import LogicalIdentity


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    identity: LogicalIdentity
    row_id: int


class IdentityLedger:
    """Mapping from logical identity to the row id it was assigned.

    This is not a cache: entries never expire and lookups do not check that the
    row still exists. Drift is detected by the reconciler in a separate phase.
    """

    def __init__(self, entries: Iterable[LedgerEntry] = ()) -> None:
        self._row_ids: dict[LogicalIdentity, int] = {}
        for entry in entries:
            self.record(entry.identity, entry.row_id)

    def get(self, identity: LogicalIdentity) -> int | None:
        return self._row_ids.get(identity)

    def record(self, identity: LogicalIdentity, row_id: int) -> LedgerEntry:
        self._row_ids[identity] = row_id
        return LedgerEntry(identity=identity, row_id=row_id)

    def discard(self, identity: LogicalIdentity) -> None:
        """Forget an identity whose row is gone; the next reference recreates it."""

        self._row_ids.pop(identity, None)

    def entries(self) -> tuple[LedgerEntry, ...]:
        """Snapshot of the current entries, safe to iterate while recording."""

        return tuple(
            LedgerEntry(identity=identity, row_id=row_id)
            for identity, row_id in self._row_ids.items()
        )

    def __contains__(self, identity: object) -> bool:
        return identity in self._row_ids

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._row_ids)
