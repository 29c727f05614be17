"""Persistence ports required by the synchronisation engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from .ledger import LedgerEntry


class RowRepository(Protocol):
    """Target-table access keyed by row id."""

    def insert(self, table: str, values: Mapping[str, object]) -> int:
        """Insert a row and return the id the database assigned to it."""
        ...

    def exists(self, table: str, row_id: int) -> bool: ...

    def update(self, table: str, row_id: int, values: Mapping[str, object]) -> None: ...


class LedgerRepository(Protocol):
    """Durable storage of the identity ledger."""

    def load(self) -> tuple[LedgerEntry, ...]: ...

    def save(self, entry: LedgerEntry) -> None:
        """Insert the entry or overwrite the row id of an existing identity."""
        ...


@dataclass(slots=True)
class SyncRepositories:
    rows: RowRepository
    ledger: LedgerRepository


@runtime_checkable
class SyncUnitOfWork(Protocol):
    """Unit-of-work boundary around the sync repositories."""

    @property
    def repositories(self) -> SyncRepositories: ...

    def __enter__(self) -> SyncUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


type SyncUnitOfWorkFactory = Callable[[], SyncUnitOfWork]
