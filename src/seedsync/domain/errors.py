"""Errors raised by the synchronisation domain."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .identity import LogicalIdentity


class SeedSyncError(RuntimeError):
    """Base class for seedsync failures."""


class DeclarationError(SeedSyncError):
    """Raised when declarations are malformed or ambiguous."""


class UnknownReferenceError(SeedSyncError):
    """Raised when a reference names an entity that is neither declared nor recorded."""

    def __init__(self, target: LogicalIdentity, *, referrer: LogicalIdentity | None = None) -> None:
        self.target = target
        self.referrer = referrer
        where = f" (referenced from {referrer})" if referrer is not None else ""
        super().__init__(f"Reference to undeclared entity {target}{where}")


class CircularReferenceError(SeedSyncError):
    """Raised when materialising an entity requires the entity itself."""

    def __init__(self, chain: Sequence[LogicalIdentity]) -> None:
        self.chain = tuple(chain)
        rendered = " -> ".join(str(identity) for identity in self.chain)
        super().__init__(f"Circular reference: {rendered}")
