"""Identity-tracking synchronisation of declared seed entities."""

from __future__ import annotations

from .declarations import DEFAULTS_KEY, RESERVED_PREFIX, DeclarationSet, EntityDeclaration
from .errors import (
    CircularReferenceError,
    DeclarationError,
    SeedSyncError,
    UnknownReferenceError,
)
from .identity import LogicalIdentity
from .ledger import IdentityLedger, LedgerEntry
from .materializer import EntityMaterializer
from .ports import LedgerRepository, RowRepository, SyncRepositories, SyncUnitOfWork
from .reconciler import Reconciler, SyncResult
from .resolver import ValueResolver, read_file_literal
from .values import (
    BooleanValue,
    FieldValue,
    FileValue,
    NumberValue,
    ReferenceValue,
    TextValue,
    parse_value,
)

__all__ = [
    "DEFAULTS_KEY",
    "RESERVED_PREFIX",
    "BooleanValue",
    "CircularReferenceError",
    "DeclarationError",
    "DeclarationSet",
    "EntityDeclaration",
    "EntityMaterializer",
    "FieldValue",
    "FileValue",
    "IdentityLedger",
    "LedgerEntry",
    "LedgerRepository",
    "LogicalIdentity",
    "NumberValue",
    "Reconciler",
    "ReferenceValue",
    "RowRepository",
    "SeedSyncError",
    "SyncRepositories",
    "SyncResult",
    "SyncUnitOfWork",
    "TextValue",
    "UnknownReferenceError",
    "ValueResolver",
    "parse_value",
    "read_file_literal",
]
