"""SQLAlchemy adapter package for seedsync."""

from __future__ import annotations

from .maintenance import drop_all_data
from .repositories import SqlAlchemyLedgerRepository, SqlAlchemyRowRepository
from .tables import TableCatalog, build_ledger_table
from .unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyLedgerRepository",
    "SqlAlchemyRowRepository",
    "SqlAlchemySyncUnitOfWork",
    "StartupError",
    "TableCatalog",
    "build_ledger_table",
    "configured_engine",
    "drop_all_data",
    "is_started",
    "shutdown",
    "startup",
]
