"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from seedsync.adapters.declarations import load_declarations
from seedsync.adapters.sqlalchemy import (
    SqlAlchemySyncUnitOfWork,
    configured_engine,
    drop_all_data,
    is_started,
    startup,
)
from seedsync.config import get_sync_config
from seedsync.domain import Reconciler, SyncResult

if TYPE_CHECKING:
    from pathlib import Path

    from seedsync.domain import DeclarationSet
    from seedsync.domain.ports import SyncUnitOfWorkFactory

log = getLogger(__name__)


def initialize(*, database_uri: str | None = None) -> None:
    """Connect and make sure the ledger table exists."""

    if is_started():
        return
    engine = startup(database_uri=database_uri)
    log.info("Initialised ledger on %s", engine.url.render_as_string(hide_password=True))


def drop_all(*, database_uri: str | None = None) -> tuple[str, ...]:
    """Remove all rows from every table in the target database."""

    initialize(database_uri=database_uri)
    engine = configured_engine()
    if engine is None:
        raise RuntimeError("Database engine not configured")
    log.info("Dropping all data")
    tables = drop_all_data(engine)
    return tables


def sync(
    *,
    declarations: DeclarationSet | None = None,
    declarations_dir: Path | None = None,
    reset: bool = False,
    database_uri: str | None = None,
    unit_of_work_factory: SyncUnitOfWorkFactory | None = None,
) -> SyncResult:
    """Run one reconciliation pass of the declarations against the database."""

    effective_declarations = declarations
    if effective_declarations is None:
        root = declarations_dir or get_sync_config().declarations_dir
        effective_declarations = load_declarations(root)

    if unit_of_work_factory is None:
        initialize(database_uri=database_uri)
    effective_uow = unit_of_work_factory or SqlAlchemySyncUnitOfWork

    log.info("Starting sync: entities=%s, reset=%s", len(effective_declarations), reset)
    result = Reconciler(unit_of_work_factory=effective_uow).sync(
        effective_declarations,
        reset=reset,
    )
    log.info(
        "Finished sync: created=%s, recreated=%s, updated=%s, skipped=%s",
        result.created,
        result.recreated,
        result.updated,
        result.skipped,
    )
    return result
