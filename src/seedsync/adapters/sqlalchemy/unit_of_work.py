"""SQLAlchemy-backed unit of work for sync passes."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from seedsync.config import get_database_config, get_sync_config
from seedsync.domain.ports import SyncRepositories

from .repositories import SqlAlchemyLedgerRepository, SqlAlchemyRowRepository
from .tables import TableCatalog

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from seedsync.config import SyncConfig

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None
    catalog: TableCatalog | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call seedsync.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory

    @property
    def table_catalog(self) -> TableCatalog:
        if self.catalog is None:
            raise StartupError("SQLAlchemy adapter not initialised")
        return self.catalog


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    sync_config: SyncConfig | None = None,
    force: bool = False,
) -> Engine:
    """Initialise the engine and create the ledger table if it is missing."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )
    if _STATE.engine is not None and _STATE.engine is not engine:
        _STATE.engine.dispose()

    config = sync_config or get_sync_config()
    resolved_engine = engine or create_engine(get_database_config(uri=database_uri).uri)
    catalog = TableCatalog(ledger_table=config.ledger_table, id_column=config.id_column)
    catalog.create_ledger(resolved_engine)
    log.debug("Ledger table %s ready on %s", config.ledger_table, resolved_engine.url)

    _STATE.engine = resolved_engine
    _STATE.catalog = catalog
    return resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.catalog = None


class SqlAlchemySyncUnitOfWork:
    """Unit of work managing one SQLAlchemy session for the sync repositories."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self.catalog = _STATE.table_catalog
        self._session: Session | None = None
        self._repositories: SyncRepositories | None = None

    def __enter__(self) -> SqlAlchemySyncUnitOfWork:
        self.session = self.session_factory()
        self._repositories = SyncRepositories(
            rows=SqlAlchemyRowRepository(self.session, self.catalog),
            ledger=SqlAlchemyLedgerRepository(self.session, self.catalog),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> SyncRepositories:
        if self._session is None or self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


if TYPE_CHECKING:
    from seedsync.domain.ports import SyncUnitOfWork

    _uow_check: SyncUnitOfWork = SqlAlchemySyncUnitOfWork()
