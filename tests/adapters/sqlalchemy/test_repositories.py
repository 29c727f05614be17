from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlalchemy.exc import CompileError, NoSuchTableError
from sqlalchemy.orm import Session

from seedsync.adapters.sqlalchemy import (
    SqlAlchemyLedgerRepository,
    SqlAlchemyRowRepository,
    TableCatalog,
)
from seedsync.domain import LedgerEntry, LogicalIdentity, SeedSyncError
from tests.helpers.schema import users_table

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine

ADMIN = LogicalIdentity("users", "admin")


@pytest.fixture
def catalog(sqlite_engine: Engine) -> TableCatalog:
    table_catalog = TableCatalog()
    table_catalog.create_ledger(sqlite_engine)
    return table_catalog


@pytest.fixture
def session(sqlite_engine: Engine) -> Iterator[Session]:
    with Session(sqlite_engine) as db_session:
        yield db_session


def test_row_repository_round_trip(session: Session, catalog: TableCatalog) -> None:
    rows = SqlAlchemyRowRepository(session, catalog)

    row_id = rows.insert("users", {"name": "O'Brien", "active": True})
    assert rows.exists("users", row_id)
    assert not rows.exists("users", row_id + 100)

    rows.update("users", row_id, {"role": "owner"})
    stored = session.execute(select(users_table).where(users_table.c.id == row_id)).one()

    assert stored.name == "O'Brien"
    assert stored.role == "owner"
    assert stored.active is True


def test_insert_without_values_uses_defaults(session: Session) -> None:
    catalog = TableCatalog()
    session.connection().exec_driver_sql("CREATE TABLE tags (id INTEGER PRIMARY KEY)")
    rows = SqlAlchemyRowRepository(session, catalog)

    assert rows.exists("tags", rows.insert("tags", {}))


def test_unknown_columns_fail(session: Session, catalog: TableCatalog) -> None:
    rows = SqlAlchemyRowRepository(session, catalog)

    with pytest.raises(CompileError):
        rows.insert("users", {"name": "Ada", "nickname": "A"})


def test_unknown_tables_fail(session: Session, catalog: TableCatalog) -> None:
    rows = SqlAlchemyRowRepository(session, catalog)

    with pytest.raises(NoSuchTableError):
        rows.exists("ghosts", 1)


def test_tables_without_id_column_fail(session: Session) -> None:
    catalog = TableCatalog(id_column="uid")
    rows = SqlAlchemyRowRepository(session, catalog)

    with pytest.raises(SeedSyncError, match="uid"):
        rows.exists("users", 1)


def test_ledger_repository_upserts(session: Session, catalog: TableCatalog) -> None:
    ledger = SqlAlchemyLedgerRepository(session, catalog)

    ledger.save(LedgerEntry(ADMIN, 1))
    ledger.save(LedgerEntry(LogicalIdentity("users", "guest"), 2))
    ledger.save(LedgerEntry(ADMIN, 5))

    assert set(ledger.load()) == {
        LedgerEntry(ADMIN, 5),
        LedgerEntry(LogicalIdentity("users", "guest"), 2),
    }
