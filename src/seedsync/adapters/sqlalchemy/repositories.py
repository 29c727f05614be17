"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import insert, select, update

from seedsync.domain import LedgerEntry, LogicalIdentity

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy import CursorResult, Table
    from sqlalchemy.orm import Session

    from .tables import TableCatalog


class SqlAlchemyRowRepository:
    """Rows of target tables, addressed by their id column.

    Values are always bound as parameters; declared strings reach the database
    verbatim.
    """

    def __init__(self, session: Session, catalog: TableCatalog) -> None:
        self.session = session
        self.catalog = catalog

    def _table(self, name: str) -> Table:
        return self.catalog.target(name, self.session.connection())

    def insert(self, table: str, values: Mapping[str, object]) -> int:
        target = self._table(table)
        stmt = insert(target).returning(self.catalog.id_of(target))
        if values:
            stmt = stmt.values(dict(values))
        return int(self.session.execute(stmt).scalar_one())

    def exists(self, table: str, row_id: int) -> bool:
        target = self._table(table)
        id_column = self.catalog.id_of(target)
        stmt = select(id_column).where(id_column == row_id).limit(1)
        return self.session.execute(stmt).first() is not None

    def update(self, table: str, row_id: int, values: Mapping[str, object]) -> None:
        target = self._table(table)
        stmt = (
            update(target)
            .where(self.catalog.id_of(target) == row_id)
            .values(dict(values))
        )
        self.session.execute(stmt)


class SqlAlchemyLedgerRepository:
    def __init__(self, session: Session, catalog: TableCatalog) -> None:
        self.session = session
        self.ledger_table = catalog.ledger

    def load(self) -> tuple[LedgerEntry, ...]:
        columns = self.ledger_table.c
        stmt = select(columns.table_name, columns.entity_name, columns.row_id).order_by(
            columns.table_name, columns.entity_name
        )
        return tuple(
            LedgerEntry(
                identity=LogicalIdentity(table=table_name, name=entity_name),
                row_id=int(row_id),
            )
            for table_name, entity_name, row_id in self.session.execute(stmt).all()
        )

    def save(self, entry: LedgerEntry) -> None:
        columns = self.ledger_table.c
        stmt = (
            update(self.ledger_table)
            .where(columns.table_name == entry.identity.table)
            .where(columns.entity_name == entry.identity.name)
            .values(row_id=entry.row_id)
        )
        result = cast("CursorResult[Any]", self.session.execute(stmt))
        if result.rowcount == 0:
            self.session.execute(
                insert(self.ledger_table).values(
                    table_name=entry.identity.table,
                    entity_name=entry.identity.name,
                    row_id=entry.row_id,
                )
            )


if TYPE_CHECKING:
    from seedsync.domain.ports import LedgerRepository, RowRepository

    _session_stub = cast("Session", object())
    _catalog_stub = cast("TableCatalog", object())
    _row_repo_check: RowRepository = SqlAlchemyRowRepository(_session_stub, _catalog_stub)
    _ledger_repo_check: LedgerRepository = SqlAlchemyLedgerRepository(
        _session_stub, _catalog_stub
    )
