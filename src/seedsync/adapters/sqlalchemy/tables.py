"""SQLAlchemy metadata for the ledger table and reflected target tables."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Column, MetaData, String, Table

from seedsync.config.sync import DEFAULT_ID_COLUMN, DEFAULT_LEDGER_TABLE
from seedsync.domain import SeedSyncError

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

log = getLogger(__name__)


def build_ledger_table(metadata: MetaData, name: str = DEFAULT_LEDGER_TABLE) -> Table:
    return Table(
        name,
        metadata,
        Column("table_name", String, primary_key=True),
        Column("entity_name", String, primary_key=True),
        Column("row_id", BigInteger, nullable=False),
    )


class TableCatalog:
    """Ledger table definition plus target tables reflected on first use."""

    def __init__(
        self,
        *,
        ledger_table: str = DEFAULT_LEDGER_TABLE,
        id_column: str = DEFAULT_ID_COLUMN,
    ) -> None:
        self.metadata = MetaData()
        self.ledger = build_ledger_table(self.metadata, ledger_table)
        self.id_column = id_column
        self._reflected = MetaData()

    def create_ledger(self, engine: Engine) -> None:
        self.ledger.create(engine, checkfirst=True)

    def target(self, name: str, connection: Connection) -> Table:
        table = self._reflected.tables.get(name)
        if table is None:
            log.debug("Reflecting table %s", name)
            table = Table(name, self._reflected, autoload_with=connection)
        return table

    def id_of(self, table: Table) -> Column[int]:
        try:
            return table.c[self.id_column]
        except KeyError:
            raise SeedSyncError(
                f"Table {table.name} has no {self.id_column!r} column to track rows by"
            ) from None
