"""Bulk data removal for ``drop``."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import MetaData, delete, text

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

log = getLogger(__name__)

_PUBLIC_TABLES = text(
    "SELECT table_name FROM information_schema.tables "
    "WHERE table_schema = 'public' AND table_type = 'BASE TABLE'"
)


def drop_all_data(engine: Engine) -> tuple[str, ...]:
    """Remove every row from every table, the ledger included.

    PostgreSQL gets a single ``TRUNCATE ... CASCADE`` over the public schema;
    other dialects delete table by table, children first.
    """

    with engine.begin() as connection:
        if connection.dialect.name == "postgresql":
            tables = _truncate_public_schema(connection)
        else:
            tables = _delete_reflected_tables(connection)
    log.info("Dropped all data from %s table(s)", len(tables))
    return tables


def _truncate_public_schema(connection: Connection) -> tuple[str, ...]:
    tables = tuple(connection.execute(_PUBLIC_TABLES).scalars().all())
    if not tables:
        return tables
    quote = connection.dialect.identifier_preparer.quote
    connection.execute(text(f"TRUNCATE {', '.join(quote(name) for name in tables)} CASCADE"))
    return tables


def _delete_reflected_tables(connection: Connection) -> tuple[str, ...]:
    metadata = MetaData()
    metadata.reflect(bind=connection)
    ordered = list(reversed(metadata.sorted_tables))
    for table in ordered:
        connection.execute(delete(table))
    return tuple(table.name for table in ordered)
