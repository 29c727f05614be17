from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, insert, select

from seedsync.adapters.sqlalchemy import TableCatalog, drop_all_data
from tests.helpers.schema import posts_table, users_table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_drop_all_data_empties_every_table(sqlite_engine: Engine) -> None:
    catalog = TableCatalog()
    catalog.create_ledger(sqlite_engine)
    with sqlite_engine.begin() as connection:
        user_id = connection.execute(
            insert(users_table).values(name="Ada").returning(users_table.c.id)
        ).scalar_one()
        connection.execute(insert(posts_table).values(author=user_id, title="Hi"))
        connection.execute(
            insert(catalog.ledger).values(table_name="users", entity_name="admin", row_id=user_id)
        )

    tables = drop_all_data(sqlite_engine)

    assert set(tables) >= {"users", "posts", catalog.ledger.name}
    assert tables.index("posts") < tables.index("users")
    with sqlite_engine.connect() as connection:
        for table in (users_table, posts_table, catalog.ledger):
            assert connection.execute(select(func.count()).select_from(table)).scalar_one() == 0
