from __future__ import annotations

import pytest

from seedsync.domain import (
    CircularReferenceError,
    DeclarationSet,
    EntityMaterializer,
    IdentityLedger,
    LedgerEntry,
    LogicalIdentity,
    UnknownReferenceError,
)
from tests.helpers.fakes import FakeDatabase, FakeUnitOfWork

ADMIN = LogicalIdentity("users", "admin")
WELCOME = LogicalIdentity("posts", "welcome")


def _materializer(
    declarations: DeclarationSet,
    database: FakeDatabase,
    ledger: IdentityLedger | None = None,
) -> EntityMaterializer:
    return EntityMaterializer(
        ledger=ledger if ledger is not None else IdentityLedger(),
        declarations=declarations,
        unit_of_work_factory=lambda: FakeUnitOfWork(database),
    )


def test_materialize_inserts_row_and_records_identity() -> None:
    declarations = DeclarationSet.from_mapping(
        {"users": {"admin": {"name": "Ada", "_defaults": {"role": "owner"}}}}
    )
    database = FakeDatabase()
    materializer = _materializer(declarations, database)

    admin = declarations.get(ADMIN)
    assert admin is not None
    row_id = materializer.materialize(admin)

    assert database.row("users", row_id) == {"name": "Ada", "role": "owner"}
    assert database.ledger == {ADMIN: row_id}
    assert materializer.ledger.get(ADMIN) == row_id
    assert materializer.materialized == [LedgerEntry(ADMIN, row_id)]
    assert database.commits == 1


def test_materialize_is_a_noop_for_known_identities() -> None:
    declarations = DeclarationSet.from_mapping({"users": {"admin": {"name": "Ada"}}})
    database = FakeDatabase()
    materializer = _materializer(declarations, database, IdentityLedger([LedgerEntry(ADMIN, 3)]))

    admin = declarations.get(ADMIN)
    assert admin is not None

    assert materializer.materialize(admin) == 3
    assert database.statements == []


def test_discarded_identity_gets_a_new_row_and_entry() -> None:
    declarations = DeclarationSet.from_mapping({"users": {"admin": {"name": "Ada"}}})
    database = FakeDatabase(ledger={ADMIN: 3})
    materializer = _materializer(declarations, database, IdentityLedger([LedgerEntry(ADMIN, 3)]))

    admin = declarations.get(ADMIN)
    assert admin is not None
    materializer.ledger.discard(ADMIN)
    row_id = materializer.materialize(admin)

    assert row_id != 3
    assert database.ledger == {ADMIN: row_id}
    assert materializer.ledger.get(ADMIN) == row_id


def test_forward_reference_creates_the_dependency_first() -> None:
    declarations = DeclarationSet.from_mapping(
        {
            "posts": {"welcome": {"author": "${users.admin}", "title": "Hi"}},
            "users": {"admin": {"name": "Ada"}},
        }
    )
    database = FakeDatabase()
    materializer = _materializer(declarations, database)

    welcome = declarations.get(WELCOME)
    assert welcome is not None
    post_id = materializer.materialize(welcome)

    admin_id = materializer.ledger.get(ADMIN)
    assert admin_id is not None
    assert [table for _, table, _ in database.inserts()] == ["users", "posts"]
    assert database.row("posts", post_id) == {"author": admin_id, "title": "Hi"}


def test_reference_to_undeclared_entity_fails() -> None:
    declarations = DeclarationSet.from_mapping(
        {"posts": {"welcome": {"author": "${users.ghost}"}}}
    )
    database = FakeDatabase()
    materializer = _materializer(declarations, database)

    welcome = declarations.get(WELCOME)
    assert welcome is not None
    with pytest.raises(UnknownReferenceError) as excinfo:
        materializer.materialize(welcome)

    assert excinfo.value.target == LogicalIdentity("users", "ghost")
    assert excinfo.value.referrer == WELCOME
    assert database.statements == []


def test_reference_cycle_is_reported() -> None:
    declarations = DeclarationSet.from_mapping(
        {
            "users": {"admin": {"favourite": "${posts.welcome}"}},
            "posts": {"welcome": {"author": "${users.admin}"}},
        }
    )
    database = FakeDatabase()
    materializer = _materializer(declarations, database)

    admin = declarations.get(ADMIN)
    assert admin is not None
    with pytest.raises(CircularReferenceError) as excinfo:
        materializer.materialize(admin)

    assert excinfo.value.chain == (ADMIN, WELCOME, ADMIN)
    assert "users.admin -> posts.welcome -> users.admin" in str(excinfo.value)
    assert database.inserts() == []


def test_self_reference_is_a_cycle() -> None:
    declarations = DeclarationSet.from_mapping({"users": {"admin": {"boss": "${users.admin}"}}})
    materializer = _materializer(declarations, FakeDatabase())

    admin = declarations.get(ADMIN)
    assert admin is not None
    with pytest.raises(CircularReferenceError):
        materializer.materialize(admin)


def test_insert_errors_propagate_without_ledger_entry() -> None:
    declarations = DeclarationSet.from_mapping({"users": {"admin": {"name": "Ada"}}})
    database = FakeDatabase()

    class _FailingUnitOfWork(FakeUnitOfWork):
        def __init__(self, database: FakeDatabase) -> None:
            super().__init__(database)

            def fail(table: str, values: object) -> int:
                raise RuntimeError("insert failed")

            self.repositories.rows.insert = fail  # type: ignore[method-assign]

    materializer = EntityMaterializer(
        ledger=IdentityLedger(),
        declarations=declarations,
        unit_of_work_factory=lambda: _FailingUnitOfWork(database),
    )

    admin = declarations.get(ADMIN)
    assert admin is not None
    with pytest.raises(RuntimeError, match="insert failed"):
        materializer.materialize(admin)

    assert ADMIN not in materializer.ledger
    assert database.ledger == {}
