"""Row creation for declared entities."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .errors import CircularReferenceError, UnknownReferenceError
from .ledger import LedgerEntry
from .resolver import ValueResolver

if TYPE_CHECKING:
    from .declarations import DeclarationSet, EntityDeclaration
    from .identity import LogicalIdentity
    from .ledger import IdentityLedger
    from .ports import SyncUnitOfWorkFactory

log = getLogger(__name__)


class EntityMaterializer:
    """Ensure a declared entity has a row and a ledger entry.

    The row insert and the ledger write share one unit of work. Fields are
    resolved before that unit of work opens, so references to entities that do
    not exist yet are materialised in their own units of work first.
    """

    def __init__(
        self,
        *,
        ledger: IdentityLedger,
        declarations: DeclarationSet,
        unit_of_work_factory: SyncUnitOfWorkFactory,
    ) -> None:
        self.ledger = ledger
        self.declarations = declarations
        self.unit_of_work_factory = unit_of_work_factory
        self.resolver = ValueResolver(ledger=ledger, materialize_reference=self._materialize_reference)
        self.materialized: list[LedgerEntry] = []
        self._in_progress: list[LogicalIdentity] = []

    def materialize(self, declaration: EntityDeclaration) -> int:
        """Create the entity's row unless the ledger already has one; return its id.

        The ledger row is upserted, so re-materialising a discarded identity
        overwrites its previous id.
        """

        identity = declaration.identity
        existing = self.ledger.get(identity)
        if existing is not None:
            return existing

        if identity in self._in_progress:
            raise CircularReferenceError([*self._in_progress, identity])

        self._in_progress.append(identity)
        try:
            values = self.resolver.resolve(declaration, include_defaults=True)
        finally:
            self._in_progress.pop()

        with self.unit_of_work_factory() as uow:
            row_id = uow.repositories.rows.insert(identity.table, values)
            entry = LedgerEntry(identity=identity, row_id=row_id)
            uow.repositories.ledger.save(entry)
            uow.commit()

        self.ledger.record(identity, row_id)
        self.materialized.append(entry)
        log.info("Created %s as row %s", identity, row_id)
        return row_id

    def _materialize_reference(self, target: LogicalIdentity, referrer: LogicalIdentity) -> int:
        declaration = self.declarations.get(target)
        if declaration is None:
            raise UnknownReferenceError(target, referrer=referrer)
        return self.materialize(declaration)
