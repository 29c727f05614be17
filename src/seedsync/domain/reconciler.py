"""One synchronisation pass from declarations to database rows.

Phases run strictly in order and the first error aborts the pass:

1. load the ledger
2. create every declared entity that has no ledger entry
3. recreate rows that the ledger tracks but that were deleted out of band
4. update every tracked row with its declared fields

Defaults are part of every insert but only part of updates in reset mode, so
out-of-band edits to default-only columns survive ordinary passes.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .ledger import IdentityLedger
from .materializer import EntityMaterializer

if TYPE_CHECKING:
    from .declarations import DeclarationSet
    from .identity import LogicalIdentity
    from .ports import SyncUnitOfWorkFactory

log = getLogger(__name__)


@dataclass(slots=True)
class SyncResult:
    """Counts of the work one pass performed."""

    created: int = 0
    recreated: int = 0
    updated: int = 0
    skipped: int = 0


class Reconciler:
    def __init__(self, *, unit_of_work_factory: SyncUnitOfWorkFactory) -> None:
        self.unit_of_work_factory = unit_of_work_factory

    def load_ledger(self) -> IdentityLedger:
        with self.unit_of_work_factory() as uow:
            entries = uow.repositories.ledger.load()
        return IdentityLedger(entries)

    def sync(self, declarations: DeclarationSet, *, reset: bool = False) -> SyncResult:
        ledger = self.load_ledger()
        log.info(
            "Loaded %s declared entities and %s ledger entries", len(declarations), len(ledger)
        )
        materializer = EntityMaterializer(
            ledger=ledger,
            declarations=declarations,
            unit_of_work_factory=self.unit_of_work_factory,
        )
        result = SyncResult()

        self._create_missing(declarations, materializer)
        result.created = len(materializer.materialized)
        result.recreated = self._recreate_deleted(declarations, materializer)
        result.updated, result.skipped = self._update_existing(
            declarations, materializer, reset=reset
        )
        return result

    def _create_missing(
        self,
        declarations: DeclarationSet,
        materializer: EntityMaterializer,
    ) -> None:
        for declaration in declarations:
            if declaration.identity not in materializer.ledger:
                materializer.materialize(declaration)

    def _recreate_deleted(
        self,
        declarations: DeclarationSet,
        materializer: EntityMaterializer,
    ) -> int:
        vanished: list[LogicalIdentity] = []
        for entry in materializer.ledger.entries():
            if entry.identity not in declarations:
                continue
            with self.unit_of_work_factory() as uow:
                exists = uow.repositories.rows.exists(entry.identity.table, entry.row_id)
            log.debug("%s row %s exists=%s", entry.identity, entry.row_id, exists)
            if not exists:
                log.info("Row %s of %s was deleted, recreating it", entry.row_id, entry.identity)
                vanished.append(entry.identity)

        # referrers recreated before their target must not see its stale id
        for identity in vanished:
            materializer.ledger.discard(identity)

        recreated_before = len(materializer.materialized)
        for identity in vanished:
            declaration = declarations.get(identity)
            if declaration is not None and identity not in materializer.ledger:
                materializer.materialize(declaration)
        return len(materializer.materialized) - recreated_before

    def _update_existing(
        self,
        declarations: DeclarationSet,
        materializer: EntityMaterializer,
        *,
        reset: bool,
    ) -> tuple[int, int]:
        updated = 0
        skipped = 0
        for entry in materializer.ledger.entries():
            declaration = declarations.get(entry.identity)
            if declaration is None:
                log.warning(
                    "%s is tracked but no longer declared, leaving row %s alone",
                    entry.identity,
                    entry.row_id,
                )
                skipped += 1
                continue
            values = materializer.resolver.resolve(declaration, include_defaults=reset)
            if not values:
                continue
            with self.unit_of_work_factory() as uow:
                uow.repositories.rows.update(entry.identity.table, entry.row_id, values)
                uow.commit()
            log.info("Updated %s (row %s)", entry.identity, entry.row_id)
            updated += 1
        return updated, skipped
