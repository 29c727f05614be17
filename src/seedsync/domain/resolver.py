"""Conversion of declared field values into bindable column values."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from .values import BooleanValue, FileValue, NumberValue, ReferenceValue, TextValue

if TYPE_CHECKING:
    from pathlib import Path

    from .declarations import EntityDeclaration
    from .identity import LogicalIdentity
    from .ledger import IdentityLedger
    from .values import FieldValue

log = getLogger(__name__)

type MaterializeReference = Callable[[LogicalIdentity, LogicalIdentity], int]
"""Called with ``(target, referrer)`` when ``target`` has no ledger entry yet."""


def read_file_literal(path: Path) -> str:
    """Return the file contents, or an empty string when it cannot be read."""

    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("Could not read %s, substituting empty content: %s", path, exc)
        return ""


class ValueResolver:
    """Resolve an entity's fields against the ledger of the running pass.

    Resolving a reference to an entity that has not been created yet calls back
    into the materializer, so this may insert rows as a side effect.
    """

    def __init__(
        self,
        *,
        ledger: IdentityLedger,
        materialize_reference: MaterializeReference,
    ) -> None:
        self.ledger = ledger
        self._materialize_reference = materialize_reference

    def resolve(
        self,
        declaration: EntityDeclaration,
        *,
        include_defaults: bool,
    ) -> dict[str, object]:
        owner = declaration.identity
        resolved = {
            column: self.resolve_value(value, owner=owner)
            for column, value in declaration.fields.items()
        }
        if include_defaults:
            for column, value in declaration.defaults.items():
                resolved[column] = self.resolve_value(value, owner=owner)
        return resolved

    def resolve_value(self, value: FieldValue, *, owner: LogicalIdentity) -> object:
        if isinstance(value, ReferenceValue):
            return self._resolve_reference(value.target, owner=owner)
        if isinstance(value, FileValue):
            return read_file_literal(value.path)
        if isinstance(value, TextValue):
            return value.text
        if isinstance(value, NumberValue):
            return value.number
        if isinstance(value, BooleanValue):
            return value.flag
        raise TypeError(f"Unsupported field value {value!r}")

    def _resolve_reference(self, target: LogicalIdentity, *, owner: LogicalIdentity) -> int:
        row_id = self.ledger.get(target)
        if row_id is not None:
            return row_id
        log.debug("%s references %s before it exists, creating it first", owner, target)
        return self._materialize_reference(target, owner)
