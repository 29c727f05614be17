"""Declaration set: the desired state of every seeded entity."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from .errors import DeclarationError
from .identity import LogicalIdentity
from .values import parse_value

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from .values import FieldValue

RESERVED_PREFIX: Final[str] = "_"
DEFAULTS_KEY: Final[str] = "_defaults"


@dataclass(frozen=True, slots=True)
class EntityDeclaration:
    """One declared entity.

    ``fields`` always converge on every pass. ``defaults`` are only written when a
    row is created or when a pass runs in reset mode.
    """

    identity: LogicalIdentity
    fields: Mapping[str, FieldValue] = field(default_factory=dict)
    defaults: Mapping[str, FieldValue] = field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        identity: LogicalIdentity,
        raw: Mapping[str, object],
        *,
        base_dir: Path | None = None,
    ) -> EntityDeclaration:
        fields = _parse_fields(identity, raw, base_dir=base_dir)

        defaults: dict[str, FieldValue] = {}
        raw_defaults = raw.get(DEFAULTS_KEY)
        if raw_defaults is not None:
            if not isinstance(raw_defaults, Mapping):
                raise DeclarationError(f"{identity}: {DEFAULTS_KEY} must be a table of fields")
            defaults = _parse_fields(identity, raw_defaults, base_dir=base_dir)

        return cls(identity=identity, fields=fields, defaults=defaults)


def _parse_fields(
    identity: LogicalIdentity,
    raw: Mapping[str, object],
    *,
    base_dir: Path | None,
) -> dict[str, FieldValue]:
    fields: dict[str, FieldValue] = {}
    for key, value in raw.items():
        if key.startswith(RESERVED_PREFIX):
            continue
        if isinstance(value, Mapping):
            raise DeclarationError(f"{identity}: field {key!r} must be a scalar value")
        try:
            fields[key] = parse_value(value, base_dir=base_dir)
        except DeclarationError as exc:
            raise DeclarationError(f"{identity}: field {key!r}: {exc}") from exc
    return fields


class DeclarationSet:
    """Declared entities keyed by logical identity, in declaration order."""

    def __init__(self, declarations: Iterable[EntityDeclaration] = ()) -> None:
        self._by_identity: dict[LogicalIdentity, EntityDeclaration] = {}
        for declaration in declarations:
            self.add(declaration)

    @classmethod
    def from_mapping(
        cls,
        tables: Mapping[str, Mapping[str, Mapping[str, object]]],
        *,
        base_dir: Path | None = None,
    ) -> DeclarationSet:
        """Build from the parsed ``table -> entity name -> field mapping`` structure."""

        declarations = cls()
        for table, entities in tables.items():
            for name, raw in entities.items():
                identity = LogicalIdentity(table=table, name=name)
                declarations.add(EntityDeclaration.from_mapping(identity, raw, base_dir=base_dir))
        return declarations

    def add(self, declaration: EntityDeclaration) -> None:
        if declaration.identity in self._by_identity:
            raise DeclarationError(f"Entity {declaration.identity} is declared more than once")
        self._by_identity[declaration.identity] = declaration

    def merge(self, other: DeclarationSet) -> None:
        for declaration in other:
            self.add(declaration)

    def get(self, identity: LogicalIdentity) -> EntityDeclaration | None:
        return self._by_identity.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self._by_identity

    def __iter__(self) -> Iterator[EntityDeclaration]:
        return iter(self._by_identity.values())

    def __len__(self) -> int:
        return len(self._by_identity)

    @property
    def identities(self) -> tuple[LogicalIdentity, ...]:
        return tuple(self._by_identity)
