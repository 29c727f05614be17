"""Logical entity identity."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import DeclarationError


@dataclass(frozen=True, slots=True, order=True)
class LogicalIdentity:
    """The ``(table, name)`` pair declarations use to refer to an entity."""

    table: str
    name: str

    def __str__(self) -> str:
        return f"{self.table}.{self.name}"

    @classmethod
    def parse(cls, value: str) -> LogicalIdentity:
        """Parse ``table.name``; the entity name may itself contain dots."""

        table, sep, name = value.partition(".")
        if not sep or not table or not name:
            raise DeclarationError(f"Invalid entity reference {value!r}, expected 'table.name'")
        return cls(table=table, name=name)
