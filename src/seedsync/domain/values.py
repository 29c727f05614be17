"""Declared field values.

Raw values coming out of declaration files are parsed exactly once into one of
the variants below. Resolution code dispatches on the variant type and never
re-inspects strings for marker syntax.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import DeclarationError
from .identity import LogicalIdentity

REFERENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z0-9_.-]+)\}")
FILE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$file\(([A-Za-z0-9_/.-]+)\)")


@dataclass(frozen=True, slots=True)
class TextValue:
    text: str


@dataclass(frozen=True, slots=True)
class NumberValue:
    number: int | float


@dataclass(frozen=True, slots=True)
class BooleanValue:
    flag: bool


@dataclass(frozen=True, slots=True)
class ReferenceValue:
    """Points at another entity; resolves to that entity's row id."""

    target: LogicalIdentity


@dataclass(frozen=True, slots=True)
class FileValue:
    """Substitutes the contents of ``path`` as a string."""

    path: Path


type FieldValue = TextValue | NumberValue | BooleanValue | ReferenceValue | FileValue


def parse_value(raw: object, *, base_dir: Path | None = None) -> FieldValue:
    """Turn one raw declared value into its variant.

    ``base_dir`` anchors relative ``$file(...)`` paths; without it they stay
    relative to the working directory.
    """

    # bool is a subclass of int, check it first
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, int | float):
        return NumberValue(raw)
    if isinstance(raw, str):
        return _parse_string(raw, base_dir=base_dir)
    raise DeclarationError(f"Unsupported field value {raw!r} of type {type(raw).__name__}")


def _parse_string(raw: str, *, base_dir: Path | None) -> FieldValue:
    reference = REFERENCE_PATTERN.search(raw)
    if reference is not None:
        return ReferenceValue(LogicalIdentity.parse(reference.group(1)))

    file_marker = FILE_PATTERN.search(raw)
    if file_marker is not None:
        path = Path(file_marker.group(1))
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return FileValue(path)

    return TextValue(raw)
