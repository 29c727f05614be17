"""Load declaration files from a directory tree.

Every ``*.seed.toml`` file below the root contributes tables of entities::

    [users.admin]
    name = "Ada"

    [users.admin._defaults]
    role = "owner"

    [posts.welcome]
    author = "${users.admin}"
    body = "$file(posts/welcome.md)"
"""

from __future__ import annotations

import tomllib
from logging import getLogger
from pathlib import Path
from typing import Final

from pydantic import ValidationError

from seedsync.domain import DeclarationError, DeclarationSet

from .schema import declaration_document_adapter

DECLARATION_GLOB: Final[str] = "*.seed.toml"

log = getLogger(__name__)


def load_declaration_file(path: Path, *, base_dir: Path | None = None) -> DeclarationSet:
    """Parse one file. Relative ``$file(...)`` paths resolve against ``base_dir``."""

    try:
        with path.open("rb") as handle:
            raw = tomllib.load(handle)
    except OSError as exc:
        raise DeclarationError(f"Could not read {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise DeclarationError(f"Invalid TOML in {path}: {exc}") from exc

    try:
        document = declaration_document_adapter.validate_python(raw)
    except ValidationError as exc:
        raise DeclarationError(f"Invalid declarations in {path}: {exc}") from exc

    try:
        return DeclarationSet.from_mapping(document, base_dir=base_dir or path.parent)
    except DeclarationError as exc:
        raise DeclarationError(f"{path}: {exc}") from exc


def load_declarations(root: Path) -> DeclarationSet:
    """Merge every declaration file below ``root`` into one set."""

    resolved_root = root.expanduser().resolve()
    if not resolved_root.is_dir():
        raise DeclarationError(f"Declaration directory {resolved_root} does not exist")

    paths = sorted(resolved_root.rglob(DECLARATION_GLOB))
    if not paths:
        log.warning("No %s files found under %s", DECLARATION_GLOB, resolved_root)
    declarations = DeclarationSet()
    for path in paths:
        loaded = load_declaration_file(path, base_dir=resolved_root)
        try:
            declarations.merge(loaded)
        except DeclarationError as exc:
            raise DeclarationError(f"{path}: {exc}") from exc

    log.info(
        "Loaded %s entities from %s file(s) under %s",
        len(declarations),
        len(paths),
        resolved_root,
    )
    return declarations
