"""Synchronization defaults."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

DEFAULT_LEDGER_TABLE: Final[str] = "_seedsync_ledger"
DEFAULT_ID_COLUMN: Final[str] = "id"
DEFAULT_DECLARATIONS_DIR: Final[str] = "."

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True, slots=True)
class SyncConfig:
    declarations_dir: Path = Path(DEFAULT_DECLARATIONS_DIR)
    ledger_table: str = DEFAULT_LEDGER_TABLE
    id_column: str = DEFAULT_ID_COLUMN


def _identifier(name: str, value: str) -> str:
    if not _IDENTIFIER.match(value):
        raise ConfigurationError(f"{name} must be a plain SQL identifier, got {value!r}")
    return value


def get_sync_config() -> SyncConfig:
    declarations_dir = optional_env_var("SEEDSYNC_DECLARATIONS_DIR") or DEFAULT_DECLARATIONS_DIR
    ledger_table = optional_env_var("SEEDSYNC_LEDGER_TABLE") or DEFAULT_LEDGER_TABLE
    id_column = optional_env_var("SEEDSYNC_ID_COLUMN") or DEFAULT_ID_COLUMN
    return SyncConfig(
        declarations_dir=Path(declarations_dir),
        ledger_table=_identifier("SEEDSYNC_LEDGER_TABLE", ledger_table),
        id_column=_identifier("SEEDSYNC_ID_COLUMN", id_column),
    )
