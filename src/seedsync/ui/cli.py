from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from seedsync.adapters.declarations import load_declarations
from seedsync.app import drop_all, initialize, sync
from seedsync.config import configure_logging, get_sync_config
from seedsync.domain import DeclarationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise declared seed data")
    parser.add_argument(
        "--db",
        type=str,
        help="Database connection URI (defaults to DATABASE_URI or a local SQLite file)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Create the ledger table if it does not exist")
    subparsers.add_parser("drop", help="Drop all data from every table")

    sync_parser = subparsers.add_parser("sync", help="Sync declarations into the database")
    sync_parser.add_argument(
        "--path",
        type=Path,
        help="Directory containing *.seed.toml declarations (defaults to config)",
    )
    sync_parser.add_argument(
        "--reset",
        action="store_true",
        help="Reset all specified fields, defaults included",
    )
    sync_parser.add_argument(
        "--clean",
        action="store_true",
        help="Drop all data and reset the database to the specified state",
    )

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "init":
            initialize(database_uri=parsed_args.db)
        elif parsed_args.command == "drop":
            drop_all(database_uri=parsed_args.db)
        elif parsed_args.command == "sync":
            # declarations must parse before any database mutation
            declarations = load_declarations(
                parsed_args.path or get_sync_config().declarations_dir
            )
            if parsed_args.clean:
                drop_all(database_uri=parsed_args.db)
            sync(
                declarations=declarations,
                reset=parsed_args.reset,
                database_uri=parsed_args.db,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except DeclarationError:
        log.exception("Invalid declarations")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
