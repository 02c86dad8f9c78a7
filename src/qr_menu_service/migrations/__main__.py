"""Command line entry point: ``python -m qr_menu_service.migrations``."""

import argparse
import logging
import os
import sys

from qr_menu_service.config import create_dynamodb_handle, create_migration_runner
from qr_menu_service.exceptions import MigrationError
from qr_menu_service.observability import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m qr_menu_service.migrations",
        description="Inspect or apply versioned data migrations",
    )
    parser.add_argument(
        "command",
        choices=["status", "apply"],
        help="status: list applied and pending migrations; apply: run pending ones",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    handle = create_dynamodb_handle()
    runner = create_migration_runner(handle.connect())

    try:
        if args.command == "status":
            for entry in runner.applied():
                print(f"applied  {entry.version}  {entry.applied_at.isoformat()}  {entry.description}")
            for migration in runner.pending():
                print(f"pending  {migration.version}  {migration.description}")
            return 0

        recorded = runner.apply_pending()
    except MigrationError as e:
        logger.error(str(e))
        return 1

    for entry in recorded:
        print(f"applied  {entry.version}  ({entry.records_changed} records changed)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
