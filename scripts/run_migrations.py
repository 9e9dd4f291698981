#!/usr/bin/env python3
"""Apply alembic migrations to the configured database.

    scripts/run_migrations.py              # upgrade to head
    scripts/run_migrations.py c5a8f0e3d217 # upgrade to a specific revision
    scripts/run_migrations.py --sql        # print the SQL instead of running it

The unique-email revision refuses to apply while duplicate accounts exist;
run ``scripts/resolve_duplicates.py --all`` first.
"""

import argparse
import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config

from provision.config import Settings
from provision.util.observability import init_observability

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply database migrations.")
    parser.add_argument("revision", nargs="?", default="head")
    parser.add_argument(
        "--sql", action="store_true", help="emit SQL (offline mode) without connecting"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = Settings()
    init_observability(settings)

    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(ALEMBIC_INI.parent / "migrations"))

    with logfire.span("migrations.upgrade", revision=args.revision, offline=args.sql):
        try:
            command.upgrade(config, args.revision, sql=args.sql)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                revision=args.revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            raise

    logfire.info("Database is at revision", revision=args.revision)
    return 0


if __name__ == "__main__":
    sys.exit(main())
