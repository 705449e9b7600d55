#!/usr/bin/env python3
"""Upgrade the database schema to the latest Alembic revision.

Run before the API starts; a failed migration stops the deploy.
"""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config

from rally.config import Settings
from rally.util.logging import setup_logging
from rally.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def main(revision: str = "head") -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    with logfire.span("run_migrations", revision=revision):
        try:
            config = Config(str(ALEMBIC_INI))
            command.upgrade(config, revision)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                revision=revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            raise

    logfire.info("Database schema is up to date", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
