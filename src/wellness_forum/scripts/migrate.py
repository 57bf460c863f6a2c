# src/wellness_forum/scripts/migrate.py
"""Bring the configured database schema up to date."""

from __future__ import annotations

import argparse
import logging
import os

from alembic import command
from alembic.config import Config

from wellness_forum.core.settings import settings
from wellness_forum.db.session import create_tables, drop_tables

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))


def alembic_config() -> Config:
    cfg = Config(os.path.join(PROJECT_ROOT, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(PROJECT_ROOT, "migrations"))
    cfg.set_main_option("sqlalchemy.url", settings.effective_database_url)
    return cfg


def run_upgrade_head() -> None:
    """Apply every Alembic revision up to ``head``."""
    command.upgrade(alembic_config(), "head")
    logger.info("Database upgraded to head")


def reset_schema() -> None:
    """Drop and recreate every table from the ORM metadata (local development only)."""
    drop_tables()
    create_tables()
    logger.info("Recreated all tables")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Migrate the Wellness Forum database")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables from the models instead of running migrations.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())
    if args.reset:
        reset_schema()
    else:
        run_upgrade_head()


if __name__ == "__main__":
    main()
