#!/usr/bin/env python3
"""
CLI entry point for users API database migrations.
"""

import os
import sys
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from users_api import __version__
from users_api.logging import configure_logging, get_logger

logger = get_logger(__name__)

# src/users_api/database/cli.py -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    """Load alembic.ini from USERS_API_ALEMBIC_INI or the project root."""
    alembic_ini = Path(os.getenv("USERS_API_ALEMBIC_INI", PROJECT_ROOT / "alembic.ini"))

    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(alembic_ini.parent / "alembic"))
    return config


def _run(action: str, fn, *args, **kwargs) -> None:
    try:
        fn(get_alembic_config(), *args, **kwargs)
    except Exception as e:
        logger.error(f"{action} failed", error=str(e))
        sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.option(
    "--database-url",
    envvar="USERS_API_DATABASE_URL",
    default=None,
    help="Database URL to migrate (default: from settings)",
)
@click.version_option(version=__version__, prog_name="users-api-migrate")
def main(log_level: str, database_url: str | None) -> None:
    """Users API database migration management."""
    configure_logging(debug=(log_level == "debug"), level=log_level)
    if database_url:
        # alembic/env.py reads the URL through the same variable
        os.environ["USERS_API_DATABASE_URL"] = database_url


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade database to a revision (default: head)."""
    logger.info("Upgrading database", revision=revision)
    _run("Database upgrade", command.upgrade, revision)
    logger.info("Database upgrade completed successfully")


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade database to a revision (default: -1)."""
    logger.info("Downgrading database", revision=revision)
    _run("Database downgrade", command.downgrade, revision)
    logger.info("Database downgrade completed successfully")


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Auto-generate migration")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration revision."""
    logger.info("Creating new migration", message=message, autogenerate=autogenerate)
    _run("Migration creation", command.revision, message=message, autogenerate=autogenerate)


@main.command()
def current() -> None:
    """Show current database revision."""
    _run("Reading current revision", command.current)


@main.command()
def history() -> None:
    """Show migration history."""
    _run("Reading migration history", command.history)


if __name__ == "__main__":
    main()
