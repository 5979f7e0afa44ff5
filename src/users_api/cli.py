#!/usr/bin/env python3
"""
Main CLI entry point for the users API server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from users_api import __version__
from users_api.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="users-api")
def cli() -> None:
    """Users API CLI - run the server and manage users."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the users API server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info(
        "Starting users API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Child processes re-import the app, so settings travel through the environment
    if log_level == "debug":
        os.environ["USERS_API_DEBUG"] = "true"
        os.environ["USERS_API_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("USERS_API_DEBUG", "false")
        os.environ.setdefault("USERS_API_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "users_api.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
            )
        else:
            from users_api.api.app import app

            uvicorn.run(app, host=host, port=port, log_level=log_level, access_log=True)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.group()
def user() -> None:
    """Manage users in the database."""
    pass


@user.command("create")
@click.option("--name", required=True, help="Display name of the user")
@click.option("--email", required=True, help="Email address of the user")
def create_user(name: str, email: str) -> None:
    """Create a new user."""
    from users_api.database.connection import dispose_database, get_async_session
    from users_api.users import repository

    configure_logging()

    async def do_create() -> list[str]:
        try:
            async with get_async_session() as db:
                record, errors = await repository.create_user(db, name=name, email=email)
        finally:
            await dispose_database()

        if not errors:
            click.echo(f"✓ User created: {record.id}")
            click.echo(f"  Name: {record.name}")
            click.echo(f"  Email: {record.email}")
        return errors

    errors = asyncio.run(do_create())
    if errors:
        for message in errors:
            click.echo(f"✗ {message}", err=True)
        sys.exit(1)


@user.command("list")
def list_users() -> None:
    """List all users in the database."""
    from users_api.database.connection import dispose_database, get_async_session
    from users_api.users import repository

    configure_logging()

    async def do_list() -> None:
        try:
            async with get_async_session() as db:
                users = await repository.list_users(db)
        finally:
            await dispose_database()

        if not users:
            click.echo("No users found.")
            return

        click.echo(f"Found {len(users)} user(s):")
        click.echo()
        for u in users:
            click.echo(f"  ID: {u.id}")
            click.echo(f"  Name: {u.name}")
            click.echo(f"  Email: {u.email}")
            click.echo(f"  Created: {u.created_at}")
            click.echo()

    asyncio.run(do_list())


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
