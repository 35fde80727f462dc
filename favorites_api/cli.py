"""Command line entry point for running and preparing the favorites API.

Usage:
    movie-favorites-api serve --port 5000
    movie-favorites-api init-db
"""

from __future__ import annotations

import asyncio

import click
import uvicorn

from favorites_api.db.connection import create_engine, create_tables
from favorites_api.settings import AppSettings, get_settings


@click.group()
def cli() -> None:
    """Movie favorites persistence API."""


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST).")
@click.option("--port", default=None, type=int, help="Port to bind (defaults to PORT).")
@click.option("--reload", is_flag=True, help="Restart the server when code changes.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the API with uvicorn."""

    settings = get_settings()
    resolved_host = host or settings.host
    resolved_port = port or settings.port
    click.echo(f"Server running on http://{resolved_host}:{resolved_port}")
    uvicorn.run(
        "favorites_api.main:app",
        host=resolved_host,
        port=resolved_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


async def _init_db(settings: AppSettings) -> None:
    database_path = settings.database_path
    if database_path is not None:
        database_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(settings)
    try:
        await create_tables(engine)
    finally:
        await engine.dispose()


@cli.command("init-db")
def init_db() -> None:
    """Create the favorites table if it does not exist."""

    from favorites_api.main import validate_environment

    settings = get_settings()
    validate_environment(settings)
    asyncio.run(_init_db(settings))
    click.echo("✓ Favorites table ready")


if __name__ == "__main__":
    cli()
