#!/usr/bin/env python3
"""Command line client for the movie favorites API.

Usage:
    movie-favorites list
    movie-favorites add 42 "The Answer" --genre 18 --genre 878
    movie-favorites remove 42
    movie-favorites check 42
    movie-favorites count
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click

from favorites_client.api import FavoritesApiClient
from favorites_client.config import ClientSettings
from favorites_client.errors import NetworkError
from favorites_client.storage import LocalFavoritesStore
from favorites_client.synchronizer import FavoritesSynchronizer

T = TypeVar("T")


def _run(
    settings: ClientSettings,
    action: Callable[[FavoritesSynchronizer], Awaitable[T]],
) -> T:
    """Execute ``action`` against a synchronizer wired to ``settings``."""

    async def _runner() -> T:
        async with FavoritesApiClient(settings) as api:
            synchronizer = FavoritesSynchronizer(
                api, LocalFavoritesStore(settings.fallback_path)
            )
            result = await action(synchronizer)
            _report_error(synchronizer)
            return result

    return asyncio.run(_runner())


def _report_error(synchronizer: FavoritesSynchronizer) -> None:
    if synchronizer.error is None:
        return
    click.echo(
        click.style(f"Warning: {synchronizer.error}", fg="yellow"),
        err=True,
    )
    synchronizer.clear_error()


def _format_movie(movie: dict[str, Any]) -> str:
    release = movie.get("release_date") or "unknown"
    return f"{movie.get('id'):>8}  {movie.get('title')}  ({release})"


@click.group()
@click.option(
    "--api-url",
    envvar="FAVORITES_API_BASE_URL",
    default=ClientSettings.api_base_url,
    show_default=True,
    help="Base URL of the favorites API.",
)
@click.option(
    "--fallback",
    envvar="FAVORITES_FALLBACK_PATH",
    default=ClientSettings.fallback_path,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="JSON file holding the offline copy of the favorites list.",
)
@click.pass_context
def cli(ctx: click.Context, api_url: str, fallback: str) -> None:
    """Manage favorite movies from the terminal."""

    defaults = ClientSettings.from_env()
    ctx.obj = ClientSettings(
        api_base_url=api_url,
        fallback_path=fallback,
        request_timeout=defaults.request_timeout,
    )


@cli.command("list")
@click.pass_obj
def list_favorites(settings: ClientSettings) -> None:
    """Show every favorite, newest first."""

    async def _action(synchronizer: FavoritesSynchronizer) -> list[dict[str, Any]]:
        await synchronizer.initialize()
        return synchronizer.favorites

    favorites = _run(settings, _action)
    if not favorites:
        click.echo("No favorite movies yet.")
        return
    for movie in favorites:
        click.echo(_format_movie(movie))


@cli.command()
@click.argument("movie_id", type=int)
@click.argument("title")
@click.option("--genre", "genre_ids", type=int, multiple=True, help="Genre id (repeatable).")
@click.option("--release-date", default=None)
@click.option("--overview", default=None)
@click.option("--poster-path", default=None)
@click.pass_obj
def add(
    settings: ClientSettings,
    movie_id: int,
    title: str,
    genre_ids: tuple[int, ...],
    release_date: str | None,
    overview: str | None,
    poster_path: str | None,
) -> None:
    """Add a movie to the favorites list."""

    movie = {
        "id": movie_id,
        "title": title,
        "genre_ids": list(genre_ids),
        "release_date": release_date,
        "overview": overview,
        "poster_path": poster_path,
    }

    async def _action(synchronizer: FavoritesSynchronizer) -> None:
        await synchronizer.initialize()
        await synchronizer.add_to_favorites(movie)

    _run(settings, _action)
    click.echo(f"★ {title} is in your favorites")


@cli.command()
@click.argument("movie_id", type=int)
@click.pass_obj
def remove(settings: ClientSettings, movie_id: int) -> None:
    """Remove a movie from the favorites list."""

    async def _action(synchronizer: FavoritesSynchronizer) -> None:
        await synchronizer.initialize()
        await synchronizer.remove_from_favorites(movie_id)

    _run(settings, _action)
    click.echo(f"Removed movie {movie_id} from your favorites")


@cli.command()
@click.argument("movie_id", type=int)
@click.pass_obj
def check(settings: ClientSettings, movie_id: int) -> None:
    """Tell whether a movie is a favorite."""

    async def _action(synchronizer: FavoritesSynchronizer) -> bool:
        await synchronizer.initialize()
        return await synchronizer.check_is_favorite(movie_id)

    is_favorite = _run(settings, _action)
    click.echo("yes" if is_favorite else "no")


@cli.command()
@click.pass_obj
def count(settings: ClientSettings) -> None:
    """Print how many favorites are stored."""

    async def _action(synchronizer: FavoritesSynchronizer) -> int:
        await synchronizer.initialize()
        return await synchronizer.get_favorites_count()

    click.echo(str(_run(settings, _action)))


@cli.command()
@click.pass_obj
def health(settings: ClientSettings) -> None:
    """Probe the API and exit non-zero when it is unreachable."""

    async def _check_health() -> dict[str, Any]:
        async with FavoritesApiClient(settings) as api:
            return await api.health()

    try:
        payload = asyncio.run(_check_health())
    except NetworkError as exc:
        raise click.ClickException(f"API unavailable: {exc}") from exc
    click.echo(f"{payload['status']} at {payload['timestamp']}")


if __name__ == "__main__":
    cli()
