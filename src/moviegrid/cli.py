import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import typer
from rich.console import Console

from moviegrid.catalog.models import EnrichedMovie
from moviegrid.config import load_config
from moviegrid.db.conn import ensure_db
from moviegrid.errors import MovieGridError
from moviegrid.ingest.popular import ingest_popular
from moviegrid.service import MovieService, open_service

T = TypeVar("T")

app = typer.Typer(add_completion=False)
console = Console()

ConfigOption = typer.Option(None, "--config", "-c", help="Path to config.toml")


def _run(config: Path | None, op: Callable[[MovieService], Awaitable[T]]) -> T:
    cfg = load_config(config)

    async def _main() -> T:
        async with open_service(cfg) as service:
            return await op(service)

    try:
        return asyncio.run(_main())
    except (MovieGridError, RuntimeError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


def _print_movies(movies: list[EnrichedMovie]) -> None:
    if not movies:
        console.print("No movies.")
        return
    for movie in movies:
        year = f" ({movie.release_date[:4]})" if movie.release_date else ""
        rating = f"{movie.vote_average:.1f}" if movie.vote_average is not None else "-"
        provider = movie.streaming_provider.name if movie.streaming_provider else "-"
        trailer = movie.video_id or "-"
        console.print(
            f"{movie.id:>8}  {movie.title}{year}  rating={rating}  "
            f"trailer={trailer}  provider={provider}"
        )


@app.command()
def init_db(config: Path | None = ConfigOption) -> None:
    """Create the local movie store if it does not exist."""
    cfg = load_config(config)
    ensure_db(cfg.database_path)
    console.print(f"Database ready: {cfg.database_path}")


@app.command("ingest-popular")
def ingest(
    pages: int | None = None,
    refresh: bool = False,
    config: Path | None = ConfigOption,
) -> None:
    """Fill the local store from the catalog's popular listing."""
    cfg = load_config(config)
    console.print(f"Ingesting popular movies (pages={pages or cfg.ingest.max_pages}, refresh={refresh})")
    result = ingest_popular(cfg, pages=pages, refresh=refresh)
    console.print(
        f"Ingested: pages={result.pages} movies={result.movies} in_store={result.total_in_store}"
    )


@app.command()
def serve(
    host: str | None = None,
    port: int | None = None,
    config: Path | None = ConfigOption,
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from moviegrid.api.app import create_app

    cfg = load_config(config)
    uvicorn.run(
        create_app(cfg),
        host=host or cfg.server.host,
        port=port or cfg.server.port,
    )


@app.command()
def trending(config: Path | None = ConfigOption) -> None:
    """Print a landing page: random trending and top-rated picks."""
    _print_movies(_run(config, lambda svc: svc.landing_page()))


@app.command()
def popular(config: Path | None = ConfigOption) -> None:
    """Print random picks from the local popular store."""
    _print_movies(_run(config, lambda svc: svc.popular()))


@app.command()
def movie(movie_id: int, config: Path | None = ConfigOption) -> None:
    """Print one enriched movie by catalog id."""
    _print_movies([_run(config, lambda svc: svc.movie(movie_id))])


@app.command()
def trailer(query: str, config: Path | None = ConfigOption) -> None:
    """Resolve a trailer video id for a free-text query."""
    video_id = _run(config, lambda svc: svc.trailer(query))
    if video_id is None:
        console.print("No videoId found.")
        raise typer.Exit(code=1)
    console.print(video_id)


@app.command()
def search(query: str, config: Path | None = ConfigOption) -> None:
    """Ask the LLM for movies matching a description."""
    _print_movies(_run(config, lambda svc: svc.search(query)))


if __name__ == "__main__":
    app()
