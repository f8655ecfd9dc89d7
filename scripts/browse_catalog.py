"""Browse the chart catalog and chart-view videos from the terminal."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from src.catalog.models import CATEGORY_LABELS, Song, category_color
from src.catalog.pipeline import (
    DEFAULT_CONSTANT_MAX,
    DEFAULT_CONSTANT_MIN,
    FilterCriteria,
    SortKey,
    index_songs,
    run_pipeline,
)
from src.errors import SongStoreError
from src.store.client import SongStore
from src.store.loader import load_session_catalog
from src.utils.config import settings
from src.utils.logging import setup_logging
from src.video.lookup import ChartVideoLookup
from src.video.youtube import YouTubeSearchClient

app = typer.Typer(help="Browse Arcaea songs by title, artist and difficulty")
console = Console()


async def _load(refresh: bool) -> list[Song]:
    store = SongStore.from_settings()
    return await load_session_catalog(store, refresh=refresh, ttl=settings.summary_cache_ttl_seconds)


@app.command()
def songs(
    query: str = typer.Option("", "--query", "-q", help="Text matched against title, artist, constant and level"),
    constant_min: float = typer.Option(DEFAULT_CONSTANT_MIN, "--min", help="Lowest constant (inclusive)"),
    constant_max: float = typer.Option(DEFAULT_CONSTANT_MAX, "--max", help="Highest constant (inclusive)"),
    category: Optional[list[str]] = typer.Option(None, "--category", "-c", help="Difficulty category; repeatable"),
    sort_key: SortKey = typer.Option(SortKey.CONSTANT, "--sort", help="Sort column"),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending instead of descending"),
    page: int = typer.Option(1, "--page", "-p", min=1),
    page_size: int = typer.Option(25, "--page-size", "-n", min=1),
    refresh: bool = typer.Option(False, "--refresh", help="Ignore the cached snapshot"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """List one page of songs matching the filters."""
    setup_logging("DEBUG" if verbose else settings.log_level, settings.logs_dir / "catalog.log")

    unknown = [label for label in category or [] if label not in CATEGORY_LABELS]
    if unknown:
        console.print(f"[red]Error:[/red] unknown category {', '.join(unknown)} (choose from {', '.join(CATEGORY_LABELS)})")
        raise typer.Exit(code=2)

    try:
        with console.status("Loading songs..."):
            catalog = asyncio.run(_load(refresh))
    except SongStoreError as e:
        console.print(f"[red]Failed to load songs:[/red] {e}")
        raise typer.Exit(code=1)

    criteria = FilterCriteria(
        query=query,
        constant_min=constant_min,
        constant_max=constant_max,
        categories=frozenset(category or []),
        sort_key=sort_key,
        descending=not ascending,
        page=page,
        page_size=page_size,
    )
    result = run_pipeline(index_songs(catalog), criteria)

    if result.total_count == 0:
        console.print("[yellow]No songs match your search.[/yellow]")
        return

    table = Table(title=f"Page {result.page} of {result.total_pages}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Artist")
    table.add_column("Difficulty")
    table.add_column("Constant", justify="right")
    table.add_column("Level", justify="right")
    table.add_column("Version")

    for position, song in enumerate(result.songs, start=max(result.first_index, 1)):
        color = category_color(song.difficulty)
        table.add_row(
            str(position),
            song.title,
            song.artist,
            f"[{color}]{song.difficulty}[/]",
            f"{song.constant:.1f}",
            song.level,
            song.version,
        )

    console.print(table)
    console.print(
        f"Showing {result.first_index} to {result.last_index} of {result.total_count} songs"
    )


@app.command()
def videos(
    title: str = typer.Argument(..., help="Song title"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Difficulty category"),
):
    """Look up chart-view videos for a song."""
    setup_logging(settings.log_level)

    lookup = ChartVideoLookup(YouTubeSearchClient(settings.youtube_api_key, timeout=settings.http_timeout))
    results = lookup.find_chart_videos(title, category)

    table = Table(title=f"Chart view: {title}")
    table.add_column("Title", style="bold")
    table.add_column("Channel")
    table.add_column("URL", style="cyan")
    for video in results:
        table.add_row(video.title, video.channel_title, video.video_url)
    console.print(table)


if __name__ == "__main__":
    app()
