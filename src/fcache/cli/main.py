"""
CLI for the file cache.

Commands:
    fcache config - Show current configuration
    fcache get KEY - Print a cached value as JSON
    fcache set KEY VALUE - Store a JSON value
    fcache delete KEY - Remove an entry
    fcache path KEY - Print the backing file of a key
    fcache version - Print version
"""

from __future__ import annotations

from typing import Annotated, Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table

from fcache import __version__
from fcache.cache.file_cache import FileCache
from fcache.config import Settings, clear_settings_cache, get_settings
from fcache.exceptions import CacheEncodeError, FCacheError
from fcache.logging import setup_logging

app = typer.Typer(
    name="fcache",
    help="File cache - inspect and edit a sharded on-disk cache",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _load_settings() -> Settings:
    clear_settings_cache()
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    return settings


def _open_cache() -> FileCache:
    """Open the configured cache, exiting with an error if it is unusable."""
    settings = _load_settings()
    try:
        return FileCache.from_settings(settings)
    except FCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = _load_settings()

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.redacted_display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)


@app.command()
def get(
    key: Annotated[str, typer.Argument(help="Cache key")],
    ttl: Annotated[
        Optional[int],
        typer.Option("--ttl", "-t", help="Lifetime in seconds (default: CACHE_LIFE)"),
    ] = None,
) -> None:
    """Print a cached value as JSON."""
    cache = _open_cache()
    value = cache.get(key, ttl)
    if value is None:
        error_console.print(f"[yellow]Miss:[/yellow] {key}")
        raise typer.Exit(1)

    console.print_json(orjson.dumps(value).decode("utf-8"))


@app.command("set")
def set_(
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[str, typer.Argument(help="Value as JSON")],
) -> None:
    """Store a JSON value under KEY."""
    try:
        data = orjson.loads(value)
    except orjson.JSONDecodeError as e:
        error_console.print(f"[red]Error:[/red] value is not valid JSON ({e})")
        raise typer.Exit(2)

    cache = _open_cache()
    try:
        written = cache.set(key, data)
    except CacheEncodeError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if not written:
        error_console.print(f"[red]Error:[/red] could not write {key}")
        raise typer.Exit(1)

    console.print(f"[green]Stored[/green] {key}")


@app.command()
def delete(key: Annotated[str, typer.Argument(help="Cache key")]) -> None:
    """Remove an entry."""
    cache = _open_cache()
    if not cache.delete(key):
        error_console.print(f"[yellow]Not found:[/yellow] {key}")
        raise typer.Exit(1)
    console.print(f"[green]Deleted[/green] {key}")


@app.command()
def path(key: Annotated[str, typer.Argument(help="Cache key")]) -> None:
    """Print the file a key is stored in."""
    cache = _open_cache()
    console.print(str(cache.path_for(key)), soft_wrap=True)


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"fcache version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
