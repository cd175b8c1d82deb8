"""Click CLI for any2db — materialize data sources as cached SQLite files."""

from __future__ import annotations

import asyncio
import logging
import shutil
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from any2db.config.hierarchy import load_settings
from any2db.config.schema import Settings
from any2db.errors.exceptions import Any2DbError

console = Console()
error_console = Console(stderr=True)


def _log_level(verbosity: int, base_level: str = "WARNING") -> int:
    """Start from the configured level; each -v can only make logging more verbose."""
    level = logging.getLevelName(base_level)
    if verbosity == 1:
        level = min(level, logging.INFO)
    elif verbosity >= 2:
        level = logging.DEBUG
    return level


def _setup_logging(verbosity: int, base_level: str = "WARNING") -> None:
    """Configure logging based on the configured level and verbosity."""
    logging.basicConfig(
        level=_log_level(verbosity, base_level),
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _resolve_credentials(
    source: str,
    alias: str | None,
    backend_type: str | None,
    creds_file: str | None,
    settings: Settings,
) -> dict[str, Any]:
    from any2db.config.loader import load_credentials_yaml
    from any2db.core import default_credentials

    creds: dict[str, Any] = {}
    path = creds_file or settings.credentials_file
    if alias and path:
        aliases = load_credentials_yaml(path)
        if alias not in aliases:
            raise click.UsageError(f"Alias '{alias}' not found in {path}")
        creds = aliases[alias]
    return default_credentials(source, backend_type, creds)


_source_options = [
    click.option("--alias", type=str, default=None, help="Credential alias (also scopes the cache)."),
    click.option("--type", "backend_type", type=str, default=None, help="Backend type (local, s3, http, ...)."),
    click.option("--creds-file", type=click.Path(exists=True), default=None, help="YAML file of credential aliases."),
]


def source_options(fn: Any) -> Any:
    for option in reversed(_source_options):
        fn = option(fn)
    return fn


@click.group()
@click.version_option(package_name="any2db")
def cli() -> None:
    """Turn any data source into a cached SQLite database."""


@cli.command()
@click.argument("source")
@click.option("-o", "--output", type=click.Path(), help="Copy the artifact to this path.")
@source_options
@click.option("--cache-dir", type=click.Path(), default=None, help="Cache directory.")
@click.option("--no-cache", is_flag=True, default=False, help="Bypass both cache tiers.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def get(
    source: str,
    output: str | None,
    alias: str | None,
    backend_type: str | None,
    creds_file: str | None,
    cache_dir: str | None,
    no_cache: bool,
    verbose: int,
) -> None:
    """Materialize SOURCE as a SQLite file and print its path."""
    from any2db.core import open_cache

    settings = load_settings(cache_dir=cache_dir, cache_disabled=no_cache or None)
    _setup_logging(verbose, settings.log_level.value)
    credentials = _resolve_credentials(source, alias, backend_type, creds_file, settings)
    cache = open_cache(settings)

    try:
        path = cache.get_artifact(source, credentials, alias or "")
    except Any2DbError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if output:
        shutil.move(str(path), output)
        console.print(f"[green]Written to {output}[/green]")
    else:
        click.echo(str(path))


@cli.command()
@click.argument("sources", nargs=-1, required=True)
@source_options
@click.option("--cache-dir", type=click.Path(), default=None, help="Cache directory.")
@click.option("--workers", type=int, default=None, help="Concurrent fetches.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def warm(
    sources: tuple[str, ...],
    alias: str | None,
    backend_type: str | None,
    creds_file: str | None,
    cache_dir: str | None,
    workers: int | None,
    verbose: int,
) -> None:
    """Fetch and convert SOURCES into the cache without keeping the artifacts."""
    from any2db.concurrency.pool import ConcurrencyPool
    from any2db.core import open_cache

    settings = load_settings(cache_dir=cache_dir, max_workers=workers)
    _setup_logging(verbose, settings.log_level.value)
    cache = open_cache(settings)

    async def _fetch(source: str) -> Path:
        creds = _resolve_credentials(source, alias, backend_type, creds_file, settings)
        return await cache.get_artifact_async(source, creds, alias or "")

    async def _run() -> list:
        pool = ConcurrencyPool(max_workers=settings.max_workers)
        return await pool.process_batch(_fetch, list(sources))

    outcomes = asyncio.run(_run())

    table = Table(title="Warmed Sources", show_header=True)
    table.add_column("Source", style="cyan")
    table.add_column("Status")
    failed = 0
    for outcome in outcomes:
        if outcome.ok:
            outcome.path.unlink(missing_ok=True)
            table.add_row(outcome.source, "[green]ok[/green]")
        else:
            failed += 1
            table.add_row(outcome.source, f"[red]{outcome.error}[/red]")
    console.print(table)
    if failed:
        sys.exit(1)


@cli.command("ls")
@click.argument("source")
@source_options
def list_entries(
    source: str,
    alias: str | None,
    backend_type: str | None,
    creds_file: str | None,
) -> None:
    """List a directory on any backend."""
    from any2db.remote.fetcher import list_source
    from any2db.remote.handles import HandleCache

    settings = load_settings()
    _setup_logging(0, settings.log_level.value)
    credentials = _resolve_credentials(source, alias, backend_type, creds_file, settings)

    try:
        entries = list_source(HandleCache(), source, credentials)
    except Any2DbError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    table = Table(title=f"Contents of {source}", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for entry in entries:
        table.add_row(
            entry.name,
            "dir" if entry.is_dir else "file",
            "-" if entry.is_dir else f"{entry.size:,}",
            entry.modified.isoformat(timespec="seconds") if entry.modified else "-",
        )
    console.print(table)


@cli.command("drivers")
def list_drivers() -> None:
    """List file extensions and the drivers that convert them."""
    from any2db.converters.registry import default_registry
    from any2db.drivers import driver_table

    registry = default_registry()

    table = Table(title="Supported Extensions", show_header=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Driver")
    table.add_column("Available")

    for ext, driver in driver_table().items():
        available = driver == "sqlite" or registry.has(driver)
        table.add_row(ext, driver, "yes" if available else "[yellow]no[/yellow]")

    console.print(table)


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("stats")
@click.option("--cache-dir", type=click.Path(), default=None, help="Cache directory.")
def cache_stats(cache_dir: str | None) -> None:
    """Show cache statistics."""
    from any2db.core import open_cache

    mgr = open_cache(cache_dir=cache_dir)

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    stats = mgr.stats()
    table.add_row("Directory", str(mgr.cache_dir))
    table.add_row("Entries", str(stats.entries))
    table.add_row("Size (MB)", f"{stats.size_mb:.1f}")
    table.add_row("Hits", str(stats.hits))
    table.add_row("Misses", str(stats.misses))
    table.add_row("Hit rate", f"{stats.hit_rate:.1%}")

    console.print(table)


@cache.command("clear")
@click.option("--cache-dir", type=click.Path(), default=None, help="Cache directory.")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear(cache_dir: str | None) -> None:
    """Delete all cached artifacts."""
    from any2db.core import open_cache

    mgr = open_cache(cache_dir=cache_dir)
    removed = mgr.clear()
    console.print(f"[green]Cache cleared ({removed} entries removed).[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
