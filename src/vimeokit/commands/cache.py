"""Cache commands -- inspect and clean the response cache directory.

The cache is never pruned implicitly: expired files are only treated as
misses. ``vimeokit cache purge`` is the explicit way to remove them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from vimeokit.cache import FileCache
from vimeokit.client.cached import CACHE_TYPE_TAG
from vimeokit.config import resolve_config
from vimeokit.output import info, print_table, success


cache_app = typer.Typer(no_args_is_help=True)


def _open_cache(cache_dir: Optional[Path], ttl: Optional[int]) -> FileCache:
    config = resolve_config(cli_cache_dir=cache_dir, cli_ttl=ttl)
    return FileCache(config.cache.model_copy(update={"enabled": True}), type_tag=CACHE_TYPE_TAG)


@cache_app.command("info")
def cache_info(
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Cache directory."),
    ttl: Optional[int] = typer.Option(None, "--ttl", help="TTL used to count fresh entries."),
) -> None:
    """Show the cache directory, TTL and entry counts.

    Example::

        vimeokit cache info
        vimeokit --json cache info --cache-dir ./cache
    """
    stats = _open_cache(cache_dir, ttl).stats()
    print_table(
        ["Setting", "Value"],
        [[key, str(value)] for key, value in stats.items()],
        title="Response cache",
    )


@cache_app.command("purge")
def cache_purge(
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Cache directory."),
    ttl: Optional[int] = typer.Option(None, "--ttl", help="Entries older than this are removed."),
) -> None:
    """Delete cache files older than the TTL."""
    cache = _open_cache(cache_dir, ttl)
    info(f"Cache directory: {cache.directory}")
    removed = cache.purge_expired()
    success(f"Removed {removed} expired cache file(s).")
