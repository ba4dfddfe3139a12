"""Cache commands -- inspect and clear the response cache."""

from __future__ import annotations

import typer

from restplate.cache import ResponseCache
from restplate.config import get_cache_dir, load_global_config
from restplate.output import format_response, success


cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show cache size, location and the fallback ttl."""
    cache = ResponseCache(get_cache_dir(), load_global_config().cache)
    try:
        format_response(cache.stats())
    finally:
        cache.close()


@cache_app.command("clear")
def cache_clear() -> None:
    """Remove every cached response."""
    cache = ResponseCache(get_cache_dir(), load_global_config().cache)
    try:
        removed = cache.clear()
    finally:
        cache.close()
    success(f"Removed {removed} cached response(s)")
