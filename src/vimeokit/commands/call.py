"""Request commands -- ``vimeokit call`` and ``vimeokit url``.

Both take the namespace chain and the method as positional words::

    vimeokit call videos search -p query=cats
    vimeokit call --cache --headers channel staffpicks videos
    vimeokit url user brad info

``call`` uses :class:`~vimeokit.client.Vimeo` unless caching or header mode
is requested, in which case it switches to the JSON-only
:class:`~vimeokit.client.VimeoCache`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer

from vimeokit.client import Vimeo, VimeoCache, format_api_response
from vimeokit.config import resolve_config
from vimeokit.exit_codes import EXIT_INVALID_USAGE
from vimeokit.models import GlobalConfig, ResponseFormat
from vimeokit.output import error, warning


def _parse_params(params: list[str]) -> dict[str, str]:
    """Turn repeated ``key=value`` options into an ordered dict."""
    args: dict[str, str] = {}
    for item in params:
        key, sep, value = item.partition("=")
        if not sep or not key:
            error(f"Invalid parameter '{item}', expected key=value")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        args[key] = value
    return args


def _split_path(path: list[str]) -> tuple[list[str], str]:
    *segments, method = path
    return segments, method


def _resolve(ctx: typer.Context, cache_dir: Optional[Path] = None, ttl: Optional[int] = None) -> GlobalConfig:
    obj = ctx.obj or {}
    return resolve_config(
        cli_api_version=obj.get("api_version"),
        cli_hostname=obj.get("hostname"),
        cli_cache_dir=cache_dir,
        cli_ttl=ttl,
    )


def _chain(client: Vimeo, segments: list[str]) -> Vimeo:
    for segment in segments:
        client = client.access_namespace(segment)
    return client


def call_command(
    ctx: typer.Context,
    path: list[str] = typer.Argument(
        ..., help="Namespace segments followed by the method, e.g. 'videos search'."
    ),
    param: list[str] = typer.Option(
        [], "--param", "-p", help="Query parameter as key=value (repeatable)."
    ),
    fmt: Optional[ResponseFormat] = typer.Option(
        None, "--format", "-f", help="Response format requested from the API."
    ),
    cache: Optional[bool] = typer.Option(
        None, "--cache/--no-cache", help="Cache successful JSON responses on disk."
    ),
    ttl: Optional[int] = typer.Option(
        None, "--ttl", help="Cache time-to-live in seconds."
    ),
    cache_dir: Optional[Path] = typer.Option(
        None, "--cache-dir", help="Directory holding cache files (must exist)."
    ),
    headers: bool = typer.Option(
        False, "--headers", help="Include raw response headers under '_header'."
    ),
    test: bool = typer.Option(
        False, "--test", help="Print the request URL instead of sending it."
    ),
) -> None:
    """Call an API method and print the response.

    Example::

        vimeokit call videos search -p query=cats
        vimeokit --verbose call --cache activity brad user_did
    """
    segments, method = _split_path(path)
    args = _parse_params(param)
    config = _resolve(ctx, cache_dir=cache_dir, ttl=ttl)

    request_config = config.request.model_copy(update={"test_mode": test})
    if fmt is not None:
        request_config = request_config.model_copy(update={"output": fmt})

    use_cache = config.cache.enabled if cache is None else cache
    header_mode = headers or config.header_mode

    client: Vimeo
    if use_cache or header_mode:
        if fmt == ResponseFormat.XML:
            warning("--format xml is ignored with --cache/--headers; JSON is always requested")
        client = VimeoCache(
            request_config,
            cache=config.cache.model_copy(update={"enabled": use_cache}),
            header_mode=header_mode,
        )
    else:
        client = Vimeo(request_config)

    result: Any = _chain(client, segments).invoke(method, args or None)
    format_api_response(result)


def url_command(
    ctx: typer.Context,
    path: list[str] = typer.Argument(
        ..., help="Namespace segments followed by the method, e.g. 'videos search'."
    ),
    param: list[str] = typer.Option(
        [], "--param", "-p", help="Query parameter as key=value (repeatable)."
    ),
    fmt: ResponseFormat = typer.Option(
        ResponseFormat.JSON, "--format", "-f", help="Format extension of the URL."
    ),
) -> None:
    """Print the URL a call would request, without sending it."""
    segments, method = _split_path(path)
    args = _parse_params(param)
    config = _resolve(ctx)

    request_config = config.request.model_copy(update={"test_mode": True, "output": fmt})
    format_api_response(_chain(Vimeo(request_config), segments).invoke(method, args or None))
