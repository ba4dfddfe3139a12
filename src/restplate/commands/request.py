"""Request commands -- resolve or call an endpoint definition.

``restplate resolve`` prints the request an endpoint would send for a set of
arguments without touching the network.  ``restplate call`` sends it through
:class:`~restplate.client.AsyncClient` and prints the decoded response.

Both accept the same options::

    restplate resolve users -a id=42 -a token=abc
    restplate call users --arg id=42 --cache-time 5
    restplate call create-user -m POST --body '{"name": "$name"}' -a name=Ada
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from restplate.cache import ResponseCache
from restplate.client import AsyncClient
from restplate.config import get_cache_dir, get_endpoints_dir, resolve_config
from restplate.datasource import ConfigurableDataSource, resolve_request
from restplate.exceptions import InvalidUsageError, RestplateError
from restplate.loader import load_endpoint
from restplate.models import CallOptions, EndpointDefinition, GlobalConfig, HTTPMethod
from restplate.output import debug, error, format_response

_ENDPOINT_HELP = "Endpoint definition file, or a name in the endpoints directory."
_METHOD_HELP = "HTTP method (defaults to the definition's method)."
_ARG_HELP = "Argument as key=value; JSON values (numbers, objects) are decoded."
_BODY_HELP = "Body override; JSON is decoded, anything else is sent as text."
_CACHE_HELP = "Cache time-to-live override in seconds (GET/DELETE only)."


def parse_arg_pairs(values: Optional[list[str]]) -> dict[str, Any]:
    """Turn ``key=value`` strings into an argument record.

    Values that parse as JSON are decoded (``page=2`` gives ``2``,
    ``filter={"a":1}`` gives a dict); everything else stays a string.

    Raises:
        InvalidUsageError: If an item has no ``=`` or an empty key.
    """
    args: dict[str, Any] = {}
    for item in values or []:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Expected key=value, got: {item!r}")
        args[key] = _decode_value(raw)
    return args


def parse_body(body: Optional[str]) -> Any:
    """Decode *body* as JSON when possible, returning the raw text otherwise."""
    if body is None:
        return None
    return _decode_value(body)


def _decode_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return raw


def _load(ctx: typer.Context, endpoint: str) -> tuple[GlobalConfig, EndpointDefinition]:
    obj = ctx.obj or {}
    config = resolve_config(
        cli_base_url=obj.get("base_url"),
        cli_no_cache=obj.get("no_cache", False),
    )
    definition = load_endpoint(endpoint, get_endpoints_dir(config))
    debug(f"Loaded endpoint '{definition.name}' ({definition.method.value} {definition.url})")
    return config, definition


def resolve_command(
    ctx: typer.Context,
    endpoint: str = typer.Argument(help=_ENDPOINT_HELP),
    method: Optional[HTTPMethod] = typer.Option(
        None, "--method", "-m", case_sensitive=False, help=_METHOD_HELP
    ),
    arg: Optional[list[str]] = typer.Option(None, "--arg", "-a", help=_ARG_HELP),
    body: Optional[str] = typer.Option(None, "--body", "-b", help=_BODY_HELP),
    cache_time: Optional[int] = typer.Option(None, "--cache-time", min=0, help=_CACHE_HELP),
) -> None:
    """Print the fully resolved request without sending it.

    Example::

        restplate resolve users -a id=42
    """
    try:
        _, definition = _load(ctx, endpoint)
        request = resolve_request(
            definition.to_template(),
            method or definition.method,
            parse_arg_pairs(arg),
            options=CallOptions(cache_time=cache_time),
            body=parse_body(body),
        )
    except RestplateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(request.model_dump(mode="json"))


def call_command(
    ctx: typer.Context,
    endpoint: str = typer.Argument(help=_ENDPOINT_HELP),
    method: Optional[HTTPMethod] = typer.Option(
        None, "--method", "-m", case_sensitive=False, help=_METHOD_HELP
    ),
    arg: Optional[list[str]] = typer.Option(None, "--arg", "-a", help=_ARG_HELP),
    body: Optional[str] = typer.Option(None, "--body", "-b", help=_BODY_HELP),
    cache_time: Optional[int] = typer.Option(None, "--cache-time", min=0, help=_CACHE_HELP),
) -> None:
    """Send the request and print the decoded response.

    With the global ``--dry-run`` flag the request is printed to stderr
    instead of being sent.

    Example::

        restplate call users -a id=42 --json
    """
    obj = ctx.obj or {}
    try:
        config, definition = _load(ctx, endpoint)
        result = asyncio.run(
            _send(
                config,
                definition,
                method or definition.method,
                parse_arg_pairs(arg),
                CallOptions(cache_time=cache_time),
                parse_body(body),
                dry_run=obj.get("dry_run", False),
            )
        )
    except RestplateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if result is not None:
        format_response(result)


async def _send(
    config: GlobalConfig,
    definition: EndpointDefinition,
    method: HTTPMethod,
    args: dict[str, Any],
    options: CallOptions,
    body: Any,
    dry_run: bool = False,
) -> Any:
    cache = ResponseCache(get_cache_dir(), config.cache)
    try:
        async with AsyncClient(config.request, cache=cache, dry_run=dry_run) as client:
            source = ConfigurableDataSource(client, definition.to_template())
            return await source.call(method, args, options=options, body=body)
    finally:
        cache.close()

