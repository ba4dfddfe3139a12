"""Endpoint commands -- browse the stored endpoint definitions.

Definitions live in the endpoints directory (see
:func:`~restplate.config.get_endpoints_dir`), one ``.yaml``, ``.yml`` or
``.json`` file per endpoint.
"""

from __future__ import annotations

import typer

from restplate.config import get_endpoints_dir, resolve_config
from restplate.exceptions import RestplateError
from restplate.loader import list_endpoints, load_endpoint
from restplate.output import error, format_response, info, print_table, suggest


endpoints_app = typer.Typer(no_args_is_help=True)


@endpoints_app.command("list")
def endpoints_list() -> None:
    """List the endpoint definitions in the endpoints directory.

    Example::

        restplate endpoints list --plain
    """
    try:
        config = resolve_config()
        directory = get_endpoints_dir(config)
        rows = []
        for name in list_endpoints(directory):
            definition = load_endpoint(name, directory)
            rows.append([name, definition.method.value, definition.url])
    except RestplateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Endpoints directory: {directory}")
    if not rows:
        suggest(f"Add a definition, e.g. {directory / 'users.yaml'}")
        return
    print_table(["Name", "Method", "URL"], rows, title="Endpoints")


@endpoints_app.command("show")
def endpoints_show(
    name: str = typer.Argument(help="Endpoint name or definition file."),
) -> None:
    """Show one endpoint definition.

    Example::

        restplate endpoints show users --json
    """
    try:
        config = resolve_config()
        definition = load_endpoint(name, get_endpoints_dir(config))
    except RestplateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_response(definition.model_dump(mode="json"))
