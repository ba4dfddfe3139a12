"""Typer application and CLI entry point for restplate.

Wires the top-level Typer application: the root callback that installs the
:class:`~restplate.output.OutputManager` and stores the shared flags, the
``resolve`` and ``call`` commands, and the ``endpoints``, ``cache`` and
``config`` groups.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.  It maps :class:`~restplate.exceptions.RestplateError`
to exit codes and writes a crash log for anything unexpected.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from restplate import __version__
from restplate.commands.cache import cache_app
from restplate.commands.config import config_app
from restplate.commands.endpoints import endpoints_app
from restplate.commands.request import call_command, resolve_command
from restplate.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="restplate",
    help="Declare REST endpoints as templates and call them with arguments.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("resolve")(resolve_command)
app.command("call")(call_command)
app.add_typer(endpoints_app, name="endpoints", help="Endpoint definition management.")
app.add_typer(cache_app, name="cache", help="Response cache management.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"restplate {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests instead of sending them."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Prefix for relative endpoint URLs."
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the response cache."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global output manager from the CLI flags and stores the
    shared options in ``ctx.obj`` for the sub-commands.
    """
    from restplate.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["base_url"] = base_url
    ctx.obj["no_cache"] = no_cache
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback under the data directory and return its path."""
    from restplate.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``restplate`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app(standalone_mode=True)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from restplate.exceptions import RestplateError
        from restplate.output import error

        if isinstance(exc, RestplateError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
