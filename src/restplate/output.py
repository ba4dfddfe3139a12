"""Output for the restplate CLI: data on stdout, diagnostics on stderr.

Conventions (see `clig.dev <https://clig.dev/>`_):

* **stdout** carries only data -- decoded responses, resolved requests,
  endpoint tables -- so ``restplate call users --json | jq`` always works.
* **stderr** carries status lines, errors, next-step hints, dry-run
  previews and ``--verbose`` debug lines.
* Rich rendering is used when stdout is an interactive terminal; piped
  output falls back to plain text.  ``NO_COLOR``, ``TERM=dumb`` and
  ``--no-color`` turn colour off.

One :class:`OutputManager` is installed per process by
:func:`~restplate.app.main_callback`; the module-level helpers delegate to
it.  :func:`configure_logging` connects the library's :mod:`logging`
records to the same stderr stream.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from restplate.templating.coercion import to_string


class OutputFormat(str, Enum):
    """How data written to stdout is rendered.

    ``AUTO`` picks ``RICH`` for a colour-capable terminal and ``PLAIN``
    otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# kind -> (prefix, rich style, hidden by --quiet)
_DIAGNOSTICS: dict[str, tuple[str, Optional[str], bool]] = {
    "info": ("", None, True),
    "success": ("", "green", True),
    "suggest": ("→ ", "dim", True),
    "debug": ("[debug] ", "dim", False),
    "error": ("Error: ", "bold red", False),
}


class OutputManager:
    """Renders data and diagnostics according to the global CLI flags.

    Args:
        format: Requested data format; ``AUTO`` is resolved immediately.
        no_color: Strip colour and markup from everything.
        quiet: Hide info, success and suggestion lines.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = self._resolve_format(format)
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)
        self._renderers = {
            OutputFormat.JSON: self._render_json,
            OutputFormat.PLAIN: self._render_plain,
            OutputFormat.RICH: self._render_rich,
        }

    def _resolve_format(self, requested: OutputFormat) -> OutputFormat:
        if requested != OutputFormat.AUTO:
            return requested
        if _is_tty() and not self._no_color:
            return OutputFormat.RICH
        return OutputFormat.PLAIN

    @property
    def format(self) -> OutputFormat:
        """The effective data format."""
        return self._format

    # -- stdout -------------------------------------------------------- #

    def format_response(self, data: Any) -> None:
        """Render *data* (a response body or resolved request) to stdout."""
        self._renderers[self._format](data)

    def print_data(self, text: str) -> None:
        """Write one raw line to stdout."""
        print(text, file=sys.stdout, flush=True)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render *rows* as JSON records, tab-separated lines, or a Rich table.

        The title is only shown in Rich mode.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return
        table = Table(*headers, title=title, header_style="bold cyan")
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # -- stderr -------------------------------------------------------- #

    def info(self, message: str) -> None:
        self._diagnose("info", message)

    def success(self, message: str) -> None:
        self._diagnose("success", message)

    def suggest(self, message: str) -> None:
        """A next-step hint, e.g. where to put a first endpoint definition."""
        self._diagnose("suggest", message)

    def debug(self, message: str) -> None:
        self._diagnose("debug", message)

    def error(self, message: str) -> None:
        """Always shown, even with ``--quiet``."""
        self._diagnose("error", message)

    def _diagnose(self, kind: str, message: str) -> None:
        prefix, style, hidden_by_quiet = _DIAGNOSTICS[kind]
        if hidden_by_quiet and self._quiet:
            return
        if kind == "debug" and not self._verbose:
            return
        line = f"{prefix}{message}"
        if self._no_color:
            print(line, file=sys.stderr, flush=True)
        else:
            self._stderr.print(Text(line, style=style or ""))

    # -- renderers ----------------------------------------------------- #

    def _render_json(self, data: Any) -> None:
        data = _maybe_decode(data)
        if isinstance(data, str):
            self.print_data(data)
            return
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def _render_plain(self, data: Any) -> None:
        if data is None:
            return
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{to_string(value)}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(to_string(v) for v in item.values()))
                else:
                    self.print_data(to_string(item))
        else:
            self.print_data(to_string(data))

    def _render_rich(self, data: Any) -> None:
        data = _maybe_decode(data)
        if isinstance(data, (dict, list)):
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(to_string(data), markup=False)


def _maybe_decode(data: Any) -> Any:
    """Decode a JSON string; anything else is returned unchanged."""
    if not isinstance(data, str):
        return data
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        return data


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# -- process-wide instance --------------------------------------------- #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next :func:`get_output` builds a new one."""
    global _output
    _output = None


def configure_logging(verbose: bool) -> None:
    """Route the ``restplate`` logger to stderr, at DEBUG when *verbose*.

    Library modules log through :mod:`logging`; the CLI calls this once so
    that ``--verbose`` also surfaces those records.
    """
    logger = logging.getLogger("restplate")
    logger.handlers.clear()
    if not verbose:
        logger.setLevel(logging.WARNING)
        return
    logger.addHandler(RichHandler(console=Console(stderr=True), show_time=False, show_path=False))
    logger.setLevel(logging.DEBUG)


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)


def error(message: str) -> None:
    get_output().error(message)
