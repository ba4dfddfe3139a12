"""Shared test fixtures for restplate.

Provides reusable fixtures for isolated config environments, output state,
a recording transport and the CLI runner.  These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from restplate.models import RequestOptions
from restplate.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all RESTPLATE_* environment variables and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("restplate.config._is_xdg_platform", lambda: True)

    for var in [
        "RESTPLATE_BASE_URL",
        "RESTPLATE_NO_CACHE",
        "RESTPLATE_ENDPOINTS_DIR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Transport fixture
# ---------------------------------------------------------------------------


class RecordingTransport:
    """Transport double that records every call and returns a canned result."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = {"ok": True} if result is None else result
        self.error = error
        self.calls: list[tuple[str, str, Any, RequestOptions]] = []

    async def _record(self, verb: str, url: str, payload: Any, options: RequestOptions) -> Any:
        self.calls.append((verb, url, payload, options))
        if self.error is not None:
            raise self.error
        return self.result

    async def get(self, url: str, query: list[tuple[str, str]], options: RequestOptions) -> Any:
        return await self._record("get", url, query, options)

    async def delete(self, url: str, query: list[tuple[str, str]], options: RequestOptions) -> Any:
        return await self._record("delete", url, query, options)

    async def post(self, url: str, body: Any, options: RequestOptions) -> Any:
        return await self._record("post", url, body, options)

    async def put(self, url: str, body: Any, options: RequestOptions) -> Any:
        return await self._record("put", url, body, options)

    async def patch(self, url: str, body: Any, options: RequestOptions) -> Any:
        return await self._record("patch", url, body, options)


@pytest.fixture
def transport() -> RecordingTransport:
    """A fresh :class:`RecordingTransport`."""
    return RecordingTransport()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
