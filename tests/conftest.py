"""Shared test fixtures for honeycli.

Provides reusable fixtures for isolated config environments, managing
output state, building mock transports, and running CLI commands. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from honeycli.output import OutputFormat, OutputManager, reset_output, set_output


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

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config or stored keys. Clears all
    HONEYCLI_* environment variables and changes the working directory to
    tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("honeycli.config._is_xdg_platform", lambda: True)

    for var in [
        "HONEYCLI_PROFILE",
        "HONEYCLI_API_URL",
        "HONEYCLI_CONFIG_KEY",
        "HONEYCLI_INGEST_KEY",
        "HONEYCLI_MANAGEMENT_KEY",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def api_keys(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Provide one key of every type through the environment."""
    keys = {
        "config": "cfg-key",
        "ingest": "ing-key",
        "management": "mgmt-key",
    }
    for key_type, value in keys.items():
        monkeypatch.setenv(f"HONEYCLI_{key_type.upper()}_KEY", value)
    return keys


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Set up JSON output for tests that check JSON-formatted output.

    Installs a JSON-format OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """A list that mock transports append every received request to."""
    return []


@pytest.fixture
def mock_transport(
    recorded_requests: list[httpx.Request],
) -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]:
    """Factory wrapping a handler in an ``httpx.MockTransport`` that records requests."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        def _recording(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.MockTransport(_recording)

    return _make


@pytest.fixture
def serve(
    monkeypatch: pytest.MonkeyPatch,
    mock_transport: Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport],
) -> Callable[[Callable[[httpx.Request], httpx.Response]], None]:
    """Route every client a command creates through a mock transport.

    Commands import :class:`~honeycli.client.SyncClient` from the package at
    call time, so patching the package attribute is enough.
    """
    from honeycli.client import SyncClient

    def _serve(handler: Callable[[httpx.Request], httpx.Response]) -> None:
        transport = mock_transport(handler)
        monkeypatch.setattr(
            "honeycli.client.SyncClient",
            lambda request_config=None: SyncClient(request_config, transport=transport),
        )

    return _serve


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
