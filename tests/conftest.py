"""Shared test fixtures for fetchkit.

Provides isolated config environments, a throwaway response cache, output
state management, mock HTTP transports, and a CLI runner. These fixtures are
automatically discovered by pytest and available to all test modules without
explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from fetchkit.cache import ResponseCache
from fetchkit.client import HttpxTransport
from fetchkit.models import CacheConfig
from fetchkit.output import OutputFormat, OutputManager, reset_output, set_output


PHIL = {"id": 1, "name": "Phil"}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file"). Resetting forces a fresh manager
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
    config, and clears the FETCHKIT_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("fetchkit.config._is_xdg_platform", lambda: True)

    for var in ["FETCHKIT_TIMEOUT", "FETCHKIT_CACHE_ENABLED", "FETCHKIT_CACHE_TTL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Cache and transport fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache(tmp_path: Path) -> ResponseCache:
    """An enabled ResponseCache rooted in tmp_path."""
    c = ResponseCache(tmp_path / "http-cache", CacheConfig(enabled=True, ttl_seconds=300))
    yield c
    c.close()


def json_response(data: Any, status_code: int = 200, **kwargs: Any) -> httpx.Response:
    """Build a JSON response the way a mock handler returns it."""
    return httpx.Response(status_code, json=data, **kwargs)


class Server:
    """Scriptable stand-in for a remote server behind :class:`httpx.MockTransport`.

    ``handler`` answers each request; setting ``offline`` makes every
    request fail with :class:`httpx.ConnectError`. All requests are
    recorded in ``requests``.
    """

    def __init__(self, handler: Optional[Callable[[httpx.Request], httpx.Response]] = None):
        self.handler = handler or (lambda request: json_response(PHIL))
        self.offline = False
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("Connection refused", request=request)
        return self.handler(request)

    @property
    def mock(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def transport(self, cache: Optional[ResponseCache] = None) -> HttpxTransport:
        return HttpxTransport(cache=cache, http_transport=self.mock)


@pytest.fixture
def server() -> Server:
    """A server answering ``{"id": 1, "name": "Phil"}`` to everything."""
    return Server()


@pytest.fixture
def make_server() -> Callable[..., Server]:
    """Factory for servers with a custom request handler."""
    return Server


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a PLAIN, verbose OutputManager so debug traces are emitted."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Set up JSON output for tests that check JSON-formatted output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
