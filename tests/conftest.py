"""Shared test fixtures for vimeokit.

Provides an in-process fake of the Vimeo API (served through
:class:`httpx.MockTransport`), isolated config and cache directories, and a
CLI runner. These fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from vimeokit.client.transport import HttpRequest
from vimeokit.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager keeps Rich consoles bound to the streams that were
    current when it was created; CliRunner swaps those streams per test.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN OutputManager for tests that don't check output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeApi:
    """Answers every request with the configured response and records it."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.error: Optional[Exception] = None
        self.respond(json_data={"ok": True})

    def respond(
        self,
        status_code: int = 200,
        json_data: Any = None,
        text: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        if text is None:
            text = json.dumps(json_data)
            default_type = "application/json"
        else:
            default_type = "text/xml"
        self.status_code = status_code
        self.content = text.encode("utf-8")
        self.headers = headers if headers is not None else {"Content-Type": default_type}

    def fail_with(self, exc: Exception) -> None:
        self.error = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)

    def factory(self, url: str, timeout: float = 30) -> HttpRequest:
        """Transport factory to pass as ``transport_factory=`` to a client."""
        return HttpRequest(url, timeout=timeout, transport=httpx.MockTransport(self.handler))

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def fake_api(monkeypatch: pytest.MonkeyPatch) -> FakeApi:
    """A FakeApi that also backs the default transport.

    ``httpx.Client`` is patched so clients built with the default
    :class:`HttpRequest` factory (as the CLI does) hit the fake too.
    """
    api = FakeApi()
    real_client = httpx.Client

    def _client(**kwargs: Any) -> httpx.Client:
        kwargs["transport"] = httpx.MockTransport(api.handler)
        return real_client(**kwargs)

    monkeypatch.setattr(httpx, "Client", _client)
    return api


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """An existing, writable cache directory."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears all
    ``VIMEO_*`` variables and changes the working directory to tmp_path.
    """
    monkeypatch.setattr("vimeokit.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "VIMEO_API_VERSION",
        "VIMEO_HOSTNAME",
        "VIMEO_CACHE_DIR",
        "VIMEO_CACHE_TTL",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
