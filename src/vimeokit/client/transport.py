"""HTTP transport used by the Vimeo clients.

:class:`HttpRequest` wraps a single :mod:`httpx` GET and exposes exactly the
five operations the clients depend on: set the user agent, send the request,
and read back the raw response header text, the body and the status code.

Network failures are raised as :class:`~vimeokit.exceptions.TransportError`
and never retried. Non-2xx responses are returned like any other response.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Optional

import httpx

from vimeokit import __version__
from vimeokit.exceptions import TransportError

VIMEOKIT_NAME = "vimeokit"
VIMEOKIT_URL = "https://pypi.org/project/vimeokit/"
VIMEOKIT_BUILD = time.strftime("%Y%m%d%H%M%S", time.gmtime(Path(__file__).stat().st_mtime))
USER_AGENT = (
    f"{VIMEOKIT_NAME}/{__version__} (Vimeo Toolkit; {VIMEOKIT_URL}) Build/{VIMEOKIT_BUILD}"
)


class HttpRequest:
    """A single blocking GET request against *url*.

    Args:
        url: The fully formed request URL.
        timeout: Timeout in seconds handed to :mod:`httpx`.
        transport: Optional :class:`httpx.BaseTransport`, e.g. an
            :class:`httpx.MockTransport` in tests.

    Example::

        http = HttpRequest("http://vimeo.com/api/v2/videos/search.json?query=cats")
        http.set_user_agent(USER_AGENT)
        http.send_request()
        http.get_response_code()
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._timeout = timeout
        self._transport = transport
        self._user_agent: Optional[str] = None
        self._response: Optional[httpx.Response] = None

    def set_user_agent(self, user_agent: str) -> None:
        self._user_agent = user_agent

    def send_request(self) -> httpx.Response:
        """Perform the GET and keep the response for the accessors.

        Raises:
            TransportError: On connection, timeout or protocol errors.
        """
        headers = {"User-Agent": self._user_agent} if self._user_agent else {}
        try:
            with httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = client.get(self.url, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {self.url} failed: {exc}") from exc
        self._response = response
        return response

    def get_response_header(self) -> str:
        """Return the raw response header block.

        The status line followed by one ``Name: value`` line per header, in
        the order and casing the server sent them.
        """
        response = self._require_response()
        lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
        lines.extend(
            f"{name.decode('latin-1')}: {value.decode('latin-1')}"
            for name, value in response.headers.raw
        )
        return "\r\n".join(lines)

    def get_response_body(self) -> str:
        return self._require_response().text

    def get_response_code(self) -> int:
        return self._require_response().status_code

    def _require_response(self) -> httpx.Response:
        if self._response is None:
            raise TransportError(f"No response for {self.url}: send_request() was not called")
        return self._response


TransportFactory = Callable[..., HttpRequest]
"""Anything called as ``factory(url, timeout=...)`` that returns an :class:`HttpRequest`."""
