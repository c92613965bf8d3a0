"""Fluent path builder for the Vimeo Simple API.

A request is described by a chain of namespace accesses ending in a method
invocation. Each link is a new :class:`Vimeo` snapshot, so a single root
client can be reused for any number of unrelated calls::

    api = Vimeo()
    videos = api.access_namespace("videos")
    videos.invoke("search", {"query": "cats"})
    # GET http://vimeo.com/api/v2/videos/search.xml?query=cats

    api.access_namespace("user")["brad"].invoke("info")
    # GET http://vimeo.com/api/v2/user/brad/info.xml

Namespace and method names are plain strings and are not validated; they are
lowercased and joined into the URL path.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Sequence, TypeVar, Union
from urllib.parse import urlencode

from vimeokit.client.response import ApiResponse, parse_response
from vimeokit.client.transport import USER_AGENT, HttpRequest, TransportFactory
from vimeokit.exceptions import ConfigurationError
from vimeokit.models import RequestConfig, ResponseFormat
from vimeokit.output import debug

_V = TypeVar("_V", bound="Vimeo")


def build_query(args: Any) -> str:
    """Return ``?``-prefixed query string for *args*, or ``""``.

    Only non-empty mappings produce a query. Keys keep their order, ``None``
    values are dropped, booleans become ``1``/``0`` and sequences repeat the
    key. Anything else yields no query string rather than an error.
    """
    if not isinstance(args, Mapping) or not args:
        return ""
    pairs = []
    for key, value in args.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = int(value)
        pairs.append((key, value))
    if not pairs:
        return ""
    return "?" + urlencode(pairs, doseq=True)


class Vimeo:
    """Builder and requester for Simple API calls.

    Args:
        config: Request settings (API version, hostname, test mode, output
            format). Defaults to :class:`~vimeokit.models.RequestConfig()`.
        segments: Namespace segments accumulated so far. Normally left empty
            and grown with :meth:`access_namespace`.
        transport_factory: Called as ``factory(url, timeout=...)`` to create
            the :class:`~vimeokit.client.transport.HttpRequest` for a live
            call. ``None`` means no transport is available and any live
            request raises :class:`~vimeokit.exceptions.ConfigurationError`.
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        *,
        segments: Sequence[str] = (),
        transport_factory: Optional[TransportFactory] = HttpRequest,
    ) -> None:
        self._config = config or RequestConfig()
        self._segments = tuple(segments)
        self._transport_factory = transport_factory

    def __repr__(self) -> str:
        return f"{type(self).__name__}(segments={list(self._segments)!r})"

    @property
    def config(self) -> RequestConfig:
        return self._config

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def output_format(self) -> ResponseFormat:
        """Format requested from the API and used to parse the body."""
        return self._config.output

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #

    def _snapshot(self) -> dict[str, Any]:
        """Constructor keyword arguments reproducing this builder."""
        return {
            "config": self._config,
            "segments": self._segments,
            "transport_factory": self._transport_factory,
        }

    def _replace(self: _V, **changes: Any) -> _V:
        kwargs = self._snapshot()
        kwargs.update(changes)
        return type(self)(**kwargs)

    def access_namespace(self: _V, name: str) -> _V:
        """Return a new builder one namespace deeper; this one is unchanged."""
        return self._replace(segments=self._segments + (name.lower(),))

    __getitem__ = access_namespace

    def with_api_version(self: _V, api_version: str) -> _V:
        return self._replace(config=self._config.model_copy(update={"api_version": api_version}))

    def with_hostname(self: _V, hostname: Optional[str]) -> _V:
        return self._replace(config=self._config.model_copy(update={"hostname": hostname}))

    def with_test_mode(self: _V, enabled: bool = True) -> _V:
        """Enable test mode: :meth:`invoke` returns the URL instead of fetching it."""
        return self._replace(config=self._config.model_copy(update={"test_mode": enabled}))

    def with_output(self: _V, output: Union[ResponseFormat, str]) -> _V:
        fmt = ResponseFormat(output)
        return self._replace(config=self._config.model_copy(update={"output": fmt}))

    # ------------------------------------------------------------------ #
    # URL construction
    # ------------------------------------------------------------------ #

    def method_path(self, method: str) -> str:
        """Return ``seg1/seg2/.../method.format`` for *method*."""
        return "/".join(self._segments) + "/" + method.lower() + "." + self.output_format.value

    def build_url(self, method: str, args: Optional[Mapping[str, Any]] = None) -> str:
        """Return the full request URL for *method* called with *args*.

        Example::

            >>> Vimeo().access_namespace("videos").build_url("search", {"query": "cats"})
            'http://vimeo.com/api/v2/videos/search.xml?query=cats'
        """
        return (
            f"http://{self._config.host}/api/{self._config.api_version}/"
            f"{self.method_path(method)}{build_query(args)}"
        )

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def invoke(self, method: str, args: Optional[Mapping[str, Any]] = None) -> Any:
        """Build the URL for *method* and request it.

        Returns:
            The URL string in test mode, otherwise whatever :meth:`request`
            returns.
        """
        return self.request(self.build_url(method, args))

    def request(self, url: str) -> Union[str, ApiResponse]:
        """Fetch *url* and return an :class:`ApiResponse`.

        In test mode *url* is returned unchanged and no I/O happens.

        Raises:
            ConfigurationError: If no transport is available.
            TransportError: If the request could not be sent.
            ParseError: If the body does not decode as the output format.
        """
        if self._config.test_mode:
            return url

        http = self._send(url)
        return ApiResponse(
            header=http.get_response_header(),
            body=parse_response(http.get_response_body(), self.output_format),
            status=http.get_response_code(),
        )

    def _send(self, url: str) -> HttpRequest:
        if self._transport_factory is None:
            raise ConfigurationError(
                "No HTTP transport available; vimeokit needs one to send requests"
            )
        http = self._transport_factory(url, timeout=self._config.timeout)
        http.set_user_agent(USER_AGENT)
        debug(f"GET {url}")
        http.send_request()
        return http
