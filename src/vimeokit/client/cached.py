"""Caching JSON client.

:class:`VimeoCache` is a :class:`~vimeokit.client.builder.Vimeo` that always
requests JSON and, when caching is enabled, keeps every 2xx response in a
:class:`~vimeokit.cache.FileCache` for ``ttl_seconds``. It returns the
decoded JSON value itself rather than an
:class:`~vimeokit.client.response.ApiResponse`.

Request flow:

1. Test mode returns the URL.
2. A fresh cache file for the URL is decoded and returned.
3. Otherwise the URL is fetched and the body decoded as JSON.
4. In header mode a dict result gets the raw header text under ``_header``.
5. A 2xx result is written to the cache (best effort) and returned.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence

from vimeokit.cache import FileCache
from vimeokit.client.builder import Vimeo
from vimeokit.client.response import decorate_with_header, parse_response
from vimeokit.client.transport import HttpRequest, TransportFactory
from vimeokit.models import CacheConfig, RequestConfig, ResponseFormat

CACHE_TYPE_TAG = "VimeoCache"

_MISS = object()


class VimeoCache(Vimeo):
    """JSON client with optional file caching and header mode.

    The output format is always JSON, whatever ``config.output`` says; XML
    responses are never cached.

    Args:
        config: Request settings, as for :class:`Vimeo`.
        segments: Namespace segments accumulated so far.
        transport_factory: HTTP transport factory, as for :class:`Vimeo`.
        cache: Cache settings. Caching is off unless ``cache.enabled``.
        header_mode: Attach raw response headers to dict results.

    Raises:
        CacheConfigError: If caching is enabled and the cache directory is
            missing or not writable.

    Example::

        api = VimeoCache().with_cache(ttl=600, path="/tmp/vimeo")
        api.access_namespace("channel")["staffpicks"].invoke("videos")
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        *,
        segments: Sequence[str] = (),
        transport_factory: Optional[TransportFactory] = HttpRequest,
        cache: Optional[CacheConfig] = None,
        header_mode: bool = False,
    ) -> None:
        super().__init__(config, segments=segments, transport_factory=transport_factory)
        self._cache = FileCache(cache or CacheConfig(), type_tag=CACHE_TYPE_TAG)
        self._header_mode = header_mode

    @property
    def cache(self) -> FileCache:
        return self._cache

    @property
    def header_mode(self) -> bool:
        return self._header_mode

    @property
    def output_format(self) -> ResponseFormat:
        return ResponseFormat.JSON

    def _snapshot(self) -> dict[str, Any]:
        kwargs = super()._snapshot()
        kwargs["cache"] = self._cache.config
        kwargs["header_mode"] = self._header_mode
        return kwargs

    def with_cache(
        self,
        enabled: bool = True,
        ttl: Optional[int] = None,
        path: Optional[str | Path] = None,
    ) -> VimeoCache:
        """Return a snapshot with caching switched on or off.

        *ttl* and *path* keep their current values when omitted.

        Raises:
            CacheConfigError: If *enabled* and the directory is unusable.
        """
        update: dict[str, Any] = {"enabled": enabled}
        if ttl is not None:
            update["ttl_seconds"] = ttl
        if path is not None:
            update["path"] = Path(path)
        return self._replace(cache=self._cache.config.model_copy(update=update))

    def with_header_mode(self, enabled: bool = True) -> VimeoCache:
        return self._replace(header_mode=enabled)

    def request(self, url: str) -> Any:
        """Return the decoded JSON for *url*, from the cache when fresh.

        Non-2xx responses are decoded and returned but never cached.
        Returns *url* itself in test mode.
        """
        if self._config.test_mode:
            return url

        cached = self._cache.get(url, default=_MISS)
        if cached is not _MISS:
            return cached

        http = self._send(url)
        response = parse_response(http.get_response_body(), self.output_format)

        if self._header_mode:
            response = decorate_with_header(response, http.get_response_header())

        if self._cache.enabled and str(http.get_response_code()).startswith("2"):
            self._cache.set(url, response)

        return response
