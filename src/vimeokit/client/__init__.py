"""Client module for vimeokit.

Classes:
    :class:`Vimeo` -- builds URLs from namespace chains and returns
    :class:`ApiResponse` objects (XML by default).
    :class:`VimeoCache` -- JSON-only variant with file caching and header
    mode.
    :class:`HttpRequest` -- the :mod:`httpx` transport both use.

Example::

    from vimeokit.client import Vimeo

    api = Vimeo().with_test_mode()
    api.access_namespace("videos").invoke("search", {"query": "cats"})
    # 'http://vimeo.com/api/v2/videos/search.xml?query=cats'
"""

from vimeokit.client.builder import Vimeo, build_query
from vimeokit.client.cached import VimeoCache
from vimeokit.client.response import ApiResponse, format_api_response
from vimeokit.client.transport import USER_AGENT, HttpRequest

__all__ = [
    "ApiResponse",
    "HttpRequest",
    "USER_AGENT",
    "Vimeo",
    "VimeoCache",
    "build_query",
    "format_api_response",
]
