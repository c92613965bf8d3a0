"""Pydantic models shared across vimeokit.

**Request models** -- immutable snapshots threaded through every builder in
a namespace chain:
    :class:`ResponseFormat`, :class:`RequestConfig`, :class:`CacheConfig`.

**Persisted configuration** -- serialised as JSON in the user's config
directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.

Request models are frozen. A builder never edits the configuration it was
given; it derives a new one with ``model_copy(update=...)``.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_HOSTNAME = "vimeo.com"
DEFAULT_API_VERSION = "v2"
DEFAULT_CACHE_TTL = 3600


class ResponseFormat(str, enum.Enum):
    """Response formats understood by the Simple API (the URL extension)."""

    XML = "xml"
    JSON = "json"


class RequestConfig(BaseModel):
    """Per-request settings carried forward by every namespace access.

    Example::

        RequestConfig(api_version="v2", output=ResponseFormat.JSON)
    """

    model_config = ConfigDict(frozen=True)

    api_version: str = Field(
        default=DEFAULT_API_VERSION, description="API version path segment"
    )
    hostname: Optional[str] = Field(
        default=None, description="Alternate hostname, defaults to vimeo.com"
    )
    test_mode: bool = Field(
        default=False, description="Return the request URL instead of fetching it"
    )
    output: ResponseFormat = Field(
        default=ResponseFormat.XML, description="Response format: xml or json"
    )
    timeout: float = Field(default=30, description="Transport timeout in seconds")

    @property
    def host(self) -> str:
        """The hostname requests are sent to."""
        return self.hostname or DEFAULT_HOSTNAME


class CacheConfig(BaseModel):
    """File cache settings for :class:`~vimeokit.client.cached.VimeoCache`."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Enable response caching")
    ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL, description="Cache TTL in seconds"
    )
    path: Path = Field(
        default=Path("./cache/"), description="Directory holding cache files"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/vimeokit/config.json``.

    Loaded and saved by :func:`~vimeokit.config.load_global_config` and
    :func:`~vimeokit.config.save_global_config`. See
    :func:`~vimeokit.config.resolve_config` for the precedence chain.
    """

    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    header_mode: bool = False
    output: OutputConfig = Field(default_factory=OutputConfig)
