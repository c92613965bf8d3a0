"""File-per-URL response cache with modification-time TTL.

Each cached response lives in its own file named
``{TypeTag}_{md5(url)}.cache`` inside the configured directory. The file's
modification time is its creation time: an entry is fresh while
``now - mtime < ttl_seconds`` and is treated as a miss afterwards. Stale
files are left on disk until they are overwritten by a fresh response or
removed explicitly with :meth:`FileCache.purge_expired`.

Writes go through :func:`~vimeokit.config.atomic_write` so a reader sees
either the previous complete file or the new one, never a partial write.
Concurrent writers to the same key race and the last rename wins.

See Also:
    :class:`~vimeokit.models.CacheConfig` -- ``enabled``, ``ttl_seconds``
    and ``path``.
"""

from __future__ import annotations

import hashlib
import json
import os
import time
from pathlib import Path
from typing import Any, Optional

from vimeokit.config import atomic_write
from vimeokit.exceptions import CacheConfigError
from vimeokit.models import CacheConfig
from vimeokit.output import debug

DEFAULT_TYPE_TAG = "VimeoCache"


class FileCache:
    """Disk cache for decoded JSON responses, keyed by request URL.

    The directory is validated when the cache is created with caching
    enabled, not on first use.

    Args:
        config: Cache configuration (``enabled``, ``ttl_seconds``, ``path``).
        type_tag: Prefix of every cache file name, identifying the client
            variant that wrote it.

    Raises:
        CacheConfigError: If caching is enabled and the directory does not
            exist or is not writable.

    Example::

        cache = FileCache(CacheConfig(enabled=True, path=Path("/tmp/vimeo")))
        if (hit := cache.get(url)) is None:
            cache.set(url, {"id": 1})
    """

    def __init__(self, config: CacheConfig, type_tag: str = DEFAULT_TYPE_TAG) -> None:
        self._config = config
        self._type_tag = type_tag
        self._dir = Path(config.path)
        if config.enabled:
            self.check_directory()

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def directory(self) -> Path:
        return self._dir

    def check_directory(self) -> None:
        """Raise :class:`CacheConfigError` unless the directory is a writable dir."""
        if not self._dir.is_dir() or not os.access(self._dir, os.W_OK):
            raise CacheConfigError(
                f"Cache directory doesn't exist or isn't writable: {self._dir}"
            )

    def key_for(self, url: str) -> str:
        """Return the cache key (hex MD5 digest) for *url*."""
        return hashlib.md5(url.encode("utf-8")).hexdigest()

    def path_for(self, url: str) -> Path:
        """Return the cache file path for *url*."""
        return self._dir / f"{self._type_tag}_{self.key_for(url)}.cache"

    def get(self, url: str, default: Any = None, now: Optional[float] = None) -> Any:
        """Return the cached value for *url*, or *default* on a miss.

        A miss is any of: caching disabled, no file, an expired file, or a
        file that no longer decodes as JSON. Expired files are not removed.

        Args:
            url: The full request URL.
            default: Returned on a miss. Pass a sentinel to tell a cached
                ``null`` apart from a miss.
            now: Current time as a UNIX timestamp (defaults to
                :func:`time.time`).
        """
        if not self.enabled:
            return default

        path = self.path_for(url)
        if not self._is_fresh(path, now):
            debug(f"Cache miss: {url}")
            return default

        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return default
        try:
            value = json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError
            debug(f"Ignoring undecodable cache file {path.name}: {exc}")
            return default

        debug(f"Cache hit: {url}")
        return value

    def set(self, url: str, value: Any) -> bool:
        """Store *value* as JSON for *url*.

        Best effort: a value that cannot be serialised or a failed write is
        reported on the debug channel and ``False`` is returned.

        Returns:
            ``True`` when the entry was written.
        """
        if not self.enabled:
            return False

        path = self.path_for(url)
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            debug(f"Not caching {url}: {exc}")
            return False
        try:
            atomic_write(path, payload, tmp_suffix="_tmp")
        except OSError as exc:
            debug(f"Cache write failed for {path}: {exc}")
            return False
        return True

    def entries(self) -> list[Path]:
        """Return every cache file written under this cache's type tag."""
        if not self._dir.is_dir():
            return []
        return sorted(self._dir.glob(f"{self._type_tag}_*.cache"))

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Delete expired cache files and return how many were removed.

        Never called implicitly; :meth:`get` only treats stale files as
        misses.
        """
        removed = 0
        for path in self.entries():
            if self._is_fresh(path, now):
                continue
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                pass
        return removed

    def stats(self, now: Optional[float] = None) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled``, ``directory``, ``ttl_seconds``,
            ``size`` (number of cache files) and ``fresh`` (number of files
            still within the TTL).
        """
        entries = self.entries()
        return {
            "enabled": self.enabled,
            "directory": str(self._dir),
            "ttl_seconds": self._config.ttl_seconds,
            "size": len(entries),
            "fresh": sum(1 for path in entries if self._is_fresh(path, now)),
        }

    def _is_fresh(self, path: Path, now: Optional[float]) -> bool:
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return False
        if now is None:
            now = time.time()
        return (now - mtime) < self._config.ttl_seconds
