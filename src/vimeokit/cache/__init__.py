"""Disk-based response caching for vimeokit.

This package provides :class:`FileCache`, which stores each successful JSON
response in its own file named after the MD5 of the request URL. Freshness
is decided from the file's modification time and the configured TTL.

The cache is consumed by :class:`~vimeokit.client.cached.VimeoCache` and by
the ``vimeokit cache`` CLI commands.
"""

from vimeokit.cache.cache import DEFAULT_TYPE_TAG, FileCache

__all__ = ["DEFAULT_TYPE_TAG", "FileCache"]
