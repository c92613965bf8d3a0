"""Tests for the FileCache module."""

from __future__ import annotations

import hashlib
import json
import os
import time
from pathlib import Path

import pytest

from vimeokit.cache import FileCache
from vimeokit.exceptions import CacheConfigError
from vimeokit.models import CacheConfig

URL = "http://vimeo.com/api/v2/videos/search.json?query=cats"


@pytest.fixture()
def cache(cache_dir: Path) -> FileCache:
    """An enabled FileCache with a 300 s TTL."""
    return FileCache(CacheConfig(enabled=True, ttl_seconds=300, path=cache_dir))


@pytest.fixture()
def disabled_cache(cache_dir: Path) -> FileCache:
    return FileCache(CacheConfig(enabled=False, ttl_seconds=300, path=cache_dir))


def _set_mtime(path: Path, stamp: float) -> None:
    os.utime(path, (stamp, stamp))


# ------------------------------------------------------------------ #
# Naming
# ------------------------------------------------------------------ #


class TestNaming:
    def test_key_is_md5_of_url(self, cache: FileCache) -> None:
        assert cache.key_for(URL) == hashlib.md5(URL.encode("utf-8")).hexdigest()

    def test_path_uses_type_tag(self, cache: FileCache, cache_dir: Path) -> None:
        assert cache.path_for(URL) == cache_dir / f"VimeoCache_{cache.key_for(URL)}.cache"

    def test_custom_type_tag(self, cache_dir: Path) -> None:
        tagged = FileCache(CacheConfig(enabled=True, path=cache_dir), type_tag="Other")
        assert tagged.path_for(URL).name.startswith("Other_")

    def test_different_urls_different_keys(self, cache: FileCache) -> None:
        assert cache.key_for(URL) != cache.key_for(URL + "&page=2")


# ------------------------------------------------------------------ #
# get / set
# ------------------------------------------------------------------ #


class TestGetSet:
    def test_set_and_get(self, cache: FileCache) -> None:
        assert cache.set(URL, {"videos": [{"id": 1}]}) is True
        assert cache.get(URL) == {"videos": [{"id": 1}]}

    def test_miss_returns_default(self, cache: FileCache) -> None:
        sentinel = object()
        assert cache.get(URL) is None
        assert cache.get(URL, default=sentinel) is sentinel

    def test_cached_null_distinguishable_with_sentinel(self, cache: FileCache) -> None:
        sentinel = object()
        cache.set(URL, None)
        assert cache.get(URL, default=sentinel) is None

    def test_file_holds_plain_json(self, cache: FileCache) -> None:
        cache.set(URL, [1, "two"])
        assert json.loads(cache.path_for(URL).read_text(encoding="utf-8")) == [1, "two"]

    def test_overwrite(self, cache: FileCache) -> None:
        cache.set(URL, {"v": 1})
        cache.set(URL, {"v": 2})
        assert cache.get(URL) == {"v": 2}

    def test_unserialisable_value_not_written(self, cache: FileCache) -> None:
        assert cache.set(URL, {"when": object()}) is False
        assert not cache.path_for(URL).exists()

    def test_undecodable_file_is_a_miss(self, cache: FileCache) -> None:
        cache.path_for(URL).write_text("not json", encoding="utf-8")
        assert cache.get(URL) is None

    def test_non_utf8_file_is_a_miss(self, cache: FileCache) -> None:
        cache.path_for(URL).write_bytes(b"\xff\xfe{\x80}")
        assert cache.get(URL, default="MISS") == "MISS"

    def test_non_utf8_file_replaced_by_next_set(self, cache: FileCache) -> None:
        cache.path_for(URL).write_bytes(b"\xff\xfe{\x80}")
        assert cache.set(URL, {"v": 1}) is True
        assert cache.get(URL) == {"v": 1}


# ------------------------------------------------------------------ #
# TTL
# ------------------------------------------------------------------ #


class TestTTL:
    def test_fresh_until_ttl(self, cache: FileCache) -> None:
        cache.set(URL, {"v": 1})
        written = 1_000_000.0
        _set_mtime(cache.path_for(URL), written)

        assert cache.get(URL, now=written) == {"v": 1}
        assert cache.get(URL, now=written + 299) == {"v": 1}

    def test_expired_at_ttl(self, cache: FileCache) -> None:
        cache.set(URL, {"v": 1})
        written = 1_000_000.0
        _set_mtime(cache.path_for(URL), written)

        assert cache.get(URL, now=written + 300) is None
        assert cache.get(URL, now=written + 301) is None

    def test_expired_file_not_deleted_on_read(self, cache: FileCache) -> None:
        cache.set(URL, {"v": 1})
        _set_mtime(cache.path_for(URL), time.time() - 3600)

        assert cache.get(URL) is None
        assert cache.path_for(URL).is_file()


# ------------------------------------------------------------------ #
# Atomic writes
# ------------------------------------------------------------------ #


class TestAtomicWrite:
    def test_no_temp_files_left_behind(self, cache: FileCache, cache_dir: Path) -> None:
        cache.set(URL, {"v": 1})
        cache.set(URL, {"v": 2})
        assert [p.name for p in cache_dir.iterdir()] == [cache.path_for(URL).name]

    def test_failed_rename_keeps_previous_entry(
        self, cache: FileCache, cache_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cache.set(URL, {"v": 1})

        def _fail(src, dst):
            raise OSError("rename failed")

        monkeypatch.setattr("vimeokit.config.os.replace", _fail)

        assert cache.set(URL, {"v": 2}) is False
        assert cache.get(URL) == {"v": 1}
        assert [p.name for p in cache_dir.iterdir()] == [cache.path_for(URL).name]

    def test_write_into_deleted_directory_is_best_effort(self, tmp_path: Path) -> None:
        directory = tmp_path / "gone"
        directory.mkdir()
        cache = FileCache(CacheConfig(enabled=True, path=directory))
        directory.rmdir()

        assert cache.set(URL, {"v": 1}) is False


# ------------------------------------------------------------------ #
# Disabled cache and directory checks
# ------------------------------------------------------------------ #


class TestDisabled:
    def test_get_returns_default(self, disabled_cache: FileCache, cache: FileCache) -> None:
        cache.set(URL, {"v": 1})
        assert disabled_cache.get(URL) is None

    def test_set_is_noop(self, disabled_cache: FileCache, cache_dir: Path) -> None:
        assert disabled_cache.set(URL, {"v": 1}) is False
        assert list(cache_dir.iterdir()) == []

    def test_missing_directory_allowed_when_disabled(self, tmp_path: Path) -> None:
        FileCache(CacheConfig(enabled=False, path=tmp_path / "missing"))


class TestDirectoryCheck:
    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(CacheConfigError, match="missing"):
            FileCache(CacheConfig(enabled=True, path=tmp_path / "missing"))

    def test_unwritable_directory(self, cache_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("vimeokit.cache.cache.os.access", lambda path, mode: False)
        with pytest.raises(CacheConfigError):
            FileCache(CacheConfig(enabled=True, path=cache_dir))


# ------------------------------------------------------------------ #
# Maintenance
# ------------------------------------------------------------------ #


class TestPurgeAndStats:
    def test_purge_removes_only_expired(self, cache: FileCache) -> None:
        fresh_url, stale_url = URL, URL + "&page=2"
        cache.set(fresh_url, {"v": 1})
        cache.set(stale_url, {"v": 2})
        _set_mtime(cache.path_for(stale_url), time.time() - 301)

        assert cache.purge_expired() == 1
        assert cache.path_for(fresh_url).is_file()
        assert not cache.path_for(stale_url).exists()

    def test_purge_ignores_foreign_files(self, cache: FileCache, cache_dir: Path) -> None:
        foreign = cache_dir / "notes.txt"
        foreign.write_text("keep me")
        _set_mtime(foreign, 0)

        assert cache.purge_expired() == 0
        assert foreign.exists()

    def test_stats(self, cache: FileCache, cache_dir: Path) -> None:
        cache.set(URL, {"v": 1})
        cache.set(URL + "&page=2", {"v": 2})
        _set_mtime(cache.path_for(URL), time.time() - 1000)

        assert cache.stats() == {
            "enabled": True,
            "directory": str(cache_dir),
            "ttl_seconds": 300,
            "size": 2,
            "fresh": 1,
        }

    def test_stats_missing_directory(self, tmp_path: Path) -> None:
        stats = FileCache(CacheConfig(enabled=False, path=tmp_path / "missing")).stats()
        assert stats["size"] == 0
        assert stats["enabled"] is False
