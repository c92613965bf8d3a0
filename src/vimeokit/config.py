"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles the persistent configuration for vimeokit:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.vimeokit/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir` and :func:`get_data_dir`.
* **Global config** -- A single :class:`~vimeokit.models.GlobalConfig`
  JSON file storing defaults (API version, hostname, cache settings).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the global config into the effective
  configuration.

File writes, including cache entries, go through :func:`atomic_write`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from vimeokit.exceptions import ConfigurationError
from vimeokit.models import GlobalConfig

_APP_NAME = "vimeokit"
_CONFIG_FILENAME = "config.json"

ENV_API_VERSION = "VIMEO_API_VERSION"
ENV_HOSTNAME = "VIMEO_HOSTNAME"
ENV_CACHE_DIR = "VIMEO_CACHE_DIR"
ENV_CACHE_TTL = "VIMEO_CACHE_TTL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/vimeokit/`` (default ``~/.config/vimeokit/``).
    On macOS/Windows: ``~/.vimeokit/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the default response cache directory, creating it if necessary.

    Used when neither the config file, ``VIMEO_CACHE_DIR`` nor ``--cache-dir``
    names a directory. Cached data can be safely deleted at any time.

    On Linux/BSD: ``$XDG_CACHE_HOME/vimeokit/`` (default ``~/.cache/vimeokit/``).
    On macOS/Windows: ``~/.vimeokit/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/vimeokit/`` (default ``~/.local/share/vimeokit/``).
    On macOS/Windows: ``~/.vimeokit/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str, tmp_suffix: str = ".tmp") -> None:
    """Write data to *path* atomically using temp file + rename.

    The temporary file is created next to *path* with a unique name so that
    ``os.replace`` is an atomic rename on POSIX systems and concurrent
    writers never share a temp file. Readers see either the previous
    complete file or the new one. On any failure the temp file is removed
    and the error is re-raised. The parent directory must already exist.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=tmp_suffix,
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~vimeokit.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigurationError: If the file exists but contains invalid JSON or
            fails Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def _env_ttl() -> Optional[int]:
    raw = os.environ.get(ENV_CACHE_TTL)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{ENV_CACHE_TTL} must be an integer number of seconds, got '{raw}'"
        ) from exc


def resolve_config(
    cli_api_version: Optional[str] = None,
    cli_hostname: Optional[str] = None,
    cli_cache_dir: Optional[str | Path] = None,
    cli_ttl: Optional[int] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``VIMEO_API_VERSION``, ``VIMEO_HOSTNAME``,
           ``VIMEO_CACHE_DIR``, ``VIMEO_CACHE_TTL``)
        3. User config (``~/.config/vimeokit/config.json``)
        4. Defaults (the cache directory falls back to :func:`get_cache_dir`)

    Returns:
        A new :class:`~vimeokit.models.GlobalConfig`; the loaded file is never
        modified.
    """
    config = load_global_config()

    request_update: dict[str, Any] = {}
    api_version = cli_api_version or os.environ.get(ENV_API_VERSION)
    if api_version:
        request_update["api_version"] = api_version
    hostname = cli_hostname or os.environ.get(ENV_HOSTNAME)
    if hostname:
        request_update["hostname"] = hostname

    cache_update: dict[str, Any] = {}
    cache_dir = cli_cache_dir or os.environ.get(ENV_CACHE_DIR)
    if cache_dir:
        cache_update["path"] = Path(cache_dir).expanduser()
    elif "path" not in config.cache.model_fields_set:
        cache_update["path"] = get_cache_dir()
    ttl = cli_ttl if cli_ttl is not None else _env_ttl()
    if ttl is not None:
        cache_update["ttl_seconds"] = ttl

    return config.model_copy(
        update={
            "request": config.request.model_copy(update=request_update),
            "cache": config.cache.model_copy(update=cache_update),
        }
    )
