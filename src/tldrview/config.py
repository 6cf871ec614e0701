"""Configuration management with XDG paths, atomic writes, and TOML loading.

This module handles all persistent configuration for tldrview:

* **Directory layout** -- ``$TLDRVIEW_CACHE_DIR`` / ``$TLDRVIEW_CONFIG_DIR``
  override everything; otherwise XDG Base Directory compliant on Linux/BSD
  and ``~/.tldrview/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_cache_dir`, :func:`get_data_dir`.
* **Config file** -- a single ``config.toml`` deserialised into a
  :class:`~tldrview.models.Config`. A missing file yields the defaults.
* **Seeding** -- :func:`seed_config` writes the default configuration out
  so users have a documented starting point to edit.

Unlike the crash-log data directory, the cache and config directories are
*not* created on lookup: an absent cache directory is meaningful to
:class:`~tldrview.cache.CacheStore`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import os
import platform
import tempfile
import tomllib
from pathlib import Path
from typing import Optional

import tomli_w
from pydantic import ValidationError

from tldrview.exceptions import ConfigError
from tldrview.models import Config

_APP_NAME = "tldrview"
CONFIG_FILE_NAME = "config.toml"

CACHE_DIR_ENV = "TLDRVIEW_CACHE_DIR"
CONFIG_DIR_ENV = "TLDRVIEW_CONFIG_DIR"


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
    """Return the configuration directory.

    ``$TLDRVIEW_CONFIG_DIR`` wins when set. Otherwise, on Linux/BSD:
    ``$XDG_CONFIG_HOME/tldrview/`` (default ``~/.config/tldrview/``);
    on macOS/Windows: ``~/.tldrview/``.

    Returns:
        Absolute path to the configuration directory. It may not exist.
    """
    override = os.environ.get(CONFIG_DIR_ENV, "")
    if override:
        return Path(override)
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_cache_dir() -> Path:
    """Return the cache root directory.

    ``$TLDRVIEW_CACHE_DIR`` wins when set. Otherwise, on Linux/BSD:
    ``$XDG_CACHE_HOME/tldrview/`` (default ``~/.cache/tldrview/``);
    on macOS/Windows: ``~/.tldrview/cache/``.

    Returns:
        Absolute path to the cache root. It may not exist.
    """
    override = os.environ.get(CACHE_DIR_ENV, "")
    if override:
        return Path(override)
    if _is_xdg_platform():
        return _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    return _fallback_base_dir() / "cache"


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/tldrview/`` (default ``~/.local/share/tldrview/``).
    On macOS/Windows: ``~/.tldrview/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_path() -> Path:
    """Path to the config file (``<config_dir>/config.toml``)."""
    return get_config_dir() / CONFIG_FILE_NAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config file ---


def load_config(path: Optional[Path] = None) -> Config:
    """Load the configuration from ``config.toml``.

    Args:
        path: Explicit config file path. Defaults to :func:`get_config_path`.

    Returns:
        The deserialised :class:`~tldrview.models.Config`. If the file does
        not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid TOML or fails
            Pydantic validation.
    """
    path = path or get_config_path()
    if not path.is_file():
        return Config()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return Config.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config at {path}: {exc}") from exc


def dump_config(config: Config) -> str:
    """Serialise *config* as a TOML document.

    ``None`` values (terminal-default colours) have no TOML representation
    and are left out; loading the document back restores them as defaults.
    """
    return tomli_w.dumps(config.model_dump(mode="json", exclude_none=True))


def seed_config(path: Optional[Path] = None) -> Path:
    """Write the default configuration to the config path.

    Args:
        path: Explicit target. Defaults to :func:`get_config_path`.

    Returns:
        The path that was written.

    Raises:
        ConfigError: If a config file already exists at the target.
    """
    path = path or get_config_path()
    if path.exists():
        raise ConfigError(
            f"A configuration file already exists at {path}, no action was taken."
        )
    _atomic_write(path, dump_config(Config()))
    return path
