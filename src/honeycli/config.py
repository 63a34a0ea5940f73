"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for honeycli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.honeycli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~honeycli.models.GlobalConfig`
  JSON file storing the API URL, the active profile, per-profile overrides,
  and request settings.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, the profile, and the global config into the
  effective profile name and API base URL.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) so a crash never leaves a half-written config.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from honeycli.exceptions import ConfigError
from honeycli.models import GlobalConfig, RequestConfig

_APP_NAME = "honeycli"
_CONFIG_FILENAME = "config.json"

DEFAULT_API_URL = "https://api.honeycomb.io"
DEFAULT_PROFILE = "default"


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

    On Linux/BSD: ``$XDG_CONFIG_HOME/honeycli/`` (default ``~/.config/honeycli/``).
    On macOS/Windows: ``~/.honeycli/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (credentials, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/honeycli/`` (default ``~/.local/share/honeycli/``).
    On macOS/Windows: ``~/.honeycli/data/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. When *mode* is
    given the permissions are applied before any content is written.
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
        if mode is not None:
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
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


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~honeycli.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        return GlobalConfig.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk.

    Args:
        config: The configuration to save.
    """
    data = config.model_dump(mode="json", exclude_none=True)
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


@dataclass
class ResolvedConfig:
    """Effective settings for one invocation after precedence resolution."""

    config: GlobalConfig
    profile: str
    api_url: str

    @property
    def request(self) -> RequestConfig:
        return self.config.request


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_api_url: Optional[str] = None,
) -> ResolvedConfig:
    """Resolve the active profile and API URL.

    Profile precedence (high to low):
        1. ``--profile`` flag
        2. ``HONEYCLI_PROFILE`` environment variable
        3. ``active_profile`` in the global config
        4. ``"default"``

    API URL precedence (high to low):
        1. ``--api-url`` flag
        2. ``HONEYCLI_API_URL`` environment variable
        3. the profile's ``api_url``
        4. the global ``api_url``
        5. :data:`DEFAULT_API_URL`

    Returns:
        A :class:`ResolvedConfig`.

    Raises:
        ConfigError: If the global config file is invalid.
    """
    config = load_global_config()

    profile = cli_profile or os.environ.get("HONEYCLI_PROFILE") or config.active_profile
    profile = profile or DEFAULT_PROFILE

    api_url = cli_api_url or os.environ.get("HONEYCLI_API_URL")
    if not api_url:
        settings = config.profiles.get(profile)
        if settings is not None and settings.api_url:
            api_url = settings.api_url
    api_url = api_url or config.api_url or DEFAULT_API_URL

    return ResolvedConfig(config=config, profile=profile, api_url=api_url)
