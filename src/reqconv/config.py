"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for reqconv:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.reqconv/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~reqconv.models.GlobalConfig`
  JSON file storing default formats and converter settings.
* **Project config** -- An optional ``./reqconv.json`` with the same keys,
  layered over the global config.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from reqconv.exceptions import ConfigError
from reqconv.models import FlattenMode, GlobalConfig

_APP_NAME = "reqconv"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "reqconv.json"

ENV_INPUT_FORMAT = "REQCONV_FROM"
ENV_OUTPUT_FORMAT = "REQCONV_TO"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports the XDG Base Directory layout (Linux/FreeBSD)."""
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

    On Linux/BSD: ``$XDG_CONFIG_HOME/reqconv/`` (default ``~/.config/reqconv/``).
    On macOS/Windows: ``~/.reqconv/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/reqconv/`` (default ``~/.local/share/reqconv/``).
    On macOS/Windows: ``~/.reqconv/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the exception re-raised.
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


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~reqconv.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./reqconv.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_input_format: Optional[str] = None,
    cli_output_format: Optional[str] = None,
    cli_flatten_mode: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``--from``, ``--to``, ``--flatten``)
        2. Environment variables (``REQCONV_FROM``, ``REQCONV_TO``)
        3. Project config (``./reqconv.json``)
        4. User config (``~/.config/reqconv/config.json``)
        5. Defaults

    Format names are validated by Pydantic, so an unknown value from any
    layer surfaces as a :class:`ConfigError`. Unknown names given on the
    command line are reported by the caller before this is reached.

    Returns:
        The merged :class:`~reqconv.models.GlobalConfig`.
    """
    # 5 + 4
    data = load_global_config().model_dump(mode="json")

    # 3
    project = load_project_config()
    if project is not None:
        for key, value in project.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    # 2
    env_input = os.environ.get(ENV_INPUT_FORMAT)
    if env_input:
        data["input_format"] = env_input.lower()
    env_output = os.environ.get(ENV_OUTPUT_FORMAT)
    if env_output:
        data["output_format"] = env_output.lower()

    # 1
    if cli_input_format is not None:
        data["input_format"] = cli_input_format.lower()
    if cli_output_format is not None:
        data["output_format"] = cli_output_format.lower()

    try:
        config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    # The flatten override is applied to the validated model, so a malformed
    # "converter" section is reported above rather than written into.
    if cli_flatten_mode is not None:
        converter = config.converter.model_copy(
            update={"flatten_mode": FlattenMode(cli_flatten_mode)}
        )
        config = config.model_copy(update={"converter": converter})
    return config
