"""Configuration path utilities and settings for essentials_time.

Centralizes logic for locating and loading the optional settings file
(``config.toml``). The settings supply the defaults used when a caller does
not pass them explicitly: the time zone naive input is resolved in, the
culture used for formatting, and the CLI log level.

Default location follows the XDG base directory layout using
``$XDG_CONFIG_HOME/essentials-time`` or ``~/.config/essentials-time`` when the
environment variable is not set.

Environment overrides:
    * ``ESSENTIALS_TIME_CONFIG_DIR``: override the config directory root (useful for tests)

Example ``config.toml``::

    [time]
    default_time_zone = "Europe/Copenhagen"
    culture = "da-DK"
    log_level = "INFO"
"""

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from .errors import ConfigurationError

__all__ = [
    "TimeSettings",
    "get_config_dir",
    "get_app_config_path",
    "load_app_config",
    "get_settings",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeSettings:
    default_time_zone: str = "UTC"
    culture: str = "invariant"
    log_level: str = "WARNING"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TimeSettings":
        section = data.get("time", {})
        if not isinstance(section, Mapping):
            raise ConfigurationError("[time] must be a table")
        unknown = set(section) - {"default_time_zone", "culture", "log_level"}
        if unknown:
            raise ConfigurationError(f"Unknown [time] settings: {', '.join(sorted(unknown))}")
        values: dict[str, str] = {}
        for key, value in section.items():
            if not isinstance(value, str):
                raise ConfigurationError(f"[time].{key} must be a string, got {value!r}")
            values[key] = value
        return cls(**values)


def get_config_dir() -> Path:
    override = os.environ.get("ESSENTIALS_TIME_CONFIG_DIR")
    if override:
        return Path(override)
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "essentials-time"


def get_app_config_path() -> Path:
    return get_config_dir() / "config.toml"


def load_app_config(path: Path | None = None) -> Mapping[str, Any]:
    if path is None:
        path = get_app_config_path()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    try:
        return tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}") from e


@lru_cache(maxsize=1)
def get_settings() -> TimeSettings:
    """Settings from ``config.toml``, or the defaults when no file exists.

    Read once per process; call ``get_settings.cache_clear()`` after changing
    the environment.
    """
    path = get_app_config_path()
    if not path.exists():
        logger.debug("No config file at %s; using defaults", path)
        return TimeSettings()
    settings = TimeSettings.from_mapping(load_app_config(path))
    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings
