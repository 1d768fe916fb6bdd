"""
Settings loader — reads the optional YAML settings file.

Lookup order:
    --config path  >  $ZSHINIT_CONFIG  >  ~/.config/zshinit/config.yml

No file at the default location means default settings. An explicitly
named file must exist.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from zshinit.core.models.settings import Settings

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "ZSHINIT_CONFIG"
DEFAULT_SETTINGS_FILE = Path("~/.config/zshinit/config.yml")


class ConfigError(Exception):
    """Raised when the settings file is invalid or an explicit one is missing."""


def find_settings_file(explicit: Path | None = None) -> tuple[Path | None, bool]:
    """Locate the settings file.

    Returns:
        ``(path, explicit)`` — ``explicit`` is True when the path came from
        the caller or the environment and therefore must exist.
    """
    if explicit is not None:
        return explicit.expanduser(), True

    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True

    default = DEFAULT_SETTINGS_FILE.expanduser()
    if default.is_file():
        return default, False
    return None, False


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit settings file. If None, the environment and the
            default location are consulted.

    Raises:
        ConfigError: If a named file is missing, unreadable or invalid.
    """
    path, explicit = find_settings_file(path)

    if path is None:
        logger.debug("No settings file — using defaults")
        return Settings()

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Settings file not found: {path}")
        return Settings()

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow everything under a top-level "zshinit:" key
    if "zshinit" in data and isinstance(data["zshinit"], dict):
        data = data["zshinit"]

    for key in ("home", "zsh_dir", "zsh_custom", "templates_dir"):
        if isinstance(data.get(key), str):
            data[key] = Path(data[key]).expanduser()

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
