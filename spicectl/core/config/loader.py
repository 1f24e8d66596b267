"""
Configuration loader — reads config.yml into a ToolConfig.

Lookup order: explicit path → $SPICECTL_CONFIG → ~/.config/spicectl/config.yml.
A missing file means built-in defaults; a file that exists but cannot
be parsed or validated is an error.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from spicectl.core.models.config import ToolConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SPICECTL_CONFIG"
DEFAULT_CONFIG_PATH = "~/.config/spicectl/config.yml"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


def find_config_file() -> Path | None:
    """Locate the configuration file.

    Returns:
        Path to config.yml, or None if neither the env var nor the
        default location points at an existing file.
    """
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()

    candidate = Path(DEFAULT_CONFIG_PATH).expanduser()
    if candidate.is_file():
        return candidate
    return None


def load_config(path: Path | None = None) -> ToolConfig:
    """Load and validate configuration.

    Args:
        path: Explicit path to config.yml. If None, searches the
            default locations and falls back to defaults.

    Returns:
        Validated ToolConfig.

    Raises:
        ConfigError: If an explicitly named file is missing, or any
            file found is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No config file found — using defaults")
            return ToolConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = ToolConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info("Loaded config for '%s' (host: %s)", config.tool, config.host.name)
    return config
