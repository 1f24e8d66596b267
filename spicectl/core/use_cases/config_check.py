"""
Config check use case — validate config.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from spicectl.core.config.loader import ConfigError, find_config_file, load_config
from spicectl.core.models.config import ToolConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: ToolConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "tool": self.config.tool if self.config else None,
            "host": self.config.host.name if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate configuration and report issues.

    A missing file is valid (defaults apply) but produces a warning.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    result.config_path = config_path

    if config_path is None:
        result.warnings.append("No config file found; using built-in defaults.")

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    url = urlparse(config.install_script_url)
    if url.scheme != "https":
        result.errors.append(
            f"install_script_url must use https, got '{url.scheme or 'no scheme'}'"
        )

    if not any(p.exists() for p in config.host_install_paths()):
        result.warnings.append(
            f"{config.host.name} not found at any of: {', '.join(config.host.install_paths)}"
        )

    if not config.remove_paths:
        result.warnings.append("remove_paths is empty; 'remove' will only restore.")

    if config.command_timeout is None:
        result.warnings.append("command_timeout is disabled; a hung command will block forever.")

    result.valid = len(result.errors) == 0
    return result
