"""
Settings persistence — atomic read/write for AppSettings.

Settings are stored as JSON in <state_dir>/settings.json. Writes are
atomic (write to temp file, then rename) to prevent corruption if the
process crashes mid-write.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from spicectl.core.models.settings import AppSettings

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "settings.json"


def default_settings_path(state_dir: Path) -> Path:
    """Get the default settings file path inside a state directory."""
    return state_dir / DEFAULT_SETTINGS_FILE


def load_settings(path: Path) -> AppSettings:
    """Load settings from a JSON file.

    Returns:
        AppSettings model. If the file doesn't exist or is corrupt,
        returns fresh defaults.
    """
    if not path.is_file():
        logger.info("No settings file at %s — using defaults", path)
        return AppSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return AppSettings.model_validate(data)
    except json.JSONDecodeError as e:
        logger.warning("Corrupt settings file %s: %s — using defaults", path, e)
        return AppSettings()
    except (OSError, ValidationError) as e:
        logger.warning("Cannot load settings from %s: %s — using defaults", path, e)
        return AppSettings()


def save_settings(settings: AppSettings, path: Path) -> None:
    """Save settings to a JSON file (atomic write)."""
    settings.touch()
    path.parent.mkdir(parents=True, exist_ok=True)

    content = json.dumps(settings.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".settings_", suffix=".tmp")
    os.close(fd)
    tmp = Path(tmp_path)
    try:
        tmp.write_text(content, encoding="utf-8")
        tmp.replace(path)
        logger.debug("Settings saved to %s", path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save settings to %s: %s", path, e)
        raise


def update_settings(path: Path, mutate: Callable[[AppSettings], None]) -> AppSettings:
    """Load (or create), apply ``mutate``, save, and return the record."""
    settings = load_settings(path)
    mutate(settings)
    save_settings(settings, path)
    return settings
