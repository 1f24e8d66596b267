"""
Filesystem primitives — existence checks and best-effort removal.

Thin wrappers so the lifecycle service never calls ``shutil`` or
``Path.unlink`` directly, and tests can point everything at a tmp dir.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def path_exists(path: Path) -> bool:
    """True for files, directories and dangling symlinks."""
    return path.exists() or path.is_symlink()


def remove_path(path: Path) -> bool:
    """Delete a file, symlink or directory tree.

    Returns:
        True if something was removed, False if nothing was there.

    Raises:
        OSError: If the path exists but cannot be removed.
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)
    else:
        return False
    logger.debug("Removed %s", path)
    return True


def read_text(path: Path) -> str | None:
    """File contents, or None if missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None
