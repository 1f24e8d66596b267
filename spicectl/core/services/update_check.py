"""
Self-update check policy.

Fetching release metadata is someone else's job; this module only
decides *whether* a check is due and records that one happened.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from spicectl.core.models.settings import AppSettings
from spicectl.core.persistence.settings_file import update_settings

logger = logging.getLogger(__name__)

CHECK_INTERVAL = timedelta(days=1)


def should_auto_check(settings: AppSettings | None, now: datetime | None = None) -> bool:
    """Auto-check is enabled and the last check is over a day old (or never happened)."""
    if settings is None or not settings.auto_check_updates:
        return False
    if settings.last_update_check is None:
        return True
    now = now or datetime.now(UTC)
    return now - settings.last_update_check > CHECK_INTERVAL


def record_update_check(path: Path, now: datetime | None = None) -> AppSettings:
    """Stamp ``last_update_check`` in the settings file."""
    stamp = now or datetime.now(UTC)

    def _mark(settings: AppSettings) -> None:
        settings.last_update_check = stamp

    logger.debug("Recording update check at %s", stamp.isoformat())
    return update_settings(path, _mark)
