"""
AppSettings — the single persisted preferences record.

Stored as JSON next to the operation ledger. Missing or corrupt
files yield a fresh record (create-if-absent semantics).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator


def _now() -> datetime:
    return datetime.now(UTC)


class AppSettings(BaseModel):
    schema_version: int = 1

    auto_check_updates: bool = True
    show_console_by_default: bool = False
    last_update_check: datetime | None = None
    theme: Literal["auto", "light", "dark"] = "auto"
    enable_animations: bool = True

    last_tool_version: str | None = None
    installation_path: str | None = None

    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @field_validator("last_update_check", "created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        """Hand-edited timestamps without an offset are read as UTC."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = _now()
