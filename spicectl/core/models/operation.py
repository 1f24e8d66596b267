"""
Operation records — one persisted entry per lifecycle invocation.

A record is created Pending when an operation begins and transitions
exactly once to Success or Failed when it completes.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


def _now() -> datetime:
    return datetime.now(UTC)


class OperationKind(str, Enum):
    """The five lifecycle operations."""

    INSTALL = "install"
    UPDATE = "update"
    REMOVE = "remove"
    APPLY = "apply"
    RESTORE = "restore"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    OperationKind.INSTALL: "Installing spicetify",
    OperationKind.UPDATE: "Updating spicetify",
    OperationKind.REMOVE: "Removing spicetify",
    OperationKind.APPLY: "Applying spicetify",
    OperationKind.RESTORE: "Restoring host application",
}


class OperationStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class OperationRecord(BaseModel):
    """A ledger entry for one lifecycle operation."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    kind: OperationKind
    status: OperationStatus = OperationStatus.PENDING
    output: str = ""
    error: str | None = None
    started_at: datetime = Field(default_factory=_now)
    ended_at: datetime | None = None
    duration_s: float | None = None

    @field_validator("started_at", "ended_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def pending(self) -> bool:
        return self.status == OperationStatus.PENDING

    @property
    def ok(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    def complete(self, success: bool, output: str, error: str | None = None) -> None:
        """Set the terminal status, output and end time.

        Duration is derived as ``ended_at - started_at``.
        """
        self.status = OperationStatus.SUCCESS if success else OperationStatus.FAILED
        self.output = output
        self.error = error
        self.ended_at = _now()
        self.duration_s = (self.ended_at - self.started_at).total_seconds()

    @property
    def formatted_duration(self) -> str:
        """Human duration: ``"2m 5s"``, ``"42s"`` or ``"N/A"``."""
        if self.duration_s is None:
            return "N/A"
        total = int(self.duration_s)
        minutes, seconds = divmod(total, 60)
        if minutes > 0:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"
