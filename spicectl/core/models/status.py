"""
LifecycleStatus — derived view of where the tool stands.

Never stored. Recomputed on demand from three signals: is the tool
on PATH, what version does it report, does a backup artifact exist.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class StatusState(str, Enum):
    NOT_INSTALLED = "not_installed"
    INSTALLED = "installed"
    APPLIED = "applied"
    UNKNOWN = "unknown"


class LifecycleStatus(BaseModel):
    """One of NotInstalled, Installed(version), Applied, Unknown."""

    state: StatusState = StatusState.UNKNOWN
    version: str | None = None  # only set for INSTALLED

    @classmethod
    def not_installed(cls) -> LifecycleStatus:
        return cls(state=StatusState.NOT_INSTALLED)

    @classmethod
    def installed(cls, version: str) -> LifecycleStatus:
        return cls(state=StatusState.INSTALLED, version=version)

    @classmethod
    def applied(cls) -> LifecycleStatus:
        return cls(state=StatusState.APPLIED)

    @classmethod
    def unknown(cls) -> LifecycleStatus:
        return cls(state=StatusState.UNKNOWN)

    @property
    def is_installed(self) -> bool:
        return self.state != StatusState.NOT_INSTALLED

    @property
    def display_text(self) -> str:
        if self.state == StatusState.INSTALLED:
            return f"Installed (v{self.version})"
        return {
            StatusState.NOT_INSTALLED: "Not Installed",
            StatusState.APPLIED: "Applied & Active",
            StatusState.UNKNOWN: "Unknown",
        }[self.state]

    @property
    def description(self) -> str:
        if self.state == StatusState.INSTALLED:
            return f"Version {self.version} is ready to be applied"
        return {
            StatusState.NOT_INSTALLED: "spicetify is not installed on this system",
            StatusState.APPLIED: "spicetify is active and customizing the host application",
            StatusState.UNKNOWN: "Unable to determine spicetify status",
        }[self.state]
