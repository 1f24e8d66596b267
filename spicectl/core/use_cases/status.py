"""
Status use case — lifecycle status plus what spicectl remembers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from spicectl.core.models.operation import OperationRecord
from spicectl.core.models.settings import AppSettings
from spicectl.core.models.status import LifecycleStatus
from spicectl.core.persistence.ledger import OperationLedger
from spicectl.core.persistence.settings_file import default_settings_path, load_settings
from spicectl.core.services.lifecycle import LifecycleService
from spicectl.core.services.update_check import should_auto_check


@dataclass
class StatusResult:
    """Aggregated tool status."""

    tool: str = ""
    host: str = ""
    status: LifecycleStatus = field(default_factory=LifecycleStatus.unknown)
    host_installed: bool = False
    config_info: dict[str, str] = field(default_factory=dict)
    settings: AppSettings | None = None
    last_operation: OperationRecord | None = None
    update_check_due: bool = False

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {
            "tool": self.tool,
            "host": {"name": self.host, "installed": self.host_installed},
            "status": {
                "state": self.status.state.value,
                "version": self.status.version,
                "display": self.status.display_text,
                "description": self.status.description,
            },
            "config": self.config_info,
        }
        if self.settings:
            result["last_tool_version"] = self.settings.last_tool_version
            result["update_check_due"] = self.update_check_due
        if self.last_operation:
            result["last_operation"] = {
                "kind": self.last_operation.kind.value,
                "status": self.last_operation.status.value,
                "started_at": self.last_operation.started_at.isoformat(),
                "duration": self.last_operation.formatted_duration,
            }
        return result


def get_status(
    service: LifecycleService,
    ledger: OperationLedger | None = None,
) -> StatusResult:
    """Probe the tool and host, and attach the last recorded operation."""
    result = StatusResult(
        tool=service.config.tool,
        host=service.host.name,
        status=service.check_status(),
        host_installed=service.host.is_installed(),
        config_info=service.config_info(),
    )

    if ledger is not None:
        result.settings = load_settings(default_settings_path(ledger.path.parent))
        recent = ledger.recent(1)
        result.last_operation = recent[0] if recent else None
        result.update_check_due = result.status.is_installed and should_auto_check(result.settings)

    return result
