"""
Run use case — execute one lifecycle operation with full bookkeeping.

This is the top-level orchestrator: it opens a ledger record, runs the
operation while teeing narration into a buffer, and completes the
record no matter how the operation ends. Successful runs then refresh
the status and sync the settings record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from spicectl.adapters.base import CommandRunner, Sink
from spicectl.core.errors import SpicectlError
from spicectl.core.models.config import ToolConfig
from spicectl.core.models.operation import OperationKind, OperationRecord
from spicectl.core.models.settings import AppSettings
from spicectl.core.models.status import LifecycleStatus, StatusState
from spicectl.core.persistence.ledger import OperationLedger
from spicectl.core.persistence.settings_file import default_settings_path, update_settings
from spicectl.core.services.lifecycle import LifecycleService, UpdateOutcome
from spicectl.core.services.update_check import record_update_check

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Result of running one lifecycle operation."""

    kind: OperationKind
    record: OperationRecord | None = None
    status: LifecycleStatus | None = None
    update: UpdateOutcome | None = None
    error: str | None = None
    error_kind: str | None = None
    recovery_suggestion: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {"operation": self.kind.value, "ok": self.ok}
        if self.record:
            result["record"] = {
                "id": self.record.id,
                "status": self.record.status.value,
                "started_at": self.record.started_at.isoformat(),
                "duration_s": self.record.duration_s,
            }
        if self.status:
            result["status"] = self.status.model_dump(mode="json")
        if self.update:
            result["update"] = {
                "previous": self.update.previous,
                "current": self.update.current,
                "changed": self.update.changed,
            }
        if self.warnings:
            result["warnings"] = self.warnings
        if self.error:
            result["error"] = self.error
            result["error_kind"] = self.error_kind
            if self.recovery_suggestion:
                result["recovery_suggestion"] = self.recovery_suggestion
        return result


def build_service(config: ToolConfig, mock_mode: bool = False) -> LifecycleService:
    """Wire a lifecycle service with a real (or mock) runner."""
    runner: CommandRunner
    if mock_mode:
        from spicectl.adapters.mock import MockRunner

        runner = MockRunner()
    else:
        from spicectl.adapters.shell.command import ProcessRunner

        runner = ProcessRunner(
            config.shell,
            timeout=config.command_timeout,
            extra_path_dirs=config.extra_path_dirs,
        )
    return LifecycleService(config, runner)


def _sync_settings(kind: OperationKind, status: LifecycleStatus, path: Path) -> None:
    def _mutate(settings: AppSettings) -> None:
        if kind == OperationKind.REMOVE:
            settings.last_tool_version = None
            settings.installation_path = None
        elif status.state == StatusState.INSTALLED:
            settings.last_tool_version = status.version

    if kind in (OperationKind.INSTALL, OperationKind.UPDATE, OperationKind.REMOVE):
        update_settings(path, _mutate)
    if kind == OperationKind.UPDATE:
        record_update_check(path)


def run_operation(
    kind: OperationKind,
    service: LifecycleService,
    ledger: OperationLedger,
    *,
    sink: Sink | None = None,
    settings_path: Path | None = None,
) -> OperationResult:
    """Run ``kind`` and record it in the ledger.

    The ledger record is always completed, including when the
    operation raises something unexpected (which is then re-raised).

    Args:
        kind: Which lifecycle operation to run.
        service: The lifecycle service to drive.
        ledger: Where the attempt is recorded.
        sink: Receives narration and command output as it arrives.
        settings_path: Settings file to sync after success
            (default: ``settings.json`` beside the ledger).

    Returns:
        OperationResult; ``error`` is set when the operation failed.
    """
    result = OperationResult(kind=kind)
    buffer: list[str] = []

    def _tee(chunk: str) -> None:
        buffer.append(chunk)
        if sink is not None:
            sink(chunk)

    record = ledger.begin(kind)
    error_text: str | None = None
    try:
        outcome = service.perform(kind, sink=_tee)
        if isinstance(outcome, UpdateOutcome):
            result.update = outcome
    except SpicectlError as e:
        error_text = str(e)
        result.error = error_text
        result.error_kind = e.kind
        result.recovery_suggestion = e.recovery_suggestion
        logger.info("%s failed: %s", kind.value, e)
    except BaseException as e:
        error_text = f"Unexpected error: {e!r}"
        raise
    finally:
        result.record = ledger.complete(
            record,
            success=error_text is None,
            output="".join(buffer),
            error=error_text,
        )

    if result.ok:
        result.status = service.check_status()
        if settings_path is None:
            settings_path = default_settings_path(ledger.path.parent)
        try:
            _sync_settings(kind, result.status, settings_path)
        except OSError as e:
            logger.warning("Could not update settings at %s: %s", settings_path, e)
            result.warnings.append(f"Settings not updated: {e}")

    return result
