"""
Error taxonomy — every failure spicectl surfaces to a caller.

The process runner raises ``ExecutionError``. The lifecycle service
re-wraps it into an operation-specific kind (``raise ... from exc``)
so callers can branch on ``kind`` without parsing messages, while the
original command output stays reachable through ``__cause__``.
"""

from __future__ import annotations

from spicectl.core.models.operation import OperationKind


class SpicectlError(Exception):
    """Base class for all spicectl failures."""

    kind: str = "error"
    prefix: str = ""
    recovery_suggestion: str | None = None

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}{detail}" if self.prefix else detail)


class ExecutionError(SpicectlError):
    """A command could not be launched, exited non-zero, or timed out.

    ``output`` is the full combined text captured before the failure.
    The message prefers stderr when the command wrote any.
    """

    kind = "execution_failed"
    prefix = "Command execution failed: "

    def __init__(
        self,
        command: str,
        output: str = "",
        *,
        stderr: str = "",
        exit_code: int | None = None,
        timed_out: bool = False,
        reason: str = "",
    ) -> None:
        self.command = command
        self.output = output
        self.stderr = stderr
        self.exit_code = exit_code
        self.timed_out = timed_out
        detail = reason or stderr.strip() or output.strip()
        if not detail:
            detail = f"'{command}' exited with code {exit_code}"
        super().__init__(detail)


class PreconditionMissing(SpicectlError):
    kind = "precondition_missing"
    recovery_suggestion = "Install the missing component, then retry."


class InstallationFailed(SpicectlError):
    kind = "installation_failed"
    prefix = "Installation failed: "
    recovery_suggestion = "Check the console output for more details."


class UpdateFailed(SpicectlError):
    kind = "update_failed"
    prefix = "Update failed: "
    recovery_suggestion = "Check the console output for more details."


class ApplyFailed(SpicectlError):
    """Raised by both Apply and Restore; ``operation`` tells them apart."""

    kind = "apply_failed"
    prefix = "Apply operation failed: "

    def __init__(self, detail: str = "", *, operation: OperationKind = OperationKind.APPLY) -> None:
        self.operation = operation
        super().__init__(detail)


class RemovalFailed(SpicectlError):
    """Reserved: Remove currently always succeeds once invoked."""

    kind = "removal_failed"
    prefix = "Removal failed: "


class LedgerError(SpicectlError):
    kind = "ledger_error"
