"""
ProcessResult — the outcome of one external command.

Transient: owned by the ``run`` call that produced it and never
persisted. Failures are not represented here; a non-zero exit is
raised as ``ExecutionError`` carrying the same captured text.
"""

from __future__ import annotations

from pydantic import BaseModel


class ProcessResult(BaseModel):
    """Combined output and exit status of a finished command."""

    command: str
    output: str = ""            # stdout + stderr chunks in arrival order
    exit_code: int = 0
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        """Whether the command exited with status 0."""
        return self.exit_code == 0

    @property
    def stripped(self) -> str:
        """Output with surrounding whitespace removed."""
        return self.output.strip()
