"""
Runner base — the contract between the lifecycle service and the OS.

The lifecycle service only talks to external commands through this
protocol, which is what lets tests (and ``--mock`` mode) swap in
``MockRunner`` without touching a real shell.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping

from spicectl.core.errors import ExecutionError
from spicectl.core.models.process import ProcessResult

Sink = Callable[[str], None]


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Implementations MUST raise ``ExecutionError`` for launch failures,
    non-zero exits and timeouts, and return a ``ProcessResult`` only
    for exit status 0.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'process', 'mock')."""

    @abstractmethod
    def run(
        self,
        command: str,
        env: Mapping[str, str] | None = None,
        sink: Sink | None = None,
        *,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run one command to completion.

        Args:
            command: A rendered catalog command.
            env: Complete environment for the child process.
            sink: Called with each output chunk, in arrival order.
            timeout: Seconds before the command is killed (None = never).
        """

    def capture(
        self,
        command: str,
        env: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> str | None:
        """Run a probe and return its trimmed output, or None if it failed."""
        try:
            return self.run(command, env, timeout=timeout).stripped
        except ExecutionError:
            return None

    def succeeds(
        self,
        command: str,
        env: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> bool:
        """Whether a probe exits 0 with non-empty output."""
        return bool(self.capture(command, env, timeout=timeout))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
