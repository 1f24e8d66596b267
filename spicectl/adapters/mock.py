"""
Mock runner — universal test double for the process runner.

Used in tests and in ``--mock`` mode to exercise the lifecycle without
touching a real shell. By default every command succeeds; individual
commands can be given custom output, a failure, or a handler that
computes the response (e.g. a version that changes after an update).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from spicectl.adapters.base import CommandRunner, Sink
from spicectl.core.errors import ExecutionError
from spicectl.core.models.process import ProcessResult

Handler = Callable[[str], "ProcessResult | ExecutionError"]


@dataclass
class MockCall:
    """One recorded ``run`` invocation."""

    command: str
    env: dict[str, str] | None = None
    streamed: bool = False
    timeout: float | None = None


@dataclass
class _Response:
    chunks: list[str] = field(default_factory=list)
    exit_code: int = 0
    handler: Handler | None = None


class MockRunner(CommandRunner):
    """Scriptable runner that records every call."""

    def __init__(self, default_output: str = "[mock] executed\n") -> None:
        self._default_output = default_output
        self._responses: dict[str, _Response] = {}
        self._call_log: list[MockCall] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[MockCall]:
        """All calls this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        return [c.command for c in self._call_log]

    def set_output(self, command: str, *chunks: str) -> None:
        """Make ``command`` succeed, emitting ``chunks`` in order."""
        self._responses[command] = _Response(chunks=list(chunks))

    def set_failure(self, command: str, output: str = "mock failure\n", exit_code: int = 1) -> None:
        """Make ``command`` exit non-zero after emitting ``output``."""
        self._responses[command] = _Response(chunks=[output] if output else [], exit_code=exit_code)

    def set_handler(self, command: str, handler: Handler) -> None:
        """Compute the response for ``command`` at call time."""
        self._responses[command] = _Response(handler=handler)

    def run(
        self,
        command: str,
        env: Mapping[str, str] | None = None,
        sink: Sink | None = None,
        *,
        timeout: float | None = None,
    ) -> ProcessResult:
        self._call_log.append(
            MockCall(
                command=command,
                env=dict(env) if env is not None else None,
                streamed=sink is not None,
                timeout=timeout,
            )
        )

        response = self._responses.get(command)
        if response is None:
            response = _Response(chunks=[self._default_output])

        if response.handler is not None:
            outcome = response.handler(command)
            if isinstance(outcome, ExecutionError):
                if sink is not None and outcome.output:
                    sink(outcome.output)
                raise outcome
            if sink is not None and outcome.output:
                sink(outcome.output)
            return outcome

        for chunk in response.chunks:
            if sink is not None:
                sink(chunk)
        output = "".join(response.chunks)

        if response.exit_code != 0:
            raise ExecutionError(command, output, exit_code=response.exit_code)
        return ProcessResult(command=command, output=output, exit_code=0)

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
