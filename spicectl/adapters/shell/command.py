"""
Process runner — launch one command and merge its output in real time.

This is the SINGLE PLACE where spicectl starts a child process. All
streaming, timeout and failure handling is centralised here.

Threading model
───────────────
- Two daemon reader threads (stdout, stderr) read whatever bytes are
  available, decode them incrementally and push ``(stream, text)``
  onto one ``queue.Queue``. A ``None`` text marks end-of-stream.
- The calling thread is the single consumer: it appends each chunk to
  the ``OutputAccumulator`` and hands it to the sink. A slow sink
  never blocks the readers.
- Each ``run`` call owns its queue, accumulator and threads, so
  concurrent calls share nothing.
"""

from __future__ import annotations

import codecs
import logging
import os
import queue
import signal
import subprocess
import threading
import time
from collections.abc import Mapping, Sequence
from typing import IO

from spicectl.adapters.base import CommandRunner, Sink
from spicectl.adapters.shell.environment import DEFAULT_EXTRA_PATH_DIRS, build_environment
from spicectl.core.errors import ExecutionError
from spicectl.core.models.process import ProcessResult

logger = logging.getLogger(__name__)

DEFAULT_SHELL: tuple[str, ...] = ("/bin/bash", "-l", "-c")

_CHUNK_SIZE = 4096
_POLL_INTERVAL = 0.05   # seconds between exit/deadline checks
_DRAIN_GRACE = 2.0      # seconds to keep reading after the process exits
_DEFAULT = object()


class OutputAccumulator:
    """Ordered record of output chunks, guarded by one lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._chunks: list[str] = []
        self._streams: dict[str, list[str]] = {}

    def append(self, stream: str, text: str) -> None:
        with self._lock:
            self._chunks.append(text)
            self._streams.setdefault(stream, []).append(text)

    def value(self) -> str:
        with self._lock:
            return "".join(self._chunks)

    def stream_value(self, stream: str) -> str:
        with self._lock:
            return "".join(self._streams.get(stream, []))


def _pump(stream: IO[bytes], name: str, out: queue.Queue, chunk_size: int) -> None:
    """Reader thread body: forward decoded chunks until EOF."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    try:
        while True:
            data = stream.read1(chunk_size)  # type: ignore[attr-defined]
            if not data:
                break
            text = decoder.decode(data)
            if text:
                out.put((name, text))
        tail = decoder.decode(b"", final=True)
        if tail:
            out.put((name, tail))
    except (OSError, ValueError) as e:
        logger.debug("Reader for %s stopped: %s", name, e)
    finally:
        out.put((name, None))


def _kill(proc: subprocess.Popen) -> None:
    """Kill the command and everything it spawned (own session)."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


class ProcessRunner(CommandRunner):
    """Run commands through a login shell and capture merged output.

    Args:
        shell: Shell argv prefix; the command string is appended.
        timeout: Default per-command timeout in seconds (None = never).
        extra_path_dirs: PATH entries used when a caller passes no env.
    """

    def __init__(
        self,
        shell: Sequence[str] = DEFAULT_SHELL,
        *,
        timeout: float | None = None,
        extra_path_dirs: Sequence[str] = DEFAULT_EXTRA_PATH_DIRS,
        drain_grace: float = _DRAIN_GRACE,
    ) -> None:
        self._shell = list(shell)
        self._timeout = timeout
        self._extra_path_dirs = tuple(extra_path_dirs)
        self._drain_grace = drain_grace

    @property
    def name(self) -> str:
        return "process"

    def run(
        self,
        command: str,
        env: Mapping[str, str] | None = None,
        sink: Sink | None = None,
        *,
        timeout: float | None = _DEFAULT,  # type: ignore[assignment]
    ) -> ProcessResult:
        if timeout is _DEFAULT:
            timeout = self._timeout
        if env is None:
            env = build_environment(extra_path_dirs=self._extra_path_dirs)

        argv = [*self._shell, command]
        logger.debug("Executing: %s", command)
        start = time.monotonic()

        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=dict(env),
                start_new_session=True,
            )
        except OSError as e:
            raise ExecutionError(
                command, reason=f"Cannot launch {argv[0]}: {e}",
            ) from e

        accumulator = OutputAccumulator()
        chunks: queue.Queue = queue.Queue()
        readers = [
            threading.Thread(
                target=_pump,
                args=(stream, stream_name, chunks, _CHUNK_SIZE),
                name=f"spicectl-{stream_name}-{proc.pid}",
                daemon=True,
            )
            for stream, stream_name in ((proc.stdout, "stdout"), (proc.stderr, "stderr"))
        ]
        for reader in readers:
            reader.start()

        deadline = None if timeout is None else start + timeout
        timed_out = self._collect(command, proc, chunks, accumulator, sink, deadline)

        try:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            exit_code = proc.wait(timeout=remaining)
        except subprocess.TimeoutExpired:
            timed_out = True
            _kill(proc)
            exit_code = proc.wait()

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = accumulator.value()
        logger.debug("Exit %s after %dms: %s", exit_code, elapsed_ms, command)

        if timed_out:
            logger.warning("Command timed out after %ss: %s", timeout, command)
            raise ExecutionError(
                command,
                output,
                stderr=accumulator.stream_value("stderr"),
                exit_code=exit_code,
                timed_out=True,
                reason=f"Command timed out after {timeout}s",
            )

        if exit_code != 0:
            raise ExecutionError(
                command,
                output,
                stderr=accumulator.stream_value("stderr"),
                exit_code=exit_code,
            )

        return ProcessResult(
            command=command,
            output=output,
            exit_code=exit_code,
            duration_ms=elapsed_ms,
        )

    def _collect(
        self,
        command: str,
        proc: subprocess.Popen,
        chunks: queue.Queue,
        accumulator: OutputAccumulator,
        sink: Sink | None,
        deadline: float | None,
    ) -> bool:
        """Consume reader output until both streams close.

        Returns True if the deadline passed and the command was killed.
        """
        open_streams = 2
        exited_at: float | None = None
        timed_out = False

        while open_streams:
            if deadline is not None and not timed_out and time.monotonic() >= deadline:
                timed_out = True
                _kill(proc)

            try:
                stream_name, text = chunks.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                now = time.monotonic()
                if exited_at is None and proc.poll() is not None:
                    exited_at = now
                if exited_at is not None and now - exited_at > self._drain_grace:
                    # A detached grandchild inherited the pipes; stop waiting on it.
                    logger.debug("Pipes still open %.1fs after exit: %s", self._drain_grace, command)
                    break
                continue

            if text is None:
                open_streams -= 1
                continue

            accumulator.append(stream_name, text)
            if sink is not None:
                self._deliver(sink, text)

        return timed_out

    @staticmethod
    def _deliver(sink: Sink, text: str) -> None:
        try:
            sink(text)
        except Exception:
            logger.exception("Output sink raised; continuing to read")
