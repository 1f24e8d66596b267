"""
Host-process primitives — is the host app installed, running, and
how to stop it.

Running/termination go through the command catalog (``pgrep -x`` and
``killall``); installation is a pure filesystem check so it never
launches a process.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from spicectl.adapters.base import CommandRunner
from spicectl.adapters.shell.catalog import CommandCatalog
from spicectl.adapters.shell.filesystem import path_exists
from spicectl.core.errors import ExecutionError

logger = logging.getLogger(__name__)


class HostProcess:
    """Discovery and termination of the host application."""

    def __init__(
        self,
        name: str,
        install_paths: Sequence[Path],
        runner: CommandRunner,
        catalog: CommandCatalog,
        *,
        probe_timeout: float | None = 30.0,
    ) -> None:
        self.name = name
        self._install_paths = list(install_paths)
        self._runner = runner
        self._catalog = catalog
        self._probe_timeout = probe_timeout

    def is_installed(self) -> bool:
        return any(path_exists(p) for p in self._install_paths)

    def is_running(self, env: Mapping[str, str] | None = None) -> bool:
        """``pgrep`` exits 1 when nothing matches; that is "not running"."""
        return self._runner.succeeds(
            self._catalog.host_running, env, timeout=self._probe_timeout,
        )

    def terminate(self, env: Mapping[str, str] | None = None) -> bool:
        """Ask every matching process to exit. Returns False on failure."""
        try:
            self._runner.run(self._catalog.host_kill, env, timeout=self._probe_timeout)
            return True
        except ExecutionError as e:
            logger.info("Could not terminate %s: %s", self.name, e)
            return False
