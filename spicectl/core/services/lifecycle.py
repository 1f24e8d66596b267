"""
Lifecycle service — install, update, apply, restore and remove.

Each operation narrates its progress through a sink, runs a fixed
sequence of catalog commands through the runner, and either returns
normally or raises a typed ``SpicectlError``. Recording the attempt in
the ledger is the caller's job (see ``use_cases.run``).

Operations on one service instance are serialized by an internal
lock: a second caller waits for the first to finish.
"""

from __future__ import annotations

import configparser
import logging
import threading
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass

from spicectl.adapters.base import CommandRunner, Sink
from spicectl.adapters.shell.catalog import CommandCatalog
from spicectl.adapters.shell.environment import build_environment
from spicectl.adapters.shell.filesystem import path_exists, read_text, remove_path
from spicectl.adapters.shell.host import HostProcess
from spicectl.core.errors import (
    ApplyFailed,
    ExecutionError,
    InstallationFailed,
    PreconditionMissing,
    UpdateFailed,
)
from spicectl.core.models.config import ToolConfig
from spicectl.core.models.operation import OperationKind
from spicectl.core.models.status import LifecycleStatus
from spicectl.core.services.versioning import extract_version, is_newer

logger = logging.getLogger(__name__)


def _discard(_chunk: str) -> None:
    pass


@dataclass
class UpdateOutcome:
    """Versions seen before and after an update run."""

    previous: str
    current: str

    @property
    def changed(self) -> bool:
        return self.previous != self.current

    @property
    def upgraded(self) -> bool:
        return is_newer(self.current, self.previous)


class LifecycleService:
    """Drives the tool through its lifecycle.

    Args:
        config: Tool, host and path configuration.
        runner: Command runner (real or mock).
        env_override: Variables merged over the inherited environment
            instead of the default PATH augmentation.
        sleep: Used for the settle delay after terminating the host.
    """

    def __init__(
        self,
        config: ToolConfig,
        runner: CommandRunner,
        *,
        env_override: Mapping[str, str] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.runner = runner
        self.catalog = CommandCatalog.from_config(config)
        self.host = HostProcess(
            config.host.name,
            config.host_install_paths(),
            runner,
            self.catalog,
            probe_timeout=config.probe_timeout,
        )
        self._env_override = dict(env_override) if env_override is not None else None
        self._sleep = sleep
        self._lock = threading.Lock()

    # ── Helpers ─────────────────────────────────────────────────

    def environment(self) -> dict[str, str]:
        return build_environment(
            self._env_override,
            extra_path_dirs=self.config.extra_path_dirs,
        )

    @contextmanager
    def _exclusive(self, kind: OperationKind) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            logger.info("Waiting for the running operation before %s", kind.value)
            self._lock.acquire()
        logger.info("%s…", kind.label)
        try:
            yield
        finally:
            self._lock.release()

    def _stream(self, command: str, sink: Sink) -> str:
        return self.runner.run(
            command, self.environment(), sink, timeout=self.config.command_timeout,
        ).output

    # ── Probes ──────────────────────────────────────────────────

    def tool_exists(self) -> bool:
        return self.runner.succeeds(
            self.catalog.exists, self.environment(), timeout=self.config.probe_timeout,
        )

    def tool_version(self) -> str | None:
        """Reported version; the raw probe output if it holds no version number."""
        raw = self.runner.capture(
            self.catalog.version, self.environment(), timeout=self.config.probe_timeout,
        )
        if not raw:
            return None
        return extract_version(raw) or raw

    def check_status(self) -> LifecycleStatus:
        """Resolve NotInstalled / Unknown / Applied / Installed(version)."""
        if not self.tool_exists():
            return LifecycleStatus.not_installed()

        version = self.tool_version()
        if version is None:
            return LifecycleStatus.unknown()

        applied = (
            read_text(self.config.config_path) is not None
            and path_exists(self.config.backup_path)
        )
        if applied:
            return LifecycleStatus.applied()
        return LifecycleStatus.installed(version)

    def config_info(self) -> dict[str, str]:
        """Theme and color scheme from the tool's config file, if readable."""
        raw = read_text(self.config.config_path)
        if raw is None:
            return {}

        parser = configparser.ConfigParser(interpolation=None, strict=False)
        try:
            parser.read_string(raw)
        except configparser.Error as e:
            logger.debug("Unparseable %s: %s", self.config.config_path, e)
            return {}

        info: dict[str, str] = {}
        for section in parser.sections():
            for key, label in (("current_theme", "theme"), ("color_scheme", "color_scheme")):
                value = parser.get(section, key, fallback="").strip()
                if value and label not in info:
                    info[label] = value
        return info

    def _require_tool(self, action: str) -> None:
        if not self.tool_exists():
            raise PreconditionMissing(
                f"{self.config.tool} is not installed. Install it before trying to {action}."
            )

    # ── Operations ──────────────────────────────────────────────

    def perform(self, kind: OperationKind, sink: Sink | None = None) -> UpdateOutcome | None:
        """Dispatch to the operation named by ``kind``."""
        operations = {
            OperationKind.INSTALL: self.install,
            OperationKind.UPDATE: self.update,
            OperationKind.APPLY: self.apply,
            OperationKind.RESTORE: self.restore,
            OperationKind.REMOVE: self.remove,
        }
        return operations[kind](sink)

    def install(self, sink: Sink | None = None) -> None:
        """Run the bootstrap installer. Requires the host app on disk."""
        out = sink or _discard
        with self._exclusive(OperationKind.INSTALL):
            if not self.host.is_installed():
                raise PreconditionMissing(
                    f"{self.host.name} application not found. "
                    f"Please install {self.host.name} first."
                )

            out("🔍 Checking prerequisites...\n")
            out(f"✅ {self.host.name} found\n\n")
            out(f"📥 Starting {self.config.tool} installation...\n")
            out("This may take a few minutes...\n\n")

            try:
                self._stream(self.catalog.bootstrap, out)
            except ExecutionError as e:
                raise InstallationFailed(e.detail) from e

            out("\n✅ Installation completed successfully!\n")
            out(f"💡 Tip: run 'spicectl apply' to activate {self.config.tool} on {self.host.name}\n")

    def update(self, sink: Sink | None = None) -> UpdateOutcome:
        """Rerun the bootstrap installer and report the version change."""
        out = sink or _discard
        with self._exclusive(OperationKind.UPDATE):
            self._require_tool("update")
            out(f"🔄 Checking for {self.config.tool} updates...\n\n")

            previous = self.tool_version() or "unknown"
            out(f"Current version: {previous}\n\n")
            out("📥 Downloading latest version...\n")

            try:
                self._stream(self.catalog.bootstrap, out)
            except ExecutionError as e:
                raise UpdateFailed(e.detail) from e

            outcome = UpdateOutcome(previous=previous, current=self.tool_version() or "unknown")
            out("\n✅ Update completed!\n")
            out(f"New version: {outcome.current}\n")

            if outcome.changed:
                out(f"\n💡 Version changed! You may need to re-apply {self.config.tool}.\n")
            return outcome

    def apply(self, sink: Sink | None = None) -> None:
        """Back up (best effort) and apply customizations to the host app."""
        out = sink or _discard
        with self._exclusive(OperationKind.APPLY):
            self._require_tool("apply")
            env = self.environment()
            out(f"🎨 Applying {self.config.tool} to {self.host.name}...\n\n")

            out(f"🔍 Checking if {self.host.name} is running...\n")
            if self.host.is_running(env):
                out(f"⚠️  {self.host.name} is running. It will be closed automatically.\n\n")

            out("💾 Creating backup...\n")
            try:
                self._stream(self.catalog.backup, out)
                out("✅ Backup created\n\n")
            except ExecutionError as e:
                logger.info("Backup skipped: %s", e)
                out("ℹ️  Backup already exists or not needed\n\n")

            out(f"✨ Applying {self.config.tool}...\n")
            try:
                self._stream(self.catalog.apply, out)
            except ExecutionError as e:
                raise ApplyFailed(e.detail, operation=OperationKind.APPLY) from e

            out(f"\n🎉 {self.config.tool} applied successfully!\n")
            out(f"🚀 {self.host.name} will launch with your customizations.\n")

    def restore(self, sink: Sink | None = None) -> None:
        """Close the host app if needed and undo the customizations."""
        out = sink or _discard
        with self._exclusive(OperationKind.RESTORE):
            self._require_tool("restore")
            env = self.environment()
            out(f"⏪ Restoring {self.host.name} to original state...\n\n")

            if self.host.is_running(env):
                out(f"⚠️  Closing {self.host.name}...\n")
                self.host.terminate(env)
                self._sleep(self.config.settle_delay)

            out("🔄 Running restore command...\n")
            try:
                self._stream(self.catalog.restore, out)
            except ExecutionError as e:
                raise ApplyFailed(e.detail, operation=OperationKind.RESTORE) from e

            out(f"\n✅ {self.host.name} restored successfully!\n")
            out("ℹ️  All customizations have been removed.\n")

    def remove(self, sink: Sink | None = None) -> None:
        """Restore (best effort) then delete the tool's files. Never raises."""
        out = sink or _discard
        with self._exclusive(OperationKind.REMOVE):
            out(f"🗑️  Starting {self.config.tool} removal...\n\n")

            out(f"⏪ Restoring {self.host.name} to original state...\n")
            try:
                self.runner.run(
                    self.catalog.restore, self.environment(),
                    timeout=self.config.command_timeout,
                )
                out(f"✅ {self.host.name} restored\n\n")
            except ExecutionError as e:
                logger.info("Restore before removal failed: %s", e)
                out("⚠️  Could not restore (may not be applied)\n\n")

            out(f"🧹 Removing {self.config.tool} files...\n")
            for target in self.config.removal_targets():
                try:
                    if remove_path(target):
                        out(f"  ✓ Removed: {target}\n")
                except OSError as e:
                    logger.warning("Could not remove %s: %s", target, e)
                    out(f"  ✗ Could not remove {target}: {e}\n")

            out(f"\n✅ {self.config.tool} removed successfully!\n")
