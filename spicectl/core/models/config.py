"""
ToolConfig — what spicectl manages and where it lives.

Loaded from config.yml. Every field has a default, so an absent
file means "stock spicetify + Spotify on macOS". Paths may use ``~``
and are expanded against the current ``HOME`` at use time.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_INSTALL_SCRIPT = (
    "https://raw.githubusercontent.com/spicetify/spicetify-cli/master/install.sh"
)


def expand(raw: str) -> Path:
    """Expand ``~`` in a configured path."""
    return Path(raw).expanduser()


class HostApp(BaseModel):
    """The GUI application the tool customizes."""

    name: str = "Spotify"
    install_paths: list[str] = Field(
        default_factory=lambda: [
            "/Applications/Spotify.app",
            "~/Applications/Spotify.app",
        ]
    )

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("host name must not be empty")
        return value


class ToolConfig(BaseModel):
    """Root configuration — loaded from config.yml."""

    version: int = 1

    # ── Tool ─────────────────────────────────────────────────────
    tool: str = "spicetify"
    version_flag: str = "-v"
    install_script_url: str = DEFAULT_INSTALL_SCRIPT

    # ── Host application ─────────────────────────────────────────
    host: HostApp = Field(default_factory=HostApp)

    # ── On-disk layout written by the tool ───────────────────────
    config_dir: str = "~/.config/spicetify"
    config_file: str = "config-xpui.ini"
    backup_dir: str = "Backup"             # relative to config_dir

    # ── Execution ────────────────────────────────────────────────
    shell: list[str] = Field(default_factory=lambda: ["/bin/bash", "-l", "-c"])
    extra_path_dirs: list[str] = Field(
        default_factory=lambda: [
            "~/.spicetify",
            "~/.local/bin",
            "/usr/local/bin",
            "/opt/homebrew/bin",
        ]
    )
    command_timeout: float | None = 600.0  # None = wait forever
    probe_timeout: float = 30.0
    settle_delay: float = 1.0

    # ── Removal ──────────────────────────────────────────────────
    remove_paths: list[str] = Field(
        default_factory=lambda: [
            "~/.spicetify",
            "~/.config/spicetify",
            "~/.local/bin/spicetify",
        ]
    )

    # ── spicectl's own state (ledger + settings) ─────────────────
    state_dir: str = "~/.local/state/spicectl"

    @field_validator("tool")
    @classmethod
    def _tool_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("tool must not be empty")
        return value

    @field_validator("shell")
    @classmethod
    def _shell_has_program(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("shell must name at least the shell program")
        return value

    @property
    def config_path(self) -> Path:
        return expand(self.config_dir) / self.config_file

    @property
    def backup_path(self) -> Path:
        return expand(self.config_dir) / self.backup_dir

    @property
    def state_path(self) -> Path:
        return expand(self.state_dir)

    def host_install_paths(self) -> list[Path]:
        return [expand(p) for p in self.host.install_paths]

    def removal_targets(self) -> list[Path]:
        return [expand(p) for p in self.remove_paths]
