"""
Command catalog — the closed set of shell commands spicectl runs.

Commands are argv templates, rendered with ``shlex`` quoting so a
configured tool name, host name or URL can never inject extra shell
syntax. Nothing outside this table reaches the shell.
"""

from __future__ import annotations

import shlex

from spicectl.core.models.config import ToolConfig

COMMAND_TEMPLATES: dict[str, tuple[str, ...]] = {
    "version":      ("{tool}", "{version_flag}"),
    "exists":       ("command", "-v", "{tool}"),
    "backup":       ("{tool}", "backup"),
    "apply":        ("{tool}", "apply"),
    "restore":      ("{tool}", "restore"),
    "host_running": ("pgrep", "-x", "{host}"),
    "host_kill":    ("killall", "{host}"),
}

# Fetch-and-execute: each stage is quoted separately, joined by a pipe.
PIPELINE_TEMPLATES: dict[str, tuple[tuple[str, ...], ...]] = {
    "bootstrap": (("curl", "-fsSL", "{script_url}"), ("sh",)),
}


def _render_argv(template: tuple[str, ...], params: dict[str, str]) -> str:
    return shlex.join(part.format(**params) for part in template)


def render(name: str, **params: str) -> str:
    """Render a catalog entry into a shell-safe command string.

    Raises:
        KeyError: If ``name`` is not in the catalog, or a placeholder
            has no matching parameter.
    """
    if name in COMMAND_TEMPLATES:
        return _render_argv(COMMAND_TEMPLATES[name], params)
    if name in PIPELINE_TEMPLATES:
        return " | ".join(
            _render_argv(stage, params) for stage in PIPELINE_TEMPLATES[name]
        )
    raise KeyError(f"Unknown command: {name!r}")


class CommandCatalog:
    """Catalog entries bound to one tool configuration."""

    def __init__(
        self,
        tool: str,
        host: str,
        script_url: str,
        version_flag: str = "-v",
    ) -> None:
        self._params = {
            "tool": tool,
            "host": host,
            "script_url": script_url,
            "version_flag": version_flag,
        }

    @classmethod
    def from_config(cls, config: ToolConfig) -> CommandCatalog:
        return cls(
            tool=config.tool,
            host=config.host.name,
            script_url=config.install_script_url,
            version_flag=config.version_flag,
        )

    def get(self, name: str) -> str:
        return render(name, **self._params)

    @property
    def version(self) -> str:
        return self.get("version")

    @property
    def exists(self) -> str:
        return self.get("exists")

    @property
    def bootstrap(self) -> str:
        return self.get("bootstrap")

    @property
    def backup(self) -> str:
        return self.get("backup")

    @property
    def apply(self) -> str:
        return self.get("apply")

    @property
    def restore(self) -> str:
        return self.get("restore")

    @property
    def host_running(self) -> str:
        return self.get("host_running")

    @property
    def host_kill(self) -> str:
        return self.get("host_kill")
