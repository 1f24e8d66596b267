"""
Environment builder — the variables every launched command sees.

Two modes:
    override given  → inherited environment with the override merged on top
    no override     → inherited environment with known install locations
                      prepended to PATH, everything else untouched

GUI-launched processes (and cron, launchd, IDE terminals) often get a
bare PATH that misses per-user tool directories, so the synthesized
PATH puts them first.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence

# Order matters: earlier entries win on PATH lookup.
DEFAULT_EXTRA_PATH_DIRS: tuple[str, ...] = (
    "~/.spicetify",
    "~/.local/bin",
    "/usr/local/bin",
    "/opt/homebrew/bin",
)


def _expand_home(raw: str, home: str | None) -> str:
    if home and (raw == "~" or raw.startswith("~/")):
        return home + raw[1:]
    return os.path.expanduser(raw)


def build_environment(
    override: Mapping[str, str] | None = None,
    *,
    extra_path_dirs: Sequence[str] = DEFAULT_EXTRA_PATH_DIRS,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Compute the environment map for a child process.

    Args:
        override: Caller-supplied variables. When given, they are merged
            key-by-key over the inherited environment (override wins) and
            PATH is left as the caller set it.
        extra_path_dirs: Directories prepended to PATH when no override
            is supplied. ``~`` expands against the inherited ``HOME``.
        base: Inherited environment (default: ``os.environ``).

    Returns:
        A new dict; neither ``base`` nor ``override`` is modified.
    """
    env = dict(os.environ if base is None else base)

    if override is not None:
        env.update(override)
        return env

    home = env.get("HOME")
    dirs = [_expand_home(d, home) for d in extra_path_dirs]
    existing = env.get("PATH", "")
    env["PATH"] = os.pathsep.join(dirs + ([existing] if existing else []))
    return env
