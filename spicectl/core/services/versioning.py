"""
Version comparison (pure).

Dot-separated numeric components compared left to right, the shorter
version zero-padded: ``1.1`` is newer than ``1``, ``1.0`` equals
``1.0.0``. No I/O, no subprocess.
"""

from __future__ import annotations

import re

_VERSION_RE = re.compile(r"v?(\d+(?:\.\d+)*)")


def parse_version(version: str) -> tuple[int, ...]:
    """Numeric components of a version string.

    A leading ``v`` is ignored and non-numeric components are dropped,
    so ``"v2.36.x"`` parses as ``(2, 36)``.
    """
    parts = version.strip().lstrip("vV").split(".")
    return tuple(int(p) for p in parts if p.isdigit())


def is_newer(candidate: str, current: str) -> bool:
    """True if ``candidate`` is strictly newer than ``current``."""
    new = parse_version(candidate)
    old = parse_version(current)
    width = max(len(new), len(old))
    new += (0,) * (width - len(new))
    old += (0,) * (width - len(old))
    return new > old


def extract_version(text: str) -> str | None:
    """First version-looking token in probe output (``"spicetify v2.3"`` → ``"2.3"``)."""
    match = _VERSION_RE.search(text)
    return match.group(1) if match else None
