"""Adapters — everything that touches the OS.

Public re-exports for convenient access.
"""

from spicectl.adapters.base import CommandRunner, Sink
from spicectl.adapters.mock import MockRunner
from spicectl.adapters.shell.command import ProcessRunner

__all__ = [
    "CommandRunner",
    "MockRunner",
    "ProcessRunner",
    "Sink",
]
