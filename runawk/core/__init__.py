"""Argument rewriting and interpreter supervision."""

from runawk.core.errors import (
    ExitCode,
    LauncherError,
    LauncherExit,
    MissingArgumentError,
    ResourceError,
    SpawnError,
    UsageError,
)
from runawk.core.launcher import Launcher
from runawk.core.tokens import TokenQueue

__all__ = [
    "ExitCode",
    "Launcher",
    "LauncherError",
    "LauncherExit",
    "MissingArgumentError",
    "ResourceError",
    "SpawnError",
    "TokenQueue",
    "UsageError",
]
