# conftest.py - Shared pytest fixtures for all tests
"""Shared pytest fixtures for the runawk test suite.

Provides:
- Token queues and launchers wired to a scratch directory
- A fake awk interpreter (shell script) that records the argv it receives

Usage:
    Fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable

import pytest

from runawk.config import LauncherConfig
from runawk.core.launcher import Launcher
from runawk.core.tokens import TokenQueue


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def queue() -> TokenQueue:
    """An empty token queue with the program-name slot reserved."""
    return TokenQueue()


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Directory receiving scratch scripts; tests assert it ends up empty."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def make_launcher(scratch_dir: Path) -> Callable[..., Launcher]:
    """Factory for launchers whose scratch scripts land in scratch_dir.

    Example:
        def test_x(make_launcher):
            launcher = make_launcher(interpreter="/usr/bin/mawk")
    """

    def factory(**overrides) -> Launcher:
        settings = {"interpreter": "gawk", "temp_dir": scratch_dir}
        settings.update(overrides)
        return Launcher(LauncherConfig(**settings))

    return factory


# =============================================================================
# Fake Interpreter Fixtures
# =============================================================================


@pytest.fixture
def fake_awk(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing an executable stand-in for the awk interpreter.

    The script writes each argument it receives on its own line to
    ``<tmp_path>/argv.txt`` and then runs `body`.

    Example:
        interpreter = fake_awk("exit 3")
    """
    record = tmp_path / "argv.txt"

    def factory(body: str = "exit 0") -> Path:
        script = tmp_path / "fake-awk"
        script.write_text(
            "#!/bin/sh\n"
            f': > "{record}"\n'
            f'for arg in "$@"; do printf \'%s\\n\' "$arg" >> "{record}"; done\n'
            f"{body}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return factory


@pytest.fixture
def recorded_argv(tmp_path: Path) -> Callable[[], list[str]]:
    """Read back the arguments the fake interpreter received."""

    def read() -> list[str]:
        return (tmp_path / "argv.txt").read_text().splitlines()

    return read
