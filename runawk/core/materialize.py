"""Delivery of the program source to the interpreter.

A program file is registered like a library file (or with ``--exec``).
Inline text goes positionally after ``--`` unless library files were
given, in which case the interpreter would not accept positional program
text; the text is then written to a scratch file and loaded with ``-f``.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from runawk.core.errors import ExitCode, ResourceError
from runawk.core.tokens import TokenQueue

logger = logging.getLogger(__name__)


class ProgramSourceKind(str, Enum):
    """How the program text reaches the interpreter."""

    PROGRAM_FILE = "program_file"
    INLINE = "inline"
    SCRATCH_FILE = "scratch_file"


class ScratchScript:
    """Owner of the at-most-one temporary script file of an invocation.

    Use as a context manager; `cleanup()` is idempotent and safe to call
    when nothing was created.
    """

    def __init__(self, directory: str | Path = "/tmp", prefix: str = "runawk."):
        self.directory = str(directory)
        self.prefix = prefix
        self.path: Path | None = None

    @property
    def created(self) -> bool:
        return self.path is not None

    def write(self, text: str) -> Path:
        """Create the scratch file exclusively and write `text` into it.

        Raises:
            ResourceError: If creation, writing or closing fails, or a
                scratch file already exists for this invocation.
        """
        if self.path is not None:
            raise ResourceError(
                f"scratch script already created: {self.path}", ExitCode.TEMP_FILE_FAILED
            )
        data = os.fsencode(text)
        try:
            fd, name = tempfile.mkstemp(prefix=self.prefix, dir=self.directory)
        except OSError as e:
            raise ResourceError(f"mkstemp(3) failed: {e.strerror}", ExitCode.TEMP_FILE_FAILED)
        self.path = Path(name)
        logger.debug(f"Created scratch script {self.path}")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError as e:
            raise ResourceError(f"write(2) failed: {e.strerror}", ExitCode.TEMP_FILE_FAILED)
        return self.path

    def cleanup(self) -> None:
        if self.path is None:
            return
        path, self.path = self.path, None
        try:
            path.unlink()
            logger.debug(f"Removed scratch script {path}")
        except FileNotFoundError:
            pass

    def __enter__(self) -> ScratchScript:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()


@dataclass
class MaterializedSource:
    kind: ProgramSourceKind
    process_name: str
    path: Path | None = None


class ScriptMaterializer:
    """Push the chosen program source onto the token queue."""

    def __init__(self, queue: TokenQueue, scratch: ScratchScript, has_files: bool = False):
        self.queue = queue
        self.scratch = scratch
        self.has_files = has_files

    def add_file(self, path: str, execing: bool = False) -> None:
        self.queue.push_option("--exec" if execing else "-f", path)
        self.has_files = True

    def add_program_file(self, path: str, execing: bool = False) -> MaterializedSource:
        """Register the positional program file; it also names the process."""
        self.add_file(path, execing)
        return MaterializedSource(ProgramSourceKind.PROGRAM_FILE, process_name=path, path=Path(path))

    def add_inline(self, text: str, interpreter: str) -> MaterializedSource:
        """Register inline program text.

        Without earlier library files the text is passed positionally after
        ``--``; otherwise it goes through a scratch file.
        """
        if not self.has_files:
            self.queue.push_option("--", text)
            return MaterializedSource(ProgramSourceKind.INLINE, process_name=interpreter)
        path = self.scratch.write(text)
        self.add_file(str(path))
        return MaterializedSource(ProgramSourceKind.SCRATCH_FILE, process_name=interpreter, path=path)
