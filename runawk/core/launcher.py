"""Invocation pipeline: shebang expansion, option rewriting, program
materialization, and supervision of the interpreter.

Every way out of an invocation goes through `Launcher.die()`, which
removes the scratch script (if any) and lets a relayed signal override
the requested status.
"""

from __future__ import annotations

import logging
import os
from typing import NoReturn

from rich.console import Console

from runawk import __version__
from runawk.config import LauncherConfig
from runawk.core.errors import (
    ExitCode,
    LauncherError,
    LauncherExit,
    ResourceError,
    UsageError,
)
from runawk.core.materialize import ScratchScript, ScriptMaterializer
from runawk.core.options import STDIN_PATH, OptionKind, OptionRewriter
from runawk.core.process import ProcessSupervisor, SignalRelay
from runawk.core.shebang import ShebangExpansion
from runawk.core.tokens import TokenQueue

logger = logging.getLogger(__name__)


def usage_text(interpreter: str) -> str:
    return f"""\
Usage:   runawk [OPTIONS] file        [arguments ...]
         runawk [OPTIONS] -e 'script' [arguments...]
         wrapper for {interpreter} interpreter
Author:  Jim Pryor <dubiousjim@gmail.com>
Version: {__version__}

Options:
               -F sep  assign FS=sep
         -v var=value  assign var=value
   -f|--file file.awk  load awk library files
 -e|--source 'script'  program
              --stdin  process stdin after arguments...
            --version  show version number and exit
               --help  show this message and exit
"""


def version_text() -> str:
    return f"runawk {__version__} written by Aleksey Cheusov and Jim Pryor"


class Launcher:
    """Run one launcher invocation.

    Example:
        Launcher(LauncherConfig(interpreter="gawk")).run(["-e", "BEGIN { print 1 }"])
    """

    def __init__(
        self,
        config: LauncherConfig | None = None,
        console: Console | None = None,
        err_console: Console | None = None,
    ):
        self.config = config or LauncherConfig()
        self.console = console or Console(highlight=False, emoji=False)
        self.err_console = err_console or Console(stderr=True, highlight=False, emoji=False)
        self.relay = SignalRelay()
        self.scratch = ScratchScript(self.config.temp_dir, self.config.temp_prefix)
        self.supervisor = ProcessSupervisor(self.config.interpreter, self.relay)

    def run(self, args: list[str]) -> NoReturn:
        """Process `args` (without the launcher's own name) and exit.

        Always raises LauncherExit carrying the final status.
        """
        with self.relay, self.scratch:
            try:
                self._run(list(args))
            except LauncherError as e:
                self.report(str(e))
                self.die(e.exit_code)
            except MemoryError:
                self.report("out of memory")
                self.die(ExitCode.OUT_OF_MEMORY)

    def die(self, status: int) -> NoReturn:
        """Clean up and exit; a recorded signal takes precedence over `status`."""
        self.scratch.cleanup()
        if self.relay.last_signal:
            status = ExitCode.for_signal(self.relay.last_signal)
        raise LauncherExit(int(status))

    def report(self, message: str) -> None:
        self.err_console.print(f"runawk: {message}", markup=False, soft_wrap=True)

    def usage(self) -> None:
        self.console.print(usage_text(self.config.interpreter), markup=False, soft_wrap=True)

    def _run(self, args: list[str]) -> NoReturn:
        if not args:
            self.usage()
            self.die(ExitCode.MISSING_PROGRAM)

        try:
            os.getcwd()
        except OSError as e:
            raise ResourceError(f"getcwd(3) failed: {e.strerror}", ExitCode.CWD_FAILED)

        queue = TokenQueue(self.config.alt_name)
        expansion = ShebangExpansion.from_args(args)
        if expansion.active:
            logger.debug(f"Expanded shebang line into {expansion.options}")

        parsed = OptionRewriter(queue, shebang_active=expansion.active).rewrite(expansion.options)
        if parsed.action is OptionKind.HELP:
            self.usage()
            self.die(ExitCode.OK)
        if parsed.action is OptionKind.VERSION:
            self.console.print(version_text(), markup=False, soft_wrap=True)
            self.die(ExitCode.OK)

        positional = parsed.remaining
        if expansion.active:
            if positional:
                raise UsageError(f"can't parse shebang line: {positional[0]}")
            positional = expansion.remaining

        materializer = ScriptMaterializer(queue, self.scratch, has_files=parsed.has_files)
        if parsed.script is not None:
            source = materializer.add_inline(parsed.script, self.config.interpreter)
        else:
            if not positional:
                self.usage()
                self.die(ExitCode.MISSING_PROGRAM)
            source = materializer.add_program_file(positional[0], execing=parsed.execing)
            positional = positional[1:]
        queue.set_program_name(source.process_name)

        if materializer.has_files and not parsed.execing:
            queue.push("--")
        queue.extend(positional)
        if parsed.add_stdin:
            queue.push(STDIN_PATH)
        queue.terminate()

        if self.relay.last_signal:
            # Interrupted before the interpreter started; nothing to relay to.
            self.die(ExitCode.OK)
        self.die(self.supervisor.run(queue.to_argv()))
