"""Child-process supervision for the wrapped interpreter.

The launcher forks once, execs the interpreter in the child and waits for
it in the parent. Terminating signals received meanwhile are relayed to
the child verbatim, and the child's fate becomes the launcher's exit
status so callers see the same convention as running the interpreter
directly.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from dataclasses import dataclass
from typing import Any

from runawk.core.errors import ExitCode, SpawnError

logger = logging.getLogger(__name__)

RELAYED_SIGNALS: tuple[signal.Signals, ...] = (
    signal.SIGINT,
    signal.SIGQUIT,
    signal.SIGTERM,
    signal.SIGHUP,
    signal.SIGPIPE,
)


class SignalRelay:
    """Process-wide record of the last terminating signal and the live child.

    The handler only records the signal and forwards it to the child; it
    never touches argv or scratch-file state. `child_pid` is written by the
    supervisor around fork and wait.
    """

    def __init__(self, signals: tuple[int, ...] = RELAYED_SIGNALS):
        self.signals = signals
        self.last_signal = 0
        self.child_pid: int | None = None
        self._previous: dict[int, Any] = {}

    def handle(self, signum: int, frame: Any) -> None:
        self.last_signal = signum
        if self.child_pid is not None:
            try:
                os.kill(self.child_pid, signum)
            except ProcessLookupError:
                pass

    def install(self) -> None:
        for signum in self.signals:
            self._previous[signum] = signal.signal(signum, self.handle)

    def restore(self) -> None:
        """Put back the handlers that were active before `install()`."""
        while self._previous:
            signum, handler = self._previous.popitem()
            signal.signal(signum, handler)

    def __enter__(self) -> SignalRelay:
        self.install()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore()


@dataclass(frozen=True)
class ChildStatus:
    """Decoded `waitpid` status of the interpreter process."""

    pid: int
    exit_code: int | None = None
    signal: int | None = None

    @classmethod
    def from_wait_status(cls, pid: int, status: int) -> ChildStatus:
        if os.WIFSIGNALED(status):
            return cls(pid, signal=os.WTERMSIG(status))
        if os.WIFEXITED(status):
            return cls(pid, exit_code=os.WEXITSTATUS(status))
        return cls(pid)


class ProcessSupervisor:
    """Fork, exec and wait for the interpreter."""

    def __init__(self, interpreter: str, relay: SignalRelay):
        self.interpreter = interpreter
        self.relay = relay

    def run(self, argv: list[str]) -> int:
        """Run the interpreter with `argv` and return the status to exit with.

        A signal recorded by the relay yields 0 here; the launcher's exit
        routine turns that into 128 + signal number.

        Raises:
            SpawnError: If fork fails.
        """
        pid = self.spawn(argv)
        status = self.wait(pid)
        return self.exit_status(status)

    def spawn(self, argv: list[str]) -> int:
        logger.debug(f"Executing {self.interpreter} with argv {argv}")
        # Buffered output would otherwise be written twice.
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            pid = os.fork()
        except OSError as e:
            raise SpawnError(f"fork(2) failed: {e.strerror}")
        if pid == 0:
            self._exec_child(argv)
        self.relay.child_pid = pid
        logger.debug(f"Started interpreter pid={pid}")
        if self.relay.last_signal:
            # Arrived while forking, before there was a child to forward to.
            os.kill(pid, self.relay.last_signal)
        return pid

    def _exec_child(self, argv: list[str]) -> None:
        """Replace the child image; exits with 1 if that fails."""
        try:
            os.execvp(self.interpreter, argv)
        except (OSError, ValueError) as e:
            reason = getattr(e, "strerror", None) or e
            message = f"runawk: running '{self.interpreter}' failed: {reason}\n"
            os.write(2, message.encode(errors="replace"))
        finally:
            os._exit(ExitCode.FAILURE)

    def wait(self, pid: int) -> ChildStatus:
        try:
            # Retried by the interpreter when a relayed signal interrupts it.
            _, status = os.waitpid(pid, 0)
        finally:
            self.relay.child_pid = None
        child = ChildStatus.from_wait_status(pid, status)
        logger.debug(f"Interpreter pid={pid} finished: {child}")
        return child

    def exit_status(self, child: ChildStatus) -> int:
        if self.relay.last_signal:
            return ExitCode.OK
        if child.signal is not None:
            return ExitCode.for_signal(child.signal)
        if child.exit_code is not None:
            return child.exit_code
        return ExitCode.UNKNOWN_WAIT_STATUS
