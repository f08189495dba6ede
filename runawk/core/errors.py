"""Exit codes and the error taxonomy of the launcher.

Every fatal condition maps to a distinct process exit status. Components
raise a LauncherError subclass; the launcher reports it and funnels it
through its single exit routine.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit statuses produced by the launcher itself."""

    OK = 0
    FAILURE = 1
    MISSING_PROGRAM = 30
    CWD_FAILED = 32
    OUT_OF_MEMORY = 33
    MISSING_ARGUMENT = 39
    TEMP_FILE_FAILED = 40
    FORK_FAILED = 42
    UNKNOWN_WAIT_STATUS = 200

    @staticmethod
    def for_signal(signum: int) -> int:
        """Status reported when terminated by signal `signum`."""
        return 128 + signum


class LauncherError(Exception):
    """Base class for fatal launcher errors."""

    exit_code: int = ExitCode.FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(LauncherError):
    """Bad or missing option, bad option combination, unparsable shebang line."""

    pass


class MissingArgumentError(UsageError):
    """An option that requires an argument was the last token."""

    exit_code = ExitCode.MISSING_ARGUMENT

    def __init__(self, option: str):
        super().__init__(f"missing argument for {option} option")
        self.option = option


class ResourceError(LauncherError):
    """Working directory, memory or temporary-file failure."""

    pass


class SpawnError(LauncherError):
    """The child process could not be created."""

    exit_code = ExitCode.FORK_FAILED


class LauncherExit(SystemExit):
    """Raised by the exit routine once cleanup has run.

    `code` holds the final process status.
    """

    pass
