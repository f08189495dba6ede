"""Option rewriting: launcher options to interpreter argv tokens.

Each leading-dash token is classified once into an OptionKind and then
dispatched on that kind. Short options taking a value accept it either
as the next token (``-F :``) or attached (``-F:``); both produce the same
pair of queue entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from runawk.core.errors import ExitCode, MissingArgumentError, UsageError
from runawk.core.tokens import TokenQueue

logger = logging.getLogger(__name__)

STDIN_PATH = "/dev/stdin"


class OptionKind(str, Enum):
    """Closed set of option kinds understood by the launcher."""

    HELP = "help"
    VERSION = "version"
    STDIN = "stdin"
    FIELD_SEPARATOR = "field_separator"
    ASSIGN = "assign"
    LIBRARY_FILE = "library_file"
    SOURCE = "source"
    EXEC = "exec"
    TERMINATOR = "terminator"
    PASSTHROUGH = "passthrough"
    UNKNOWN = "unknown"
    STDIN_MARKER = "stdin_marker"


_EXACT: dict[str, OptionKind] = {
    "--help": OptionKind.HELP,
    "--version": OptionKind.VERSION,
    "--stdin": OptionKind.STDIN,
    "-F": OptionKind.FIELD_SEPARATOR,
    "-v": OptionKind.ASSIGN,
    "--assign": OptionKind.ASSIGN,
    "-f": OptionKind.LIBRARY_FILE,
    "--file": OptionKind.LIBRARY_FILE,
    "-e": OptionKind.SOURCE,
    "--source": OptionKind.SOURCE,
    "--exec": OptionKind.EXEC,
    "--": OptionKind.TERMINATOR,
    "-": OptionKind.STDIN_MARKER,
}

# Short options that also accept their value glued on (-Fsep, -vx=1, ...)
_ATTACHED: dict[str, OptionKind] = {
    "-F": OptionKind.FIELD_SEPARATOR,
    "-v": OptionKind.ASSIGN,
    "-f": OptionKind.LIBRARY_FILE,
    "-e": OptionKind.SOURCE,
}

# Spelling used in "missing argument" diagnostics
_DISPLAY_NAME: dict[OptionKind, str] = {
    OptionKind.FIELD_SEPARATOR: "-F",
    OptionKind.ASSIGN: "-v",
    OptionKind.LIBRARY_FILE: "-f",
    OptionKind.SOURCE: "-e",
    OptionKind.EXEC: "--exec",
}


@dataclass(frozen=True)
class Option:
    """A classified token. `value` is set for attached short forms."""

    kind: OptionKind
    token: str
    value: str | None = None


def classify(token: str) -> Option:
    """Resolve a leading-dash token into an Option."""
    kind = _EXACT.get(token)
    if kind is not None:
        return Option(kind, token)
    prefix = token[:2]
    if prefix in _ATTACHED:
        return Option(_ATTACHED[prefix], token, value=token[2:])
    if token.startswith("--"):
        return Option(OptionKind.PASSTHROUGH, token)
    return Option(OptionKind.UNKNOWN, token)


@dataclass
class ParsedOptions:
    """State collected while rewriting options.

    `remaining` holds the unconsumed tokens of the parsed list; `action`
    is HELP or VERSION when parsing stopped to show information.
    """

    script: str | None = None
    add_stdin: bool = False
    execing: bool = False
    has_files: bool = False
    remaining: list[str] = field(default_factory=list)
    action: OptionKind | None = None


class OptionRewriter:
    """Consume options left to right, writing interpreter tokens to a queue."""

    def __init__(self, queue: TokenQueue, shebang_active: bool = False):
        self.queue = queue
        self.shebang_active = shebang_active

    def rewrite(self, tokens: list[str]) -> ParsedOptions:
        """Rewrite the leading options of `tokens`.

        Stops at the first token not starting with a dash, after `--`,
        before a bare `-`, after `--exec`, or at `--help`/`--version`.

        Raises:
            MissingArgumentError: A value-taking option was the last token.
            UsageError: Unknown short option, or `--exec` after an inline
                script in a shebang line.
        """
        parsed = ParsedOptions()
        index = 0

        def take_value(option: Option) -> str:
            nonlocal index
            if option.value is not None:
                return option.value
            if index + 1 >= len(tokens):
                raise MissingArgumentError(_DISPLAY_NAME[option.kind])
            index += 1
            return tokens[index]

        while index < len(tokens) and tokens[index].startswith("-"):
            option = classify(tokens[index])
            kind = option.kind

            if kind in (OptionKind.HELP, OptionKind.VERSION):
                parsed.action = kind
                break
            if kind is OptionKind.STDIN:
                parsed.add_stdin = True
            elif kind is OptionKind.FIELD_SEPARATOR:
                self.queue.push_option("-F", take_value(option))
            elif kind is OptionKind.ASSIGN:
                self.queue.push_option("-v", take_value(option))
            elif kind is OptionKind.LIBRARY_FILE:
                self.queue.push_option("-f", take_value(option))
                parsed.has_files = True
            elif kind is OptionKind.SOURCE:
                if parsed.script is not None:
                    logger.debug("Inline script given more than once; using the last one")
                parsed.script = take_value(option)
            elif kind is OptionKind.EXEC:
                self._start_exec(tokens, index, parsed)
                index += 1
                break
            elif kind is OptionKind.TERMINATOR:
                index += 1
                break
            elif kind is OptionKind.PASSTHROUGH:
                self.queue.push(option.token)
            elif kind is OptionKind.UNKNOWN:
                raise UsageError(f"unknown option -{option.token[1]}", ExitCode.FAILURE)
            else:
                # bare "-" stays positional
                break
            index += 1

        parsed.remaining = list(tokens[index:])
        return parsed

    def _start_exec(self, tokens: list[str], index: int, parsed: ParsedOptions) -> None:
        if self.shebang_active:
            if parsed.script is not None:
                raise UsageError("--exec conflicts with --source", ExitCode.MISSING_ARGUMENT)
        elif index + 1 >= len(tokens):
            raise MissingArgumentError(_DISPLAY_NAME[OptionKind.EXEC])
        parsed.execing = True
