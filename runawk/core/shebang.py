"""Re-splitting of shebang lines delivered as a single argument.

Most kernels hand everything after the interpreter path in a `#!` line
to the interpreter as one argument, so

    #!/usr/bin/runawk -f lib.awk -v x=1

arrives as ``["-f lib.awk -v x=1", "script.awk", ...]``. The first
argument is split back into its tokens before option parsing.
"""

from __future__ import annotations

from dataclasses import dataclass, field


def split_shebang(line: str) -> tuple[str, ...]:
    """Split `line` on spaces, dropping empty fragments."""
    return tuple(fragment for fragment in line.split(" ") if fragment)


def is_collapsed_shebang(args: list[str]) -> bool:
    """Whether args[0] looks like a run-together shebang line.

    It must start with a dash and contain a space, and be followed by an
    argument that does not start with a dash (the script path).
    """
    return (
        len(args) >= 2
        and args[0].startswith("-")
        and not args[1].startswith("-")
        and " " in args[0]
    )


@dataclass
class ShebangExpansion:
    """Outcome of shebang detection for one invocation.

    `options` is what the option parser consumes. When `active`,
    `remaining` holds the original arguments after the collapsed line;
    they supply the program file and its arguments once every shebang
    token has been consumed.
    """

    options: list[str]
    remaining: list[str] = field(default_factory=list)
    active: bool = False

    @classmethod
    def from_args(cls, args: list[str]) -> ShebangExpansion:
        if not is_collapsed_shebang(args):
            return cls(options=list(args))
        return cls(options=list(split_shebang(args[0])), remaining=list(args[1:]), active=True)
