"""CLI entry point for runawk.

All arguments are handed to the launcher untouched; click only provides
the console-script plumbing. Typical use is as a shebang interpreter:

    #!/usr/bin/env runawk
    #!/usr/bin/runawk -f lib.awk -v OFS=,
"""

from __future__ import annotations

import logging

import click
from rich.console import Console

from runawk.config import ConfigError, load_config
from runawk.core.errors import ExitCode
from runawk.core.launcher import Launcher

err_console = Console(stderr=True, highlight=False, emoji=False)


class PassthroughCommand(click.Command):
    """Command whose arguments reach the callback exactly as given.

    click's own parser would drop a literal ``--`` and regroup short
    options, both of which matter to the launcher.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.args = list(args)
        return ctx.args


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="runawk: %(levelname)s %(name)s: %(message)s",
    )


@click.command(cls=PassthroughCommand, add_help_option=False)
@click.pass_context
def main(ctx: click.Context) -> None:
    """Wrapper for an awk interpreter suitable for shebang lines."""
    try:
        config = load_config()
    except ConfigError as e:
        err_console.print(f"runawk: {e}", markup=False, soft_wrap=True)
        raise SystemExit(ExitCode.FAILURE)

    configure_logging(config.log_level)
    Launcher(config).run(ctx.args)


if __name__ == "__main__":
    main()
