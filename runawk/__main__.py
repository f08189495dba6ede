"""Allow `python -m runawk`."""

from runawk.cli import main

main(prog_name="runawk")
