"""agentface CLI entrypoint."""

from __future__ import annotations

import click

from agentface import __version__


@click.group()
@click.version_option(version=__version__, prog_name="agentface")
def main() -> None:
    """agentface — watch and publish an agent's busy/idle status."""


# Register subcommands
from agentface.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
