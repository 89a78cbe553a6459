"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from agentface.cli_commands.check import check
    from agentface.cli_commands.push import push
    from agentface.cli_commands.watch import watch

    cli.add_command(check)
    cli.add_command(watch)
    cli.add_command(push)
