"""``agentface check`` — fetch the status document once and report it."""

from __future__ import annotations

import asyncio
import sys

import click

from agentface.cli_commands._output import console, print_status


@click.command()
@click.argument("url", required=False)
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Settings YAML file.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def check(url: str | None, config_path: str | None, as_json: bool) -> None:
    """Fetch the status document once.

    URL overrides the configured status URL.  Exits with status 1 when the
    fetch fails for any reason.
    """
    from agentface.config import ConfigError, load_settings
    from agentface.status.poller import StatusPoller

    try:
        settings = load_settings(config_path, polling_url=url)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    polling = settings.polling

    async def _check() -> StatusPoller:
        async with StatusPoller(
            polling.url,
            max_failures=polling.max_failures,
            timeout_s=polling.timeout_s,
        ) as poller:
            await poller.refresh()
        return poller

    poller = asyncio.run(_check())
    error = str(poller.last_error) if poller.last_error else None
    print_status(poller.status, poller.connection_state, error=error, as_json=as_json)

    if error:
        sys.exit(1)
