"""``agentface push`` — publish a status document by hand."""

from __future__ import annotations

import asyncio
import sys
import time

import click

from agentface.cli_commands._output import console


@click.command()
@click.option("--busy/--idle", required=True, help="State to publish.")
@click.option("--upload-url", default=None, help="Upload prefix; the key is appended.")
@click.option("--key", default=None, help="Object key (default: status.json).")
@click.option("--session-key", default=None, help="Session key to include.")
@click.option("--source", default=None, help="Source channel to include.")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Settings YAML file.")
def push(
    busy: bool,
    upload_url: str | None,
    key: str | None,
    session_key: str | None,
    source: str | None,
    config_path: str | None,
) -> None:
    """Publish one busy/idle status document."""
    from agentface.config import ConfigError, load_settings
    from agentface.producer.publisher import StatusPublisher
    from agentface.status.errors import PublishError
    from agentface.status.models import AgentStatus

    try:
        settings = load_settings(config_path, publisher_upload_url=upload_url, publisher_key=key)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    publisher_settings = settings.publisher
    if not publisher_settings.upload_url:
        console.print("[red]No upload URL:[/red] pass --upload-url or set AGENTFACE_UPLOAD_URL.")
        sys.exit(1)

    status = AgentStatus(
        busy=busy,
        ts=int(time.time() * 1000),
        session_key=session_key,
        source=source,
    )

    async def _push() -> str:
        async with StatusPublisher(
            publisher_settings.upload_url,
            key=publisher_settings.key,
            headers=publisher_settings.headers,
        ) as publisher:
            return await publisher.publish(status)

    try:
        body = asyncio.run(_push())
    except PublishError as exc:
        console.print(f"[red]Publish error:[/red] {exc}")
        sys.exit(1)

    console.print_json(body)
