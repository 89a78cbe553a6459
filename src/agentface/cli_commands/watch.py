"""``agentface watch`` — live heartbeat display in the terminal."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Group
from rich.live import Live
from rich.markup import escape

from agentface.cli_commands._output import connection_line, console

if TYPE_CHECKING:
    from agentface.config import FaceSettings
    from agentface.dashboard import Dashboard

# Terminal repaint rate; the animation itself runs at the configured rate.
_MAX_REPAINT_HZ = 30


def _view(dashboard: Dashboard) -> Group:
    return Group(dashboard.surface, connection_line(dashboard.poller.connection_state))


async def _watch(settings: FaceSettings, duration: float | None) -> None:
    from agentface.animation.surface import TextSurface
    from agentface.dashboard import Dashboard

    animation = settings.animation
    surface = TextSurface(animation.width, animation.height)
    repaint = 1 / min(animation.rate, _MAX_REPAINT_HZ)

    loop = asyncio.get_running_loop()
    deadline = loop.time() + duration if duration is not None else None

    async with Dashboard(settings, surface=surface) as dashboard:
        with Live(_view(dashboard), console=console, auto_refresh=False) as live:
            while deadline is None or loop.time() < deadline:
                await asyncio.sleep(repaint)
                live.update(_view(dashboard), refresh=True)


@click.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Settings YAML file.")
@click.option("--url", default=None, help="Status document URL.")
@click.option("--interval-ms", type=int, default=None, help="Polling interval in milliseconds.")
@click.option("--max-failures", type=int, default=None, help="Consecutive failures before showing disconnected.")
@click.option("--fps", type=int, default=None, help="Animation frame rate.")
@click.option("--duration", type=float, default=None, help="Stop after this many seconds.")
@click.option("--telemetry", is_flag=True, help="Enable telemetry.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def watch(
    config_path: str | None,
    url: str | None,
    interval_ms: int | None,
    max_failures: int | None,
    fps: int | None,
    duration: float | None,
    telemetry: bool,
    verbose: bool,
) -> None:
    """Poll the status document and animate the heartbeat until interrupted."""
    from agentface.config import ConfigError, load_settings
    from agentface.utils.telemetry import configure_telemetry

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
    )

    try:
        settings = load_settings(
            config_path,
            polling_url=url,
            polling_interval_ms=interval_ms,
            polling_max_failures=max_failures,
            animation_rate=fps,
        )
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    if telemetry:
        settings.telemetry.enabled = True
    if settings.telemetry.enabled:
        try:
            configure_telemetry(settings.telemetry)
        except ImportError as exc:
            console.print(f"[red]Telemetry error:[/red] {escape(str(exc))}")
            sys.exit(1)

    try:
        asyncio.run(_watch(settings, duration))
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")
