"""Shared CLI output formatters."""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from agentface.status.models import AgentStatus, ConnectionState

console = Console()


def format_timestamp(ts: int) -> str:
    """Render epoch milliseconds as local ``YYYY-MM-DD HH:MM:SS``.

    Values outside the platform's datetime range are shown as raw
    milliseconds.
    """
    if not ts:
        return "N/A"
    try:
        return datetime.fromtimestamp(ts / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        return f"{ts} ms"


def status_payload(
    status: AgentStatus | None,
    connection_state: ConnectionState,
    *,
    error: str | None = None,
) -> dict[str, Any]:
    """JSON-ready summary of one poll outcome."""
    return {
        "status": status.model_dump(by_alias=True, exclude_none=True) if status else None,
        "connection": connection_state.model_dump(),
        "error": error,
    }


def print_status(
    status: AgentStatus | None,
    connection_state: ConnectionState,
    *,
    error: str | None = None,
    as_json: bool = False,
) -> None:
    """Pretty-print the latest status document and connection state."""
    if as_json:
        console.print_json(json.dumps(status_payload(status, connection_state, error=error)))
        return

    table = Table(title="Agent Status")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    if status is None:
        table.add_row("state", "[dim]waiting for status data[/dim]")
    else:
        table.add_row("state", "[red]busy[/red]" if status.busy else "[green]idle[/green]")
        table.add_row("updated", format_timestamp(status.ts))
        table.add_row("source", status.source or "-")
        table.add_row("session", status.session_key or "-")

    console.print(table)
    console.print(connection_line(connection_state))
    if error:
        console.print(f"[red]Fetch error:[/red] {error}")


def connection_line(connection_state: ConnectionState) -> Text:
    """One-line connection indicator shown beneath the heartbeat."""
    if not connection_state.connected:
        return Text.assemble(
            ("● offline", "bold red"),
            f"  {connection_state.failure_count} consecutive failures, retrying...",
        )
    line = Text.assemble(("● connected", "green"))
    if connection_state.last_success_time:
        line.append(f"  last update {format_timestamp(connection_state.last_success_time)}", style="dim")
    if connection_state.failure_count:
        line.append(f"  ({connection_state.failure_count} failed)", style="yellow")
    return line
