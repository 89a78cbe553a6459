"""agentface — a heartbeat display for an AI agent's busy/idle status."""

from __future__ import annotations

__version__ = "0.1.0"
