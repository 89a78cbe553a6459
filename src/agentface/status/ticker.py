"""Fixed-rate tickers used to schedule status fetches.

A ticker fires its callback every ``interval_s`` seconds measured from the
moment it was started, independent of how long each callback's work takes.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class Ticker(Protocol):
    """Fixed-rate timer driving the poll loop."""

    @property
    def active(self) -> bool: ...
    def start(self, interval_s: float, callback: Callable[[], None]) -> None: ...
    def cancel(self) -> None: ...


class AsyncioTicker:
    """Ticker backed by ``loop.call_at`` with absolute deadlines.

    Firing ``n`` is scheduled at ``origin + n * interval`` so latency in one
    firing never pushes the following ones back.  Late firings are delivered
    back to back, never merged.
    """

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._callback: Callable[[], None] | None = None
        self._interval = 0.0
        self._origin = 0.0
        self._fired = 0

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, interval_s: float, callback: Callable[[], None]) -> None:
        """Arm the ticker; must be called from a running event loop."""
        if self._handle is not None:
            return
        if interval_s <= 0:
            msg = f"interval must be positive, got {interval_s}"
            raise ValueError(msg)
        self._loop = asyncio.get_running_loop()
        self._callback = callback
        self._interval = interval_s
        self._origin = self._loop.time()
        self._fired = 0
        self._schedule_next()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule_next(self) -> None:
        assert self._loop is not None
        deadline = self._origin + (self._fired + 1) * self._interval
        self._handle = self._loop.call_at(deadline, self._fire)

    def _fire(self) -> None:
        self._fired += 1
        self._schedule_next()
        if self._callback is not None:
            self._callback()
