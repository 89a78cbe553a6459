"""Dashboard — one poller, one animator and one frame loop wired together."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from agentface.animation.animator import HeartbeatAnimator
from agentface.animation.loop import FrameLoop
from agentface.status.poller import StatusPoller

if TYPE_CHECKING:
    import httpx

    from agentface.animation.surface import RenderSurface
    from agentface.config import FaceSettings
    from agentface.status.models import AgentStatus, ConnectionState
    from agentface.status.ticker import Ticker

logger = logging.getLogger(__name__)


class Dashboard:
    """Runs the status display end-to-end.

    The poller and the frame loop are independent asyncio activities; the
    only coupling is a listener that re-evaluates the animator's target
    after every poll attempt, so a slow fetch never delays a frame.

    Usage::

        async with Dashboard(settings, surface=TextSurface()) as dash:
            await asyncio.sleep(60)
    """

    def __init__(
        self,
        settings: FaceSettings,
        *,
        surface: RenderSurface,
        client: httpx.AsyncClient | None = None,
        ticker: Ticker | None = None,
    ) -> None:
        polling = settings.polling
        animation = settings.animation

        self.settings = settings
        self.surface = surface
        self.poller = StatusPoller(
            polling.url,
            interval_ms=polling.interval_ms,
            max_failures=polling.max_failures,
            timeout_s=polling.timeout_s,
            client=client,
            ticker=ticker,
        )
        self.animator = HeartbeatAnimator(rate=animation.rate, phase_speed=animation.phase_speed)
        self.frame_loop = FrameLoop(self.animator, surface, rate=animation.rate)
        self._unsubscribe: Callable[[], None] | None = None

    async def __aenter__(self) -> Dashboard:
        self.start()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    @property
    def is_running(self) -> bool:
        return self.poller.is_running and self.frame_loop.is_running

    def start(self) -> None:
        """Start polling and drawing; a no-op when already running."""
        if self._unsubscribe is None:
            self._unsubscribe = self.poller.subscribe(self._on_poll)
        self.frame_loop.start()
        self.poller.start()

    async def aclose(self) -> None:
        """Stop both activities and release the poller's HTTP client."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.frame_loop.stop()
        await self.poller.aclose()

    def _on_poll(self, status: AgentStatus | None, connection_state: ConnectionState) -> None:
        target = self.animator.update(status, connection_state)
        logger.debug("Poll outcome -> %s (failures=%d)", target.value, connection_state.failure_count)
