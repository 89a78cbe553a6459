"""FrameLoop — drives a HeartbeatAnimator at a fixed frame rate."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agentface.animation.animator import HeartbeatAnimator
    from agentface.animation.surface import RenderSurface

logger = logging.getLogger(__name__)


class FrameLoop:
    """Calls :meth:`HeartbeatAnimator.on_frame` ``rate`` times per second.

    Frame deadlines are absolute (``origin + n / rate``) so slow frames do
    not shift later ones.  When the loop falls more than one frame behind it
    resynchronizes instead of bursting to catch up.
    """

    def __init__(self, animator: HeartbeatAnimator, surface: RenderSurface, *, rate: int | None = None) -> None:
        self._animator = animator
        self._surface = surface
        self._rate = rate or animator.rate
        if self._rate <= 0:
            msg = f"rate must be positive, got {self._rate}"
            raise ValueError(msg)
        self._task: asyncio.Task[None] | None = None
        self.frames = 0

    @property
    def rate(self) -> int:
        return self._rate

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Attach the surface and begin drawing; a no-op when already running."""
        if self.is_running:
            return
        self._animator.on_attach(self._surface)
        self._task = asyncio.get_running_loop().create_task(self._run(), name="agentface-frame-loop")
        logger.debug("Frame loop started at %d Hz", self._rate)

    async def stop(self) -> None:
        """Cancel the loop and detach the surface; no frame is drawn afterwards."""
        task, self._task = self._task, None
        self._animator.on_detach()
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Frame loop stopped after %d frames", self.frames)

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        period = 1 / self._rate
        deadline = loop.time()
        while True:
            try:
                self._animator.on_frame()
            except Exception:
                logger.exception("Frame %d failed to draw", self.frames)
            else:
                self.frames += 1
            deadline += period
            delay = deadline - loop.time()
            if delay < -period:
                deadline = loop.time()
                delay = 0.0
            await asyncio.sleep(max(0.0, delay))
