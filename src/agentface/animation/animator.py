"""HeartbeatAnimator — the visual state machine behind the indicator.

The animator never performs I/O.  Poll outcomes are pushed in through
:meth:`HeartbeatAnimator.update`; frames are pulled out through
:meth:`HeartbeatAnimator.on_frame` by whatever drives the render surface.

Transition rule: when the selected target differs from the current target,
``current_state`` takes the *previous target* (not the visually interpolated
state), the target style is loaded, and progress restarts at 0.  Colors and
amplitude keep interpolating from wherever they currently are.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agentface.animation.easing import ease_in_out_cubic, lerp, lerp_color
from agentface.animation.models import (
    DEFAULT_PALETTE,
    FrameInputs,
    HeartbeatState,
    HeartbeatVisualState,
    Palette,
    select_target_state,
)
from agentface.animation.renderer import render_frame

if TYPE_CHECKING:
    from agentface.animation.surface import RenderSurface
    from agentface.status.models import AgentStatus, ConnectionState

logger = logging.getLogger(__name__)

DEFAULT_RATE = 60
DEFAULT_PHASE_SPEED = 0.05


class HeartbeatAnimator:
    """Smoothly animates between ``idle``, ``busy`` and ``disconnected``.

    A transition lasts exactly ``rate`` frames (one second at the default
    60 Hz) regardless of ``phase`` and ``time``, which keep accumulating
    every frame for the oscillators.

    Lifecycle hooks mirror a render surface's callbacks::

        animator.on_attach(surface)
        animator.on_frame()          # once per display refresh
        animator.on_resize(800, 400)
        animator.on_detach()
    """

    def __init__(
        self,
        *,
        rate: int = DEFAULT_RATE,
        phase_speed: float = DEFAULT_PHASE_SPEED,
        palette: Palette | None = None,
    ) -> None:
        if rate <= 0:
            msg = f"rate must be positive, got {rate}"
            raise ValueError(msg)
        self._rate = rate
        self._phase_speed = phase_speed
        self._palette = dict(palette or DEFAULT_PALETTE)
        missing = set(HeartbeatState) - set(self._palette)
        if missing:
            msg = f"palette is missing styles for: {sorted(s.value for s in missing)}"
            raise ValueError(msg)

        self._state = HeartbeatVisualState.resting(HeartbeatState.IDLE, self._palette[HeartbeatState.IDLE])
        self._surface: RenderSurface | None = None

    @property
    def rate(self) -> int:
        return self._rate

    @property
    def state(self) -> HeartbeatVisualState:
        return self._state

    @property
    def surface(self) -> RenderSurface | None:
        return self._surface

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def update(self, status: AgentStatus | None, connection_state: ConnectionState) -> HeartbeatState:
        """Re-evaluate the target after a poll outcome; returns the target."""
        target = select_target_state(status, connection_state)
        self.transition_to(target)
        return target

    def transition_to(self, target: HeartbeatState) -> bool:
        """Begin a transition to *target*; returns ``False`` if it already is the target."""
        st = self._state
        if target == st.target_state:
            return False

        logger.debug("Heartbeat transition %s -> %s", st.target_state.value, target.value)
        style = self._palette[target]
        st.current_state = st.target_state
        st.target_state = target
        st.transition_progress = 0.0
        st.transition_frames = 0
        st.target_color = style.color
        st.target_amplitude = style.amplitude
        return True

    # ------------------------------------------------------------------
    # Per-frame update
    # ------------------------------------------------------------------

    def advance(self) -> None:
        """Advance oscillators and any in-flight transition by one frame."""
        st = self._state
        st.time += 1 / self._rate
        st.phase += self._phase_speed

        if not st.in_transition:
            return

        st.transition_frames += 1
        if st.transition_frames >= self._rate:
            st.transition_progress = 1.0
            st.current_state = st.target_state
        else:
            st.transition_progress = st.transition_frames / self._rate

        eased = ease_in_out_cubic(st.transition_progress)
        st.current_color = lerp_color(st.current_color, st.target_color, eased)
        st.current_amplitude = lerp(st.current_amplitude, st.target_amplitude, eased)

    def snapshot(self) -> FrameInputs:
        """The values the next frame will be drawn from."""
        st = self._state
        return FrameInputs(
            state=st.current_state,
            color=st.current_color,
            amplitude=st.current_amplitude,
            phase=st.phase,
            time=st.time,
        )

    def render(self, surface: RenderSurface) -> None:
        render_frame(surface, self.snapshot())

    # ------------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------------

    def on_attach(self, surface: RenderSurface) -> None:
        self._surface = surface

    def on_frame(self) -> None:
        """Advance one frame and draw it; does nothing while detached."""
        if self._surface is None:
            return
        self.advance()
        self.render(self._surface)

    def on_resize(self, width: int, height: int) -> None:
        if self._surface is not None:
            self._surface.resize(width, height)

    def on_detach(self) -> None:
        self._surface = None
