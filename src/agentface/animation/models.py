"""Animation state models — visual states, per-state styles, frame inputs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from agentface.animation.easing import RGB

if TYPE_CHECKING:
    from agentface.status.models import AgentStatus, ConnectionState


class HeartbeatState(str, Enum):
    """Visual state shown by the heartbeat indicator."""

    IDLE = "idle"
    BUSY = "busy"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class StateStyle:
    """The defining color and wave amplitude of one visual state."""

    color: RGB
    amplitude: float


Palette = dict[HeartbeatState, StateStyle]

DEFAULT_PALETTE: Palette = {
    HeartbeatState.IDLE: StateStyle(color=(76.0, 175.0, 80.0), amplitude=30.0),
    HeartbeatState.BUSY: StateStyle(color=(244.0, 67.0, 54.0), amplitude=40.0),
    HeartbeatState.DISCONNECTED: StateStyle(color=(158.0, 158.0, 158.0), amplitude=20.0),
}

BACKGROUND: RGB = (30.0, 30.0, 30.0)


@dataclass
class HeartbeatVisualState:
    """Mutable animation state owned by a single :class:`HeartbeatAnimator`.

    ``transition_frames`` counts frames since the current transition began;
    ``transition_progress`` is always ``transition_frames / rate`` clamped
    to 1, so a transition lasts exactly ``rate`` frames.
    """

    current_state: HeartbeatState
    target_state: HeartbeatState
    transition_progress: float
    current_color: RGB
    target_color: RGB
    current_amplitude: float
    target_amplitude: float
    phase: float = 0.0
    time: float = 0.0
    transition_frames: int = 0

    @classmethod
    def resting(cls, state: HeartbeatState, style: StateStyle) -> HeartbeatVisualState:
        """A state with no transition in flight."""
        return cls(
            current_state=state,
            target_state=state,
            transition_progress=1.0,
            current_color=style.color,
            target_color=style.color,
            current_amplitude=style.amplitude,
            target_amplitude=style.amplitude,
        )

    @property
    def in_transition(self) -> bool:
        return self.transition_progress < 1.0


@dataclass(frozen=True)
class FrameInputs:
    """Exactly the values a frame is drawn from."""

    state: HeartbeatState
    color: RGB
    amplitude: float
    phase: float
    time: float

    @property
    def rgb(self) -> tuple[int, int, int]:
        r, g, b = self.color
        return (round(r), round(g), round(b))


def select_target_state(
    status: AgentStatus | None,
    connection_state: ConnectionState,
) -> HeartbeatState:
    """Pick the visual state for the latest poll outcome.

    Losing the connection overrides whatever ``busy`` value was last seen.
    """
    if not connection_state.connected:
        return HeartbeatState.DISCONNECTED
    if status is not None and status.busy:
        return HeartbeatState.BUSY
    return HeartbeatState.IDLE
