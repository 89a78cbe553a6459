"""Heartbeat animation — visual state machine, surfaces and frame loop."""

from agentface.animation.animator import HeartbeatAnimator
from agentface.animation.easing import ease_in_out_cubic, lerp, lerp_color
from agentface.animation.loop import FrameLoop
from agentface.animation.models import (
    BACKGROUND,
    DEFAULT_PALETTE,
    FrameInputs,
    HeartbeatState,
    HeartbeatVisualState,
    StateStyle,
    select_target_state,
)
from agentface.animation.renderer import render_frame
from agentface.animation.surface import DrawOp, RecordingSurface, RenderSurface, TextSurface

__all__ = [
    "BACKGROUND",
    "DEFAULT_PALETTE",
    "DrawOp",
    "FrameInputs",
    "FrameLoop",
    "HeartbeatAnimator",
    "HeartbeatState",
    "HeartbeatVisualState",
    "RecordingSurface",
    "RenderSurface",
    "StateStyle",
    "TextSurface",
    "ease_in_out_cubic",
    "lerp",
    "lerp_color",
    "render_frame",
    "select_target_state",
]
