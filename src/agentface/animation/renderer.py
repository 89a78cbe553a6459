"""Per-state drawing routines for the heartbeat indicator.

All geometry is derived from the surface size at draw time, so a surface
may be resized between any two frames.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from agentface.animation.models import BACKGROUND, FrameInputs, HeartbeatState

if TYPE_CHECKING:
    from agentface.animation.surface import Point, RenderSurface

# Ring radius as a fraction of the shorter canvas side (50px on 400x200).
_RADIUS_FRACTION = 0.25


def _wave_ring(
    cx: float,
    cy: float,
    radius: float,
    *,
    lobes: int,
    phase: float,
    depth: float,
    step: float,
) -> list[Point]:
    points: list[Point] = []
    count = int(2 * math.pi / step)
    for i in range(count):
        angle = i * step
        r = radius + math.sin(angle * lobes + phase) * depth
        points.append((cx + math.cos(angle) * r, cy + math.sin(angle) * r))
    return points


def draw_busy(surface: RenderSurface, frame: FrameInputs, cx: float, cy: float, radius: float) -> None:
    color = frame.color
    surface.set_glow(30, color)

    pulse = 1.0 + 0.4 * math.sin(frame.time * 4)
    pulse_inner = 1.0 + 0.3 * math.sin(frame.time * 4 + math.pi / 2)
    surface.circle(cx, cy, radius * 2 * pulse, stroke=color, weight=3)
    surface.circle(cx, cy, radius * 1.5 * pulse_inner, stroke=color, weight=2)
    surface.circle(cx, cy, 8, fill=color)

    ring = _wave_ring(cx, cy, radius, lobes=8, phase=frame.phase * 2, depth=frame.amplitude * 0.5, step=0.05)
    surface.polyline(ring, stroke=color, weight=2, closed=True)


def draw_idle(surface: RenderSurface, frame: FrameInputs, cx: float, cy: float, radius: float) -> None:
    color = frame.color
    surface.set_glow(15, color)

    breathe = 1.0 + 0.1 * math.sin(frame.time * 2)
    surface.circle(cx, cy, radius * 2 * breathe, stroke=color, weight=2)
    surface.circle(cx, cy, radius * 1.5 * breathe, stroke=color, weight=1.5)
    surface.circle(cx, cy, 6, fill=color)

    ring = _wave_ring(cx, cy, radius, lobes=4, phase=frame.phase, depth=frame.amplitude * 0.3, step=0.1)
    surface.polyline(ring, stroke=color, weight=1, closed=True)


def draw_disconnected(surface: RenderSurface, frame: FrameInputs, cx: float, cy: float, radius: float) -> None:
    # Static: ignores phase, time and amplitude.
    color = frame.color
    surface.set_glow(0)
    surface.circle(cx, cy, radius * 2, stroke=color, weight=1)
    surface.circle(cx, cy, radius * 1.5, stroke=color, weight=1)
    surface.circle(cx, cy, 4, fill=color)


_ROUTINES = {
    HeartbeatState.BUSY: draw_busy,
    HeartbeatState.IDLE: draw_idle,
    HeartbeatState.DISCONNECTED: draw_disconnected,
}


def render_frame(surface: RenderSurface, frame: FrameInputs) -> None:
    """Draw one complete frame and present it."""
    surface.background(BACKGROUND)

    cx = surface.width / 2
    cy = surface.height / 2
    radius = min(surface.width, surface.height) * _RADIUS_FRACTION

    _ROUTINES[frame.state](surface, frame, cx, cy, radius)

    surface.set_glow(0)
    surface.present()
