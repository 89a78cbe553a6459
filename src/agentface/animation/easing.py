"""Interpolation helpers for state transitions."""

from __future__ import annotations

RGB = tuple[float, float, float]


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out on [0, 1]; values outside the range are clamped."""
    t = min(1.0, max(0.0, t))
    if t < 0.5:
        return 4 * t * t * t
    return 1 - (-2 * t + 2) ** 3 / 2


def lerp(a: float, b: float, t: float) -> float:
    # Written as a weighted sum so lerp(a, b, 1) is exactly b.
    return a * (1 - t) + b * t


def lerp_color(c1: RGB, c2: RGB, t: float) -> RGB:
    """Component-wise linear interpolation in RGB space."""
    return (lerp(c1[0], c2[0], t), lerp(c1[1], c2[1], t), lerp(c1[2], c2[2], t))
