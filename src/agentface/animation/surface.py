"""Render surfaces — the drawing primitives the heartbeat renderer needs.

Each surface satisfies the :class:`RenderSurface` protocol so the renderer
can draw without knowing whether pixels end up in memory (tests) or in a
terminal (``agentface watch``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, runtime_checkable

from rich.style import Style
from rich.text import Text

from agentface.animation.easing import RGB

Point = tuple[float, float]


@runtime_checkable
class RenderSurface(Protocol):
    """A pixel canvas that is redrawn every frame."""

    @property
    def width(self) -> int: ...
    @property
    def height(self) -> int: ...
    def resize(self, width: int, height: int) -> None: ...
    def background(self, color: RGB) -> None: ...
    def circle(
        self,
        cx: float,
        cy: float,
        diameter: float,
        *,
        stroke: RGB | None = None,
        fill: RGB | None = None,
        weight: float = 1.0,
    ) -> None: ...
    def polyline(
        self,
        points: Sequence[Point],
        *,
        stroke: RGB,
        weight: float = 1.0,
        closed: bool = False,
    ) -> None: ...
    def set_glow(self, blur: float, color: RGB | None = None) -> None: ...
    def present(self) -> None: ...


# ---------------------------------------------------------------------------
# In-memory surface
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DrawOp:
    """One recorded drawing call."""

    kind: str
    args: dict[str, Any] = field(default_factory=dict)


class RecordingSurface:
    """Records drawing calls instead of rasterizing them.

    ``ops`` holds the calls of the frame being drawn; ``last_frame`` holds the
    calls of the most recently presented frame.
    """

    def __init__(self, width: int = 400, height: int = 200) -> None:
        self._width = width
        self._height = height
        self.ops: list[DrawOp] = []
        self.last_frame: list[DrawOp] = []
        self.frames_presented = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def resize(self, width: int, height: int) -> None:
        self._width = width
        self._height = height

    def background(self, color: RGB) -> None:
        self.ops.append(DrawOp("background", {"color": color}))

    def circle(
        self,
        cx: float,
        cy: float,
        diameter: float,
        *,
        stroke: RGB | None = None,
        fill: RGB | None = None,
        weight: float = 1.0,
    ) -> None:
        self.ops.append(
            DrawOp(
                "circle",
                {"cx": cx, "cy": cy, "diameter": diameter, "stroke": stroke, "fill": fill, "weight": weight},
            )
        )

    def polyline(
        self,
        points: Sequence[Point],
        *,
        stroke: RGB,
        weight: float = 1.0,
        closed: bool = False,
    ) -> None:
        self.ops.append(
            DrawOp("polyline", {"points": list(points), "stroke": stroke, "weight": weight, "closed": closed})
        )

    def set_glow(self, blur: float, color: RGB | None = None) -> None:
        self.ops.append(DrawOp("glow", {"blur": blur, "color": color}))

    def present(self) -> None:
        self.last_frame = self.ops
        self.ops = []
        self.frames_presented += 1

    def kinds(self) -> list[str]:
        """Op kinds of the last presented frame, in drawing order."""
        return [op.kind for op in self.last_frame]


# ---------------------------------------------------------------------------
# Terminal surface
# ---------------------------------------------------------------------------


def _rgb_style(color: RGB) -> str:
    r, g, b = (max(0, min(255, round(c))) for c in color)
    return f"rgb({r},{g},{b})"


class TextSurface:
    """Rasterizes drawing calls onto a grid of terminal cells.

    The logical canvas keeps its pixel size (``width`` x ``height``) and is
    sampled down onto ``cols`` x ``rows`` character cells; each presented
    frame is exposed as a :class:`rich.text.Text` via :attr:`frame`.
    """

    STROKE_GLYPH = "•"
    FILL_GLYPH = "█"

    def __init__(self, width: int = 400, height: int = 200, *, cols: int = 64, rows: int = 20) -> None:
        self._width = width
        self._height = height
        self.cols = cols
        self.rows = rows
        self._bg: RGB = (0.0, 0.0, 0.0)
        self._glow = False
        self._cells: list[list[tuple[str, RGB | None, bool]]] = self._blank()
        self.frame = Text()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def resize(self, width: int, height: int) -> None:
        self._width = width
        self._height = height

    def _blank(self) -> list[list[tuple[str, RGB | None, bool]]]:
        return [[(" ", None, False)] * self.cols for _ in range(self.rows)]

    def _to_cell(self, x: float, y: float) -> tuple[int, int] | None:
        if self._width <= 0 or self._height <= 0:
            return None
        col = int(x / self._width * self.cols)
        row = int(y / self._height * self.rows)
        if 0 <= col < self.cols and 0 <= row < self.rows:
            return col, row
        return None

    def _plot(self, x: float, y: float, glyph: str, color: RGB) -> None:
        cell = self._to_cell(x, y)
        if cell is not None:
            col, row = cell
            self._cells[row][col] = (glyph, color, self._glow)

    def _segment(self, a: Point, b: Point, color: RGB) -> None:
        # Sample at roughly half-cell resolution so no cell is skipped.
        dx = (b[0] - a[0]) / self._width * self.cols
        dy = (b[1] - a[1]) / self._height * self.rows
        steps = max(1, int(math.hypot(dx, dy) * 2))
        for i in range(steps + 1):
            t = i / steps
            self._plot(a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t, self.STROKE_GLYPH, color)

    def background(self, color: RGB) -> None:
        self._bg = color
        self._cells = self._blank()

    def circle(
        self,
        cx: float,
        cy: float,
        diameter: float,
        *,
        stroke: RGB | None = None,
        fill: RGB | None = None,
        weight: float = 1.0,
    ) -> None:
        if self._width <= 0 or self._height <= 0:
            return
        radius = diameter / 2
        if fill is not None:
            col_w = self._width / self.cols
            row_h = self._height / self.rows
            y = cy - radius
            while y <= cy + radius:
                x = cx - radius
                while x <= cx + radius:
                    if (x - cx) ** 2 + (y - cy) ** 2 <= radius**2:
                        self._plot(x, y, self.FILL_GLYPH, fill)
                    x += col_w / 2
                y += row_h / 2
            # Tiny dots still occupy their center cell.
            self._plot(cx, cy, self.FILL_GLYPH, fill)
        if stroke is not None and radius > 0:
            samples = 96
            points = [
                (cx + math.cos(2 * math.pi * i / samples) * radius, cy + math.sin(2 * math.pi * i / samples) * radius)
                for i in range(samples)
            ]
            self.polyline(points, stroke=stroke, weight=weight, closed=True)

    def polyline(
        self,
        points: Sequence[Point],
        *,
        stroke: RGB,
        weight: float = 1.0,
        closed: bool = False,
    ) -> None:
        if not points or self._width <= 0 or self._height <= 0:
            return
        pts = list(points)
        if closed and len(pts) > 1:
            pts.append(pts[0])
        if len(pts) == 1:
            self._plot(pts[0][0], pts[0][1], self.STROKE_GLYPH, stroke)
            return
        for a, b in zip(pts, pts[1:]):
            self._segment(a, b, stroke)

    def set_glow(self, blur: float, color: RGB | None = None) -> None:
        self._glow = blur > 0

    def present(self) -> None:
        background = f"on {_rgb_style(self._bg)}"
        text = Text()
        for r, row in enumerate(self._cells):
            for glyph, color, glowing in row:
                if color is None:
                    text.append(glyph, style=background)
                else:
                    style = Style.parse(f"{_rgb_style(color)} {background}")
                    if glowing:
                        style += Style(bold=True)
                    text.append(glyph, style=style)
            if r < self.rows - 1:
                text.append("\n")
        self.frame = text

    def __rich__(self) -> Text:
        return self.frame
