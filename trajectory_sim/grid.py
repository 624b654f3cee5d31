"""
Coordinate Grid Builder
=======================
Axis lines, axis unit labels and tick marks for the current surface size
and scale plan, in surface pixel coordinates (origin top-left, y down).

The builder owns the layout it produced last and replaces it as a whole
on every rebuild, so a renderer can clear exactly what it drew before.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .config import SimulationConfig, DEFAULT_CONFIG
from .scaling import ScalePlan, format_tick_label


@dataclass(frozen=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class TextLabel:
    text: str
    px: float
    py: float


@dataclass(frozen=True)
class TickMark:
    """One tick on an axis: its line, label text and where the label goes."""
    axis: str                  # 'x' or 'y'
    pixel_position: float      # px along the axis' own direction
    label_text: str
    meters: float
    line: Segment
    label_anchor: Tuple[float, float]


@dataclass(frozen=True)
class GridLayout:
    width: float
    height: float
    x_axis: Segment
    y_axis: Segment
    x_label: TextLabel
    y_label: TextLabel
    x_ticks: Tuple[TickMark, ...] = ()
    y_ticks: Tuple[TickMark, ...] = ()

    @property
    def ticks(self) -> Tuple[TickMark, ...]:
        return self.x_ticks + self.y_ticks

    def tick_labels(self, axis: str) -> Tuple[str, ...]:
        marks = self.x_ticks if axis == 'x' else self.y_ticks
        return tuple(m.label_text for m in marks)


def _axis_ticks(axis: str, count_limit: float, origin: float, sign: float,
                plan: ScalePlan, fixed: float, config: SimulationConfig):
    """
    Ticks every plan.pixel_step from the origin, walking in direction `sign`
    until the surface edge. Returns (marks, unit for the axis label).
    """
    step = plan.pixel_step
    unit = plan.display_unit
    if not np.isfinite(step) or step <= 0:
        return (), unit

    half = config.tick_half_length_px
    marks = []
    k = 1
    while True:
        pos = origin + sign * k * step
        if (sign > 0 and pos >= count_limit) or (sign < 0 and pos <= count_limit):
            break
        meters = k * step / plan.pixels_per_meter
        text, axis_unit = format_tick_label(meters, plan.unit_factor, plan.display_unit)
        if axis_unit != plan.display_unit:
            unit = axis_unit

        if axis == 'x':
            line = Segment(pos, fixed - half, pos, fixed + half)
            anchor = (pos - 20.0, fixed + half)
        else:
            line = Segment(fixed - half, pos, fixed + half, pos)
            anchor = (fixed + 15.0, pos - 7.0)
        marks.append(TickMark(axis=axis, pixel_position=pos, label_text=text,
                              meters=meters, line=line, label_anchor=anchor))
        k += 1
    return tuple(marks), unit


def build_grid(width: float, height: float, plan: Optional[ScalePlan],
               config: SimulationConfig = DEFAULT_CONFIG) -> GridLayout:
    """Compute the full grid; without a plan only the axes are produced."""
    margin = config.margin_px
    x_axis_y = height - margin
    y_axis_x = margin

    x_ticks, y_ticks = (), ()
    x_unit = y_unit = 'm'
    if plan is not None:
        x_ticks, x_unit = _axis_ticks('x', width, y_axis_x, +1.0, plan, x_axis_y, config)
        y_ticks, y_unit = _axis_ticks('y', 0.0, x_axis_y, -1.0, plan, y_axis_x, config)

    return GridLayout(
        width=width,
        height=height,
        x_axis=Segment(0.0, x_axis_y, width, x_axis_y),
        y_axis=Segment(y_axis_x, 0.0, y_axis_x, height),
        x_label=TextLabel(f"x [{x_unit}]", width - 30.0, height - 40.0),
        y_label=TextLabel(f"y [{y_unit}]", 35.0, 5.0),
        x_ticks=x_ticks,
        y_ticks=y_ticks,
    )


class CoordinateGridBuilder:
    """Keeps the current grid layout; `rebuild` swaps in a fresh one."""

    def __init__(self, config: SimulationConfig = DEFAULT_CONFIG):
        self.config = config
        self._current: Optional[GridLayout] = None

    @property
    def current(self) -> Optional[GridLayout]:
        return self._current

    def rebuild(self, surface, plan: Optional[ScalePlan]) -> GridLayout:
        layout = build_grid(surface.width, surface.height, plan, self.config)
        self._current = layout
        return layout
