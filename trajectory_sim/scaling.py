"""
Scale Planner
=============
Maps physical coordinates (m) onto a bounded drawing surface (px) and picks
human-readable units for every number shown to the user:

  1. Pixel-per-meter scale that fits the whole trajectory on the surface
  2. Live scale readout ("1 px = 0.25 m")
  3. Axis tick base unit, rounding threshold and tick spacing
  4. Per-tick label text (four-tier, magnitude adaptive)
  5. Summary strings for height / range (mm…Mm) and flight time (μs…h)

Every ladder is evaluated independently: height, range and time may end up
in three different unit families at the same moment.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Tuple

from .config import SimulationConfig, DEFAULT_CONFIG
from .errors import DegenerateScaleError

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
#  Unit ladders — (lower bound, unit, factor from SI, decimals)
#  Checked top to bottom; the first bound the value reaches wins.
# ══════════════════════════════════════════════════════════════════════════

LENGTH_LADDER = [
    (1e6,     'Mm', 1e-6, 1),
    (1000.0,  'km', 1e-3, 1),
    (0.1,     'm',  1.0,  2),
    (0.001,   'cm', 100.0, 2),
    (-np.inf, 'mm', 1000.0, 1),
]

TIME_LADDER = [
    (3600.0,  'h',   1.0 / 3600.0, 1),
    (60.0,    'min', 1.0 / 60.0,   1),
    (0.1,     's',   1.0,          2),
    (0.001,   'ms',  1000.0,       2),
    (-np.inf, 'μs',  1e6,          1),
]

# (unit, factor from meters, rounding threshold in display units)
AXIS_UNITS = {
    'km': ('km', 0.001, 0.1),
    'm':  ('m',  1.0,   1.0),
    'cm': ('cm', 100.0, 1.0),
}

PLACEHOLDER = '---'


def _format_on_ladder(value: float, ladder) -> str:
    if value is None or not np.isfinite(value):
        return PLACEHOLDER
    for bound, unit, factor, decimals in ladder:
        if value >= bound:
            return f"{value * factor:.{decimals}f} {unit}"
    # unreachable: the last rung is -inf
    raise AssertionError(value)


def format_length(meters: float) -> str:
    """Height or range with its own unit, e.g. 0.0005 → '0.5 mm', 2500 → '2.5 km'."""
    return _format_on_ladder(meters, LENGTH_LADDER)


def format_duration(seconds: float) -> str:
    """Flight time with its own unit, e.g. 45 → '45.00 s', 120 → '2.0 min'."""
    return _format_on_ladder(seconds, TIME_LADDER)


def format_speed_multiplier(multiplier: float) -> str:
    return f"{multiplier:.1f}x"


# ══════════════════════════════════════════════════════════════════════════
#  Scale computation
# ══════════════════════════════════════════════════════════════════════════

def _usable_extent(value: float) -> bool:
    return value is not None and bool(np.isfinite(value)) and value > 0


def compute_scale(max_range: float, max_height: float,
                  width: float, height: float,
                  config: SimulationConfig = DEFAULT_CONFIG) -> float:
    """
    Pixels per meter so that range × height fits inside the margins.

    scale = min((W − 40) / range, (H − 40) / height) × 0.9

    Raises DegenerateScaleError when either extent is zero or non-finite,
    or the surface is too small to hold anything.
    """
    if not _usable_extent(max_range) or not _usable_extent(max_height):
        raise DegenerateScaleError(
            f"trajectory extent range={max_range!r} height={max_height!r} "
            f"cannot be scaled")

    x_scale = (width - config.reserved_px) / max_range
    y_scale = (height - config.reserved_px) / max_height
    scale = min(x_scale, y_scale) * config.scale_safety

    if not np.isfinite(scale) or scale <= 0:
        raise DegenerateScaleError(
            f"surface {width}x{height} px gives unusable scale {scale!r}")
    return float(scale)


def readout_unit(scale: float) -> Tuple[str, float]:
    """
    Unit for the "1 px = …" readout, keyed on meters per pixel.

    Returns (unit, value of one pixel in that unit).
    """
    meters_per_px = 1.0 / scale
    if meters_per_px > 1000:
        return 'km', meters_per_px / 1000.0
    if meters_per_px < 0.1:
        return 'cm', meters_per_px * 100.0
    return 'm', meters_per_px


def _readout_text(unit: str, value: float) -> str:
    return f"Scale: 1 px = {value:.2f} {unit}"


def format_scale_readout(scale: float) -> str:
    return _readout_text(*readout_unit(scale))


def axis_units(surface_width: float, scale: float) -> Tuple[str, float, float]:
    """
    Base unit for tick labels, keyed on the metres spanned by the surface width.

    Returns (unit, factor from meters, rounding threshold).
    """
    span = surface_width / scale
    if span > 1000:
        return AXIS_UNITS['km']
    if span < 0.1:
        return AXIS_UNITS['cm']
    return AXIS_UNITS['m']


def tick_spacing(surface_width: float, scale: float, threshold: float,
                 target_ticks: int = DEFAULT_CONFIG.target_ticks) -> Tuple[float, float]:
    """
    (meter_step, pixel_step) for roughly `target_ticks` marks across the width.
    """
    span = surface_width / scale
    meter_step = max(1.0, float(np.round(span / target_ticks / threshold))) * threshold
    return meter_step, meter_step * scale


def format_tick_label(meters: float, factor: float, unit: str) -> Tuple[str, str]:
    """
    Four-tier label for one tick mark.

    Returns (text, axis unit). Values of 1000 display units and above are
    written in km regardless of the axis base unit; only from 10000 display
    units on does the axis itself switch to km.
    """
    display = meters * factor
    if display >= 10000:
        return f"{meters / 1000.0:.1f} km", 'km'
    if display >= 1000:
        return f"{meters / 1000.0:.1f} km", unit
    if display >= 100:
        return f"{display:.0f} {unit}", unit
    if display >= 10:
        return f"{display:.1f} {unit}", unit
    return f"{display:.2f} {unit}", unit


# ══════════════════════════════════════════════════════════════════════════
#  Scale plan
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ScalePlan:
    """
    Active mapping from meters to pixels plus the units chosen for display.

    Read-only once produced; a new plan replaces it on any input change.
    """
    pixels_per_meter: float
    display_unit: str            # axis tick base unit
    unit_factor: float           # meters → display_unit
    rounding_threshold: float    # tick step granularity, display units
    meter_step: float
    pixel_step: float
    readout_unit: str
    readout_value: float         # one pixel expressed in readout_unit
    surface_width: float
    surface_height: float
    degenerate: bool = False

    @property
    def readout(self) -> str:
        return _readout_text(self.readout_unit, self.readout_value)

    def to_surface(self, x: float, y: float, margin: float = DEFAULT_CONFIG.margin_px
                   ) -> Tuple[float, float]:
        """Physical (x, y) in meters → surface pixel coordinates."""
        px = margin + x * self.pixels_per_meter
        py = self.surface_height - margin - y * self.pixels_per_meter
        return px, py


def plan_scale(max_range: float, max_height: float,
               surface_width: float, surface_height: float,
               config: SimulationConfig = DEFAULT_CONFIG) -> ScalePlan:
    """
    Build the full ScalePlan, falling back to the default scale when the
    trajectory or surface is degenerate.
    """
    degenerate = False
    try:
        scale = compute_scale(max_range, max_height, surface_width, surface_height, config)
    except DegenerateScaleError as exc:
        logger.warning("Degenerate scale, using default %.3f px/m: %s",
                       config.default_scale, exc)
        scale = config.default_scale
        degenerate = True

    unit, factor, threshold = axis_units(surface_width, scale)
    meter_step, pixel_step = tick_spacing(surface_width, scale, threshold,
                                          config.target_ticks)
    r_unit, r_value = readout_unit(scale)

    plan = ScalePlan(
        pixels_per_meter=scale,
        display_unit=unit,
        unit_factor=factor,
        rounding_threshold=threshold,
        meter_step=meter_step,
        pixel_step=pixel_step,
        readout_unit=r_unit,
        readout_value=r_value,
        surface_width=surface_width,
        surface_height=surface_height,
        degenerate=degenerate,
    )
    logger.debug("Scale plan: %.6g px/m, ticks every %g m (%s)",
                 scale, meter_step, unit)
    return plan
