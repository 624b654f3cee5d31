"""
Kinematics Model
================
Closed-form motion of a point mass under constant gravity, no drag.

    x(t) = vx · t
    y(t) = h₀ + vy · t − ½ g t²

Summary values (time of flight, apex height, range) are computed from the
same formulas the stepper evaluates tick by tick, so the static readout
and the animation can never disagree.

Coordinate system:
  x = downrange (horizontal)
  y = altitude  (vertical, up positive, ground at y = 0)
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Tuple, Union

from .config import SimulationConfig, DEFAULT_CONFIG
from .errors import ValidationError, ExtremeValueWarning
from .planets import GravityField
from .scaling import format_length, format_duration


ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class LaunchParameters:
    """
    User-chosen launch state. Immutable for the lifetime of a run.
    """
    speed: float = 20.0              # m/s  initial speed
    angle_deg: float = 45.0          # degrees above horizontal
    initial_height: float = 0.0      # m    above ground

    @property
    def angle_rad(self) -> float:
        return self.angle_deg * np.pi / 180.0

    def velocity_components(self) -> Tuple[float, float]:
        """Initial [vx, vy] in m/s."""
        return velocity_components(self.speed, self.angle_deg)


def _finite(field: str, value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field, value, "must be a number") from None
    if not np.isfinite(v):
        raise ValidationError(field, value, "must be finite")
    return v


def validate_launch(params: LaunchParameters) -> LaunchParameters:
    """
    Check the launch contract: speed > 0, 0 ≤ angle ≤ 90, height ≥ 0.

    Height is checked first, matching the order fields appear on the form.
    """
    height = _finite('initial_height', params.initial_height)
    if height < 0:
        raise ValidationError('initial_height', height, "must be non-negative")

    speed = _finite('speed', params.speed)
    if speed <= 0:
        raise ValidationError('speed', speed, "must be greater than 0")

    angle = _finite('angle_deg', params.angle_deg)
    if angle < 0 or angle > 90:
        raise ValidationError('angle_deg', angle, "must be between 0 and 90 degrees")

    return params


def extreme_value_warnings(params: LaunchParameters,
                           config: SimulationConfig = DEFAULT_CONFIG
                           ) -> List[ExtremeValueWarning]:
    """Soft warnings for valid but very large inputs (speed, height)."""
    found = []
    if params.speed > config.extreme_speed:
        found.append(ExtremeValueWarning('speed', params.speed, config.extreme_speed))
    if params.initial_height > config.extreme_height:
        found.append(ExtremeValueWarning('initial_height', params.initial_height,
                                         config.extreme_height))
    return found


# ══════════════════════════════════════════════════════════════════════════
#  Pure kinematics
# ══════════════════════════════════════════════════════════════════════════

def velocity_components(speed: float, angle_deg: float) -> Tuple[float, float]:
    angle_rad = angle_deg * np.pi / 180.0
    return speed * np.cos(angle_rad), speed * np.sin(angle_rad)


def position(params: LaunchParameters, gravity: float,
             t: ArrayLike) -> Tuple[ArrayLike, ArrayLike]:
    """
    Position (x, y) in meters at time t (scalar or array of seconds).
    """
    vx, vy = params.velocity_components()
    x = vx * t
    y = params.initial_height + vy * t - 0.5 * gravity * t * t
    return x, y


def flight_time(params: LaunchParameters, gravity: float) -> float:
    """
    Positive root of y(t) = 0.

    Returns nan for gravity ≤ 0 (no landing under zero or upward gravity).
    """
    if gravity <= 0:
        return float('nan')
    _, vy = params.velocity_components()
    return float((vy + np.sqrt(vy * vy + 2.0 * gravity * params.initial_height)) / gravity)


def max_height(params: LaunchParameters, gravity: float) -> float:
    """Apex altitude (m). Equals the launch height for a horizontal throw."""
    if gravity <= 0:
        return float('nan')
    _, vy = params.velocity_components()
    return float(params.initial_height + vy * vy / (2.0 * gravity))


def horizontal_range(params: LaunchParameters, gravity: float) -> float:
    """Downrange distance at impact (m)."""
    vx, _ = params.velocity_components()
    return float(vx * flight_time(params, gravity))


def sample_trajectory(params: LaunchParameters, gravity: float,
                      n: int = 200) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Evenly spaced (t, x, y) samples from launch to impact, for static plots.
    """
    t_end = flight_time(params, gravity)
    t = np.linspace(0.0, t_end, n)
    x, y = position(params, gravity, t)
    # Float noise at the last sample can leave y a hair below ground.
    y = np.maximum(y, 0.0)
    return t, x, y


# ══════════════════════════════════════════════════════════════════════════
#  Summary
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TrajectorySummary:
    """Closed-form flight figures for one launch."""
    params: LaunchParameters
    gravity: GravityField
    flight_time: float     # s
    max_height: float      # m
    range: float           # m

    def formatted(self) -> Tuple[str, str, str]:
        """(height, range, time) strings, each with its own unit."""
        return (format_length(self.max_height),
                format_length(self.range),
                format_duration(self.flight_time))

    def summary(self) -> str:
        """Human-readable summary box."""
        height_s, range_s, time_s = self.formatted()
        body = self.gravity.name or 'custom'
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — {body:<30s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Gravity      : {self.gravity.gravity:>10.2f} m/s²{'':<21s} ║",
            f"║  Launch vel   : {self.params.speed:>10.1f} m/s{'':<22s} ║",
            f"║  Elevation    : {self.params.angle_deg:>10.1f} °{'':<24s} ║",
            f"║  Launch height: {self.params.initial_height:>10.1f} m{'':<24s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Max height   : {height_s:>14s}{'':<22s} ║",
            f"║  Range        : {range_s:>14s}{'':<22s} ║",
            f"║  Flight time  : {time_s:>14s}{'':<22s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


def compute_summary(params: LaunchParameters, gravity: GravityField) -> TrajectorySummary:
    g = gravity.gravity
    return TrajectorySummary(
        params=params,
        gravity=gravity,
        flight_time=flight_time(params, g),
        max_height=max_height(params, g),
        range=horizontal_range(params, g),
    )
