"""
Simulation Configuration
========================
Constants governing the drawing surface layout, scale planning, the
animation cadence and the thresholds for "extreme" launch values.

All geometry is in pixels; all physics is in SI units (m, s, m/s, m/s²).
"""

from dataclasses import dataclass


# ── Surface layout ─────────────────────────────────────────────────────────
SURFACE_MARGIN_PX    = 20.0     # px  gap between surface edge and each axis
SCALE_SAFETY         = 0.9      # keeps apex/landing point off the edge
DEFAULT_SCALE        = 1.0      # px/m fallback for degenerate trajectories

# ── Coordinate grid ────────────────────────────────────────────────────────
TARGET_TICK_COUNT    = 8        # desired tick marks across the x axis
TICK_HALF_LENGTH_PX  = 5.0      # px  tick mark extends this far either side

# ── Animation cadence (multiplier m = 1) ───────────────────────────────────
BASE_TICK_INTERVAL_MS = 10.0    # ms  between scheduler callbacks
BASE_TIME_STEP        = 0.1     # s   simulated time advanced per tick

# ── Soft limits requiring confirmation ─────────────────────────────────────
EXTREME_SPEED        = 1000.0   # m/s
EXTREME_HEIGHT       = 1000.0   # m


@dataclass(frozen=True)
class SimulationConfig:
    """
    Bundle of tunables shared by the scale planner, grid builder and stepper.
    """
    margin_px: float = SURFACE_MARGIN_PX
    scale_safety: float = SCALE_SAFETY
    default_scale: float = DEFAULT_SCALE
    target_ticks: int = TARGET_TICK_COUNT
    tick_half_length_px: float = TICK_HALF_LENGTH_PX
    base_tick_interval_ms: float = BASE_TICK_INTERVAL_MS
    base_time_step: float = BASE_TIME_STEP
    extreme_speed: float = EXTREME_SPEED
    extreme_height: float = EXTREME_HEIGHT

    @property
    def reserved_px(self) -> float:
        """Pixels lost to margins along one dimension (both edges)."""
        return 2.0 * self.margin_px

    def tick_interval_ms(self, multiplier: float) -> float:
        return self.base_tick_interval_ms / multiplier

    def time_step(self, multiplier: float) -> float:
        return self.base_time_step * multiplier


DEFAULT_CONFIG = SimulationConfig()
