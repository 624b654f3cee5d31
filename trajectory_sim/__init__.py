"""
Projectile Trajectory Simulator
===============================
Simulation and presentation-scaling engine for a projectile launched
under constant gravity:
  - Closed-form kinematics (time of flight, apex, range)
  - Tick-by-tick trajectory stepper with a pluggable periodic scheduler
  - Adaptive pixel scale and human-readable units (mm…Mm, μs…h)
  - Coordinate grid with magnitude-adaptive tick labels

Gravity can be picked from a table of bodies (Earth, Moon, Mars, Venus,
Jupiter, Mercury) or given directly. Rendering is delegated to
matplotlib in `trajectory_sim.visualization`.
"""

from .config import SimulationConfig, DEFAULT_CONFIG
from .errors import (
    SimulationError, ValidationError, DegenerateScaleError,
    TickComputationError, ExtremeValueWarning,
)
from .planets import GravityField, ALL_PLANETS, get_planet, gravity_field
from .kinematics import (
    LaunchParameters, TrajectorySummary, validate_launch, extreme_value_warnings,
    position, flight_time, max_height, horizontal_range, compute_summary,
    sample_trajectory,
)
from .scaling import (
    ScalePlan, plan_scale, compute_scale, format_length, format_duration,
    format_tick_label, format_scale_readout, format_speed_multiplier,
)
from .grid import CoordinateGridBuilder, GridLayout, TickMark, build_grid
from .stepper import (
    RunStatus, SurfaceSize, TrajectoryPoint, SimulationRun,
    Emitted, Landed, Failed, advance, ManualScheduler, TrajectoryStepper,
)
from .validation import validate_against_reference, REFERENCE_CASES
from .logging_config import setup_logging

__version__ = "1.0.0"
__all__ = [
    'SimulationConfig', 'DEFAULT_CONFIG',
    'SimulationError', 'ValidationError', 'DegenerateScaleError',
    'TickComputationError', 'ExtremeValueWarning',
    'GravityField', 'ALL_PLANETS', 'get_planet', 'gravity_field',
    'LaunchParameters', 'TrajectorySummary', 'validate_launch',
    'extreme_value_warnings', 'position', 'flight_time', 'max_height',
    'horizontal_range', 'compute_summary', 'sample_trajectory',
    'ScalePlan', 'plan_scale', 'compute_scale', 'format_length',
    'format_duration', 'format_tick_label', 'format_scale_readout',
    'format_speed_multiplier',
    'CoordinateGridBuilder', 'GridLayout', 'TickMark', 'build_grid',
    'RunStatus', 'SurfaceSize', 'TrajectoryPoint', 'SimulationRun',
    'Emitted', 'Landed', 'Failed', 'advance', 'ManualScheduler',
    'TrajectoryStepper',
    'validate_against_reference', 'REFERENCE_CASES',
    'setup_logging',
]
