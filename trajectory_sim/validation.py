"""
Validation Against Reference Cases
==================================
Checks the engine three ways for a table of reference launches:

  1. Closed-form summary vs the expected textbook figures
  2. Closed-form time of flight vs an independent numeric root of y(t) = 0
     (Brent's method, scipy.optimize.brentq)
  3. The tick-by-tick stepper vs the closed form: the last emitted point
     must lie within one time step of the predicted landing time, and no
     emitted point may be below ground.

Reference figures are hand-computed for vacuum trajectories.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import List

from scipy.optimize import brentq

from .kinematics import LaunchParameters, compute_summary, position
from .planets import gravity_field, GravityField
from .stepper import TrajectoryStepper, ManualScheduler, SurfaceSize, RunStatus

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
#  Reference data — vacuum trajectories
# ══════════════════════════════════════════════════════════════════════════

# (speed m/s, angle°, height m, body, flight time s, max height m, range m)
REFERENCE_CASES = {
    'name': 'Vacuum reference launches',
    'surface': (800.0, 600.0),
    'cases': [
        (20.0, 45.0,  0.0, 'earth',    2.883,  10.194,  40.775),
        (10.0, 30.0,  0.0, 'earth',    1.019,   1.274,   8.828),
        (15.0, 60.0, 10.0, 'earth',    3.272,  18.601,  24.537),
        (5.0,  30.0,  2.0, 'moon',     3.746,   3.929,  16.219),
        (5.0,  30.0,  2.0, 'earth',    0.942,   2.319,   4.081),
        (30.0, 45.0,  0.0, 'mars',    11.405,  60.484, 241.935),
        (25.0, 20.0,  5.0, 'jupiter',  1.068,   6.475,  25.082),
        (8.0,   0.0, 50.0, 'earth',    3.193,  50.000,  25.542),
    ],
}


@dataclass
class ValidationResult:
    """Result of one reference comparison."""
    speed: float
    angle_deg: float
    height: float
    body: str
    ref_tof: float
    sim_tof: float
    tof_error_pct: float
    ref_max_height: float
    sim_max_height: float
    height_error_pct: float
    ref_range: float
    sim_range: float
    range_error_pct: float
    root_tof: float             # numeric root of y(t) = 0
    stepped_points: int
    last_point_time: float
    time_step: float
    lowest_point: float         # min y over emitted points (m)

    @property
    def stepper_consistent(self) -> bool:
        """Last tick lies within one step before the closed-form landing."""
        return (self.last_point_time <= self.sim_tof + 1e-9
                and self.sim_tof - self.last_point_time < self.time_step + 1e-9
                and self.lowest_point >= 0.0)


def _pct(sim: float, ref: float) -> float:
    return 100.0 * (sim - ref) / ref if ref else 0.0


def numeric_flight_time(params: LaunchParameters, gravity: float) -> float:
    """Landing time from a bracketed root search on y(t)."""
    _, vy = params.velocity_components()
    if params.initial_height == 0.0 and vy <= 0.0:
        return 0.0
    t_apex = max(vy / gravity, 0.0)
    # apex time plus free fall from the apex, padded: y is negative there
    fall = np.sqrt(2.0 * (params.initial_height + vy * vy / (2.0 * gravity)) / gravity)
    upper = t_apex + fall + 1.0
    return float(brentq(lambda t: position(params, gravity, t)[1], t_apex, upper))


def validate_case(speed: float, angle_deg: float, height: float, body: str,
                  ref_tof: float, ref_h: float, ref_r: float,
                  surface=(800.0, 600.0), multiplier: float = 1.0) -> ValidationResult:
    params = LaunchParameters(speed=speed, angle_deg=angle_deg, initial_height=height)
    gravity: GravityField = gravity_field(body)
    summary = compute_summary(params, gravity)

    stepper = TrajectoryStepper(ManualScheduler(), multiplier=multiplier)
    stepper.start(params, gravity, SurfaceSize(*surface), confirm=lambda found: True)
    run = stepper.run_to_completion()
    if run.status is not RunStatus.LANDED:
        logger.error("Reference run %s ended %s: %s", params, run.status.value, run.error)

    ys = [p.y for p in run.points]
    return ValidationResult(
        speed=speed,
        angle_deg=angle_deg,
        height=height,
        body=gravity.name,
        ref_tof=ref_tof,
        sim_tof=summary.flight_time,
        tof_error_pct=_pct(summary.flight_time, ref_tof),
        ref_max_height=ref_h,
        sim_max_height=summary.max_height,
        height_error_pct=_pct(summary.max_height, ref_h),
        ref_range=ref_r,
        sim_range=summary.range,
        range_error_pct=_pct(summary.range, ref_r),
        root_tof=numeric_flight_time(params, gravity.gravity),
        stepped_points=len(run.points),
        last_point_time=run.points[-1].time if run.points else float('nan'),
        time_step=run.time_step,
        lowest_point=min(ys) if ys else float('nan'),
    )


def validate_against_reference(reference: dict = REFERENCE_CASES,
                               verbose: bool = True) -> List[ValidationResult]:
    """
    Run every reference launch and compare; returns one result per case.
    """
    results = []

    if verbose:
        print(f"\n{'='*84}")
        print(f"  VALIDATION: {reference['name']}")
        print(f"{'='*84}")
        print(f"{'v0':>6} {'θ°':>5} {'h0':>6} {'Body':<8} {'Ref T':>8} {'Sim T':>8} "
              f"{'Root T':>8} {'Ref H':>8} {'Sim H':>8} {'Ref R':>9} {'Sim R':>9} {'Ticks':>6}")
        print("-" * 84)

    for speed, angle, height, body, ref_tof, ref_h, ref_r in reference['cases']:
        vr = validate_case(speed, angle, height, body, ref_tof, ref_h, ref_r,
                           surface=reference.get('surface', (800.0, 600.0)))
        results.append(vr)

        if verbose:
            print(f"{speed:>6.1f} {angle:>5.0f} {height:>6.1f} {vr.body:<8s} "
                  f"{ref_tof:>8.3f} {vr.sim_tof:>8.3f} {vr.root_tof:>8.3f} "
                  f"{ref_h:>8.3f} {vr.sim_max_height:>8.3f} "
                  f"{ref_r:>9.3f} {vr.sim_range:>9.3f} {vr.stepped_points:>6d}")

    if verbose:
        worst = max(max(abs(r.tof_error_pct), abs(r.height_error_pct), abs(r.range_error_pct))
                    for r in results)
        consistent = all(r.stepper_consistent for r in results)
        print("-" * 84)
        print(f"  Worst closed-form error: {worst:.3f}% | "
              f"Stepper consistent: {'yes' if consistent else 'NO'}")
        status = "✓ PASS" if worst < 0.1 and consistent else "✗ CHECK"
        print(f"  Status: {status}")
        print(f"{'='*84}\n")

    return results


if __name__ == "__main__":
    validate_against_reference(verbose=True)
