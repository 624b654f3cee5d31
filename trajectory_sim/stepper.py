"""
Trajectory Stepper
==================
Discrete-time state machine that advances a SimulationRun tick by tick:

    IDLE ──start──▶ RUNNING ──y < 0──▶ LANDED
                       │
                       └──tick error──▶ FAILED

    reset: any state ──▶ IDLE (points and time cleared)

The transition itself is the pure function `advance(run)`; the
TrajectoryStepper owns the current run, wires `tick()` to a periodic
scheduler and re-arms the scheduler when the speed multiplier changes.

Each tick evaluates the closed-form position from kinematics.py at the
current simulated time, so the animation lands exactly where the static
summary says it will (to within one time step).
"""

import logging
import numpy as np
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple, Union

from .config import SimulationConfig, DEFAULT_CONFIG
from .errors import (
    SimulationError, ValidationError, TickComputationError, ExtremeValueWarning,
)
from .grid import CoordinateGridBuilder, GridLayout
from .kinematics import (
    LaunchParameters, TrajectorySummary, validate_launch,
    extreme_value_warnings, compute_summary, position,
)
from .planets import GravityField
from .scaling import ScalePlan, plan_scale

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    LANDED = 'landed'
    FAILED = 'failed'

    @property
    def label(self) -> str:
        """Text for the status display."""
        return {
            RunStatus.IDLE: 'Ready',
            RunStatus.RUNNING: 'In progress',
            RunStatus.LANDED: 'Finished',
            RunStatus.FAILED: 'Simulation error',
        }[self]


@dataclass(frozen=True)
class SurfaceSize:
    """Drawable surface dimensions in pixels."""
    width: float
    height: float

    def measurable(self, config: SimulationConfig = DEFAULT_CONFIG) -> bool:
        return bool(np.isfinite(self.width) and np.isfinite(self.height)
                    and self.width > config.reserved_px
                    and self.height > config.reserved_px)


@dataclass(frozen=True)
class TrajectoryPoint:
    """One emitted sample: physical position (m) and surface position (px)."""
    time: float
    x: float
    y: float
    px: float
    py: float

    @property
    def surface(self) -> Tuple[float, float]:
        return self.px, self.py


@dataclass(frozen=True)
class SimulationRun:
    """
    Complete state of one launch. Replaced, never mutated.
    """
    params: LaunchParameters
    gravity: GravityField
    surface: SurfaceSize
    plan: ScalePlan
    summary: TrajectorySummary
    time_step: float
    current_time: float = 0.0
    points: Tuple[TrajectoryPoint, ...] = ()
    status: RunStatus = RunStatus.IDLE
    error: Optional[str] = None


# ── Tick outcomes ─────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Emitted:
    point: TrajectoryPoint


@dataclass(frozen=True)
class Landed:
    time: float


@dataclass(frozen=True)
class Failed:
    error: TickComputationError


TickOutcome = Union[Emitted, Landed, Failed]


def _compute_point(run: SimulationRun, config: SimulationConfig) -> Optional[TrajectoryPoint]:
    """Point at run.current_time, or None once the projectile is below ground."""
    if not run.surface.measurable(config):
        raise TickComputationError(
            f"surface {run.surface.width}x{run.surface.height} px is not measurable")

    t = run.current_time
    with np.errstate(over='raise', invalid='raise', divide='raise'):
        try:
            x, y = position(run.params, run.gravity.gravity, t)
        except FloatingPointError as exc:
            raise TickComputationError(f"position at t={t:g} s: {exc}") from exc

    if not (np.isfinite(x) and np.isfinite(y)):
        raise TickComputationError(f"non-finite position ({x}, {y}) at t={t:g} s")
    if y < 0:
        return None

    px, py = run.plan.to_surface(x, y, config.margin_px)
    if not (np.isfinite(px) and np.isfinite(py)):
        raise TickComputationError(f"non-finite surface point ({px}, {py}) at t={t:g} s")
    return TrajectoryPoint(time=t, x=float(x), y=float(y), px=float(px), py=float(py))


def advance(run: SimulationRun,
            config: SimulationConfig = DEFAULT_CONFIG) -> Tuple[SimulationRun, TickOutcome]:
    """
    One simulation tick as a pure transition.

    RUNNING → RUNNING with one more point and time advanced by time_step,
    RUNNING → LANDED (no point) when y(t) < 0,
    RUNNING → FAILED when the point cannot be computed.
    """
    if run.status is not RunStatus.RUNNING:
        raise SimulationError(f"cannot advance a run that is {run.status.value}")

    try:
        point = _compute_point(run, config)
    except TickComputationError as exc:
        return replace(run, status=RunStatus.FAILED, error=str(exc)), Failed(exc)

    if point is None:
        return replace(run, status=RunStatus.LANDED), Landed(run.current_time)

    new_run = replace(run,
                      points=run.points + (point,),
                      current_time=run.current_time + run.time_step)
    return new_run, Emitted(point)


# ══════════════════════════════════════════════════════════════════════════
#  Schedulers
# ══════════════════════════════════════════════════════════════════════════

class ManualScheduler:
    """
    Scheduler driven by hand: `fire()` delivers one callback round while
    started. Mirrors the start/stop/interval/add_callback surface of a
    matplotlib canvas timer, for headless runs and tests.
    """

    def __init__(self, interval: float = DEFAULT_CONFIG.base_tick_interval_ms):
        self.interval = interval
        self.running = False
        self.callbacks: List[Callable] = []
        self.starts = 0

    def add_callback(self, func: Callable):
        self.callbacks.append(func)
        return func

    def start(self):
        self.running = True
        self.starts += 1

    def stop(self):
        self.running = False

    def fire(self, rounds: int = 1) -> int:
        """Deliver up to `rounds` callback rounds; returns how many ran."""
        delivered = 0
        for _ in range(rounds):
            if not self.running:
                break
            for func in list(self.callbacks):
                func()
            delivered += 1
        return delivered


# ══════════════════════════════════════════════════════════════════════════
#  Stepper
# ══════════════════════════════════════════════════════════════════════════

class TrajectoryStepper:
    """
    Owns one SimulationRun, the periodic scheduler and the coordinate grid.

    The scheduler must offer `interval` (ms), `start()`, `stop()` and
    `add_callback(func)`; a matplotlib canvas timer and ManualScheduler both do.
    """

    def __init__(self, scheduler=None, config: SimulationConfig = DEFAULT_CONFIG,
                 multiplier: float = 1.0, surface: Optional[SurfaceSize] = None):
        self.config = config
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.scheduler.add_callback(self.tick)
        self.grid = CoordinateGridBuilder(config)

        self._multiplier = _check_multiplier(multiplier)
        self._gravity = GravityField()
        self._surface = surface
        self._run: Optional[SimulationRun] = None
        self._run_id = 0
        self._active = False
        self.last_error: Optional[TickComputationError] = None

        # Observer hooks for the rendering collaborator
        self.on_point: List[Callable[[TrajectoryPoint], None]] = []
        self.on_status: List[Callable[[RunStatus], None]] = []
        self.on_plan: List[Callable[[ScalePlan, GridLayout], None]] = []

        self.scheduler.interval = config.tick_interval_ms(self._multiplier)
        if surface is not None:
            self.grid.rebuild(surface, None)

    # ── Read-only views ───────────────────────────────────────────────────
    @property
    def run(self) -> Optional[SimulationRun]:
        return self._run

    @property
    def status(self) -> RunStatus:
        return self._run.status if self._run is not None else RunStatus.IDLE

    @property
    def plan(self) -> Optional[ScalePlan]:
        return self._run.plan if self._run is not None else None

    @property
    def summary(self) -> Optional[TrajectorySummary]:
        return self._run.summary if self._run is not None else None

    @property
    def multiplier(self) -> float:
        return self._multiplier

    @property
    def gravity(self) -> GravityField:
        return self._gravity

    @property
    def is_ticking(self) -> bool:
        return self._active and self.status is RunStatus.RUNNING

    # ── Control operations ────────────────────────────────────────────────
    def start(self, params: LaunchParameters, gravity, surface,
              confirm: Optional[Callable[[List[ExtremeValueWarning]], bool]] = None
              ) -> Optional[SimulationRun]:
        """
        Validate input, plan the scale and begin ticking from t = 0.

        Extreme values are passed to `confirm`; a False answer, or no
        `confirm` at all, leaves the stepper untouched and returns None.
        """
        validate_launch(params)
        gravity = _as_gravity(gravity)
        surface = _as_surface(surface)

        warnings_found = extreme_value_warnings(params, self.config)
        for w in warnings_found:
            logger.warning("Extreme launch value: %s", w)
        if warnings_found and (confirm is None or not confirm(warnings_found)):
            logger.info("Start cancelled, extreme values not confirmed")
            return None

        self._halt()
        self._gravity = gravity
        self._surface = surface

        summary = compute_summary(params, gravity)
        plan = plan_scale(summary.range, summary.max_height,
                          surface.width, surface.height, self.config)
        self._run = SimulationRun(
            params=params,
            gravity=gravity,
            surface=surface,
            plan=plan,
            summary=summary,
            time_step=self.config.time_step(self._multiplier),
            status=RunStatus.RUNNING,
        )
        self._run_id += 1
        self.last_error = None

        logger.info("Run started: v=%.3g m/s angle=%.3g° h=%.3g m g=%.3g m/s² "
                    "(T=%.4g s, H=%.4g m, R=%.4g m)",
                    params.speed, params.angle_deg, params.initial_height,
                    gravity.gravity, summary.flight_time, summary.max_height,
                    summary.range)

        self._publish_plan()
        self._notify_status()
        self._arm()
        return self._run

    def stop(self):
        """Halt ticking before the next scheduled callback; state is kept."""
        if self._active:
            logger.info("Run stopped at t=%.3f s", self._run.current_time)
        self._halt()

    def resume(self):
        """Re-arm ticking for a stopped run that has not finished."""
        if self._run is not None and self._run.status is RunStatus.RUNNING and not self._active:
            logger.info("Run resumed at t=%.3f s", self._run.current_time)
            self._arm()

    def reset(self):
        """Back to IDLE: stop ticking, drop the run, redraw the bare grid."""
        self._halt()
        had_run = self._run is not None
        self._run = None
        self._run_id += 1
        self.last_error = None
        if self._surface is not None:
            self.grid.rebuild(self._surface, None)
        if had_run:
            logger.info("Simulation reset")
        self._notify_status()

    def set_speed_multiplier(self, multiplier: float):
        """
        Change animation speed: interval = 10/m ms, time step = 0.1·m s.

        Current time and emitted points are untouched; a ticking scheduler
        is stopped and restarted so only the next callback sees the change.
        """
        self._multiplier = _check_multiplier(multiplier)
        if self._run is not None:
            self._run = replace(self._run, time_step=self.config.time_step(self._multiplier))

        interval = self.config.tick_interval_ms(self._multiplier)
        if self._active:
            self.scheduler.stop()
            self.scheduler.interval = interval
            self.scheduler.start()
        else:
            self.scheduler.interval = interval
        logger.debug("Speed multiplier %.2f (interval %.3f ms)", self._multiplier, interval)

    def on_resize(self, surface):
        """New surface size: rebuild the grid and rescale any existing run."""
        surface = _as_surface(surface)
        self._surface = surface
        if self._run is None:
            self.grid.rebuild(surface, None)
            return

        summary = self._run.summary
        plan = plan_scale(summary.range, summary.max_height,
                          surface.width, surface.height, self.config)
        self._run = replace(self._run, surface=surface, plan=plan)
        self._publish_plan()

    def on_gravity_change(self, gravity):
        """Record the new gravity; restart from t = 0 only if a run is ticking."""
        gravity = _as_gravity(gravity)
        self._gravity = gravity
        if self.is_ticking:
            logger.info("Gravity changed to %.3g m/s², restarting run", gravity.gravity)
            # the running launch was already confirmed
            self.start(self._run.params, gravity, self._run.surface,
                       confirm=lambda found: True)

    # ── Ticking ───────────────────────────────────────────────────────────
    def tick(self) -> Optional[TickOutcome]:
        """Scheduler callback: exactly one transition, or nothing if halted."""
        if not self.is_ticking:
            return None

        self._run, outcome = advance(self._run, self.config)

        if isinstance(outcome, Emitted):
            p = outcome.point
            logger.debug("t=%.3f s  x=%.3f m  y=%.3f m  (%.1f, %.1f) px",
                         p.time, p.x, p.y, p.px, p.py)
            for func in self.on_point:
                func(outcome.point)
        elif isinstance(outcome, Landed):
            self._halt()
            logger.info("Landed after %d points (t=%.3f s)",
                        len(self._run.points), outcome.time)
            self._notify_status()
        else:
            self._halt()
            self.last_error = outcome.error
            logger.error("Tick failed at t=%.3f s: %s",
                         self._run.current_time, outcome.error)
            self._notify_status()
        return outcome

    def points(self) -> Iterator[TrajectoryPoint]:
        """
        Lazy sequence of the current run's points, one per tick, driving
        the ticks itself. Ends on landing, failure, stop or a new run.
        """
        run_id = self._run_id
        while self._run_id == run_id and self.is_ticking:
            outcome = self.tick()
            if isinstance(outcome, Emitted):
                yield outcome.point

    def run_to_completion(self, max_ticks: int = 1_000_000) -> SimulationRun:
        """Tick until the run lands or fails (headless use)."""
        for i, _ in enumerate(self.points()):
            if i >= max_ticks:
                raise SimulationError(f"run did not land within {max_ticks} ticks")
        return self._run

    # ── Internals ─────────────────────────────────────────────────────────
    def _arm(self):
        self.scheduler.interval = self.config.tick_interval_ms(self._multiplier)
        self._active = True
        self.scheduler.start()

    def _halt(self):
        self._active = False
        self.scheduler.stop()

    def _publish_plan(self):
        layout = self.grid.rebuild(self._run.surface, self._run.plan)
        for func in self.on_plan:
            func(self._run.plan, layout)

    def _notify_status(self):
        status = self.status
        for func in self.on_status:
            func(status)


def _check_multiplier(multiplier: float) -> float:
    try:
        m = float(multiplier)
    except (TypeError, ValueError):
        raise ValidationError('multiplier', multiplier, "must be a number") from None
    if not np.isfinite(m) or m <= 0:
        raise ValidationError('multiplier', multiplier, "must be a finite number > 0")
    return m


def _as_gravity(gravity) -> GravityField:
    if isinstance(gravity, GravityField):
        return gravity
    return GravityField(gravity=gravity)


def _as_surface(surface) -> SurfaceSize:
    if isinstance(surface, SurfaceSize):
        return surface
    width, height = surface
    return SurfaceSize(float(width), float(height))
