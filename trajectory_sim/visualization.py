"""
Visualization Engine
====================
Matplotlib rendering collaborator for the engine. Everything here draws
what the core already decided; no physics or unit logic lives in this
module.

  1. Grid artist (axes, unit labels, tick marks) with clean redraw
  2. Static snapshot of a run in surface pixel coordinates
  3. Physical trajectory plot with summary readout
  4. Animated run (saved as GIF) driven by a headless stepper
  5. Interactive viewer: sliders, planet selector, canvas timer as scheduler
"""

import os
import logging
from typing import List, Optional

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.widgets import Slider, Button, RadioButtons

from .grid import GridLayout
from .kinematics import LaunchParameters, TrajectorySummary, sample_trajectory
from .planets import ALL_PLANETS, DEFAULT_PLANET, GravityField, get_planet, gravity_field
from .scaling import format_speed_multiplier
from .stepper import (
    TrajectoryStepper, SimulationRun, SurfaceSize, ManualScheduler,
    RunStatus, TrajectoryPoint,
)
from .errors import SimulationError, ValidationError

logger = logging.getLogger(__name__)


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'text_color': '#202020',
    'trail_color': '#0000ff',
    'trail_edge': '#00008b',
    'ball_color': '#ff0000',
    'ball_edge': '#8b0000',
    'status_colors': {
        RunStatus.IDLE: '#008000',
        RunStatus.RUNNING: '#0000ff',
        RunStatus.LANDED: '#008000',
        RunStatus.FAILED: '#ff0000',
    },
    'font_family': 'monospace',
}


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


def _surface_axes(ax, width: float, height: float, bg_color: str):
    """Configure an Axes so data coordinates are surface pixels, y down."""
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_facecolor(bg_color)
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)


# ══════════════════════════════════════════════════════════════════════════
#  1. Grid artist
# ══════════════════════════════════════════════════════════════════════════

class GridArtist:
    """
    Draws a GridLayout and remembers exactly which artists it created, so
    the next draw removes them first. Drawing the same layout twice leaves
    one copy on screen.
    """

    def __init__(self, ax, color: str = '#000000'):
        self.ax = ax
        self.color = color
        self._artists: List = []

    def clear(self):
        for artist in self._artists:
            artist.remove()
        self._artists = []

    def draw(self, layout: GridLayout):
        self.clear()
        ax, c = self.ax, self.color
        new = []
        for seg in (layout.x_axis, layout.y_axis):
            line, = ax.plot([seg.x1, seg.x2], [seg.y1, seg.y2], color=c, linewidth=1)
            new.append(line)
        for label in (layout.x_label, layout.y_label):
            new.append(ax.text(label.px, label.py, label.text, color=c, fontsize=12,
                               va='top'))
        for mark in layout.ticks:
            seg = mark.line
            line, = ax.plot([seg.x1, seg.x2], [seg.y1, seg.y2], color=c, linewidth=1)
            new.append(line)
            lx, ly = mark.label_anchor
            new.append(ax.text(lx, ly, mark.label_text, color=c, fontsize=8, va='top'))
        self._artists = new
        return new


# ══════════════════════════════════════════════════════════════════════════
#  2. Static run snapshot
# ══════════════════════════════════════════════════════════════════════════

def plot_run(run: SimulationRun, layout: GridLayout, planet: str = DEFAULT_PLANET,
             save_path: str = None, show: bool = False) -> plt.Figure:
    """Surface view of a run: grid, emitted points, ball, readouts."""
    data = get_planet(planet)
    dpi = 100
    fig, ax = plt.subplots(figsize=(layout.width / dpi, layout.height / dpi), dpi=dpi)
    fig.subplots_adjust(0, 0, 1, 1)
    _surface_axes(ax, layout.width, layout.height, data['bg_color'])
    fig.patch.set_facecolor(data['bg_color'])

    GridArtist(ax, data['grid_color']).draw(layout)

    if run.points:
        pts = np.array([p.surface for p in run.points])
        ax.plot(pts[:, 0], pts[:, 1], 'o', color=STYLE['trail_color'],
                markeredgecolor=STYLE['trail_edge'], markersize=3)
        ax.plot(pts[-1, 0], pts[-1, 1], 'o', color=STYLE['ball_color'],
                markeredgecolor=STYLE['ball_edge'], markersize=10)

    height_s, range_s, time_s = run.summary.formatted()
    ax.text(0.98, 0.97,
            f"{run.plan.readout}\n"
            f"Max height : {height_s}\n"
            f"Range      : {range_s}\n"
            f"Flight time: {time_s}\n"
            f"Status     : {run.status.label}",
            transform=ax.transAxes, ha='right', va='top', fontsize=9,
            fontfamily=STYLE['font_family'], color=STYLE['text_color'])

    if save_path:
        fig.savefig(save_path, dpi=dpi, facecolor=data['bg_color'])
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Physical trajectory
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(summary: TrajectorySummary, save_path: str = None,
                    show: bool = False) -> plt.Figure:
    """Altitude vs downrange in meters, with launch, apex and impact marked."""
    params = summary.params
    g = summary.gravity.gravity
    t, x, y = sample_trajectory(params, g, n=300)

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.plot(x, y, color='#00a0d0', linewidth=2.5, label=summary.gravity.name or 'trajectory')
    ax.plot(0, params.initial_height, 'o', color='#00a050', markersize=10,
            label='Launch', zorder=5)
    ax.plot(summary.range, 0, 'x', color='#d03030', markersize=12,
            markeredgewidth=3, label='Impact', zorder=5)
    idx_max = int(np.argmax(y))
    ax.plot(x[idx_max], y[idx_max], '^', color='#d0a000', markersize=10,
            label='Apex', zorder=5)

    height_s, range_s, time_s = summary.formatted()
    ax.set_xlabel('Downrange (m)', fontsize=12)
    ax.set_ylabel('Altitude (m)', fontsize=12)
    ax.set_title(f'Trajectory — v₀={params.speed:g} m/s, θ={params.angle_deg:g}°, '
                 f'h₀={params.initial_height:g} m, g={g:g} m/s²\n'
                 f'H={height_s}  R={range_s}  T={time_s}',
                 fontsize=12, fontweight='bold')
    ax.legend(loc='upper right', fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.set_ylim(bottom=0)
    ax.set_xlim(left=0)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Animated run (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_run_animation(params: LaunchParameters, planet: str = DEFAULT_PLANET,
                         gravity: Optional[GravityField] = None,
                         surface=(800, 600), multiplier: float = 1.0,
                         save_path: str = 'outputs/trajectory_anim.gif',
                         max_frames: int = 200, confirm=None) -> str:
    """
    Step a headless run to completion and save the point-by-point build-up.

    `confirm` is forwarded to the stepper for extreme launch values.
    """
    from matplotlib.animation import FuncAnimation, PillowWriter

    surface = SurfaceSize(*surface)
    stepper = TrajectoryStepper(ManualScheduler(), multiplier=multiplier)
    if stepper.start(params, gravity or gravity_field(planet), surface, confirm=confirm) is None:
        raise SimulationError("extreme launch values were not confirmed")
    run = stepper.run_to_completion()
    layout = stepper.grid.current

    data = get_planet(planet)
    dpi = 100
    fig, ax = plt.subplots(figsize=(surface.width / dpi, surface.height / dpi), dpi=dpi)
    fig.subplots_adjust(0, 0, 1, 1)
    _surface_axes(ax, surface.width, surface.height, data['bg_color'])
    GridArtist(ax, data['grid_color']).draw(layout)

    trail, = ax.plot([], [], 'o', color=STYLE['trail_color'], markersize=3)
    ball, = ax.plot([], [], 'o', color=STYLE['ball_color'],
                    markeredgecolor=STYLE['ball_edge'], markersize=10)
    info = ax.text(0.98, 0.97, '', transform=ax.transAxes, ha='right', va='top',
                   fontsize=9, fontfamily=STYLE['font_family'])

    pts = np.array([p.surface for p in run.points]) if run.points else np.zeros((0, 2))
    total = len(pts)
    step = max(1, total // max_frames)
    indices = list(range(0, total, step)) or [0]
    if total and indices[-1] != total - 1:
        indices.append(total - 1)

    def animate(frame_idx):
        idx = indices[min(frame_idx, len(indices) - 1)]
        if total:
            trail.set_data(pts[:idx + 1, 0], pts[:idx + 1, 1])
            ball.set_data([pts[idx, 0]], [pts[idx, 1]])
            p = run.points[idx]
            info.set_text(f"{run.plan.readout}\nt={p.time:.2f} s  x={p.x:.2f} m  y={p.y:.2f} m")
        return trail, ball, info

    anim = FuncAnimation(fig, animate, frames=len(indices), interval=50, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=20),
              savefig_kwargs={'facecolor': data['bg_color']})
    plt.close(fig)
    logger.info("Animation saved: %s (%d frames)", save_path, len(indices))
    return save_path


# ══════════════════════════════════════════════════════════════════════════
#  5. Interactive viewer
# ══════════════════════════════════════════════════════════════════════════

class TrajectoryViewer:
    """
    Desktop front end: the canvas timer is the stepper's scheduler and
    every emitted point is drawn as it arrives.
    """

    def __init__(self, params: Optional[LaunchParameters] = None,
                 planet: str = DEFAULT_PLANET, multiplier: float = 1.0):
        self.params = params or LaunchParameters()
        self.planet = planet

        self.fig = plt.figure(figsize=(13, 7))
        self.ax = self.fig.add_axes([0.02, 0.04, 0.68, 0.92])
        self.ax_info = self.fig.add_axes([0.73, 0.70, 0.25, 0.26])
        self.ax_info.axis('off')
        self.info_text = self.ax_info.text(0.0, 1.0, '', va='top', fontsize=10,
                                           fontfamily=STYLE['font_family'])

        timer = self.fig.canvas.new_timer(interval=10)
        self.stepper = TrajectoryStepper(timer, multiplier=multiplier,
                                         surface=self._surface_size())
        self.stepper.on_point.append(self._draw_point)
        self.stepper.on_status.append(lambda _status: self._refresh_info())
        self.stepper.on_plan.append(lambda _plan, layout: self._draw_grid(layout))

        data = get_planet(planet)
        self.grid_artist = GridArtist(self.ax, data['grid_color'])
        self._trail = []
        (self.ball,) = self.ax.plot([], [], 'o', color=STYLE['ball_color'],
                                    markeredgecolor=STYLE['ball_edge'], markersize=10)

        self._build_widgets(multiplier)
        self._apply_planet_style()
        self.fig.canvas.mpl_connect('resize_event', self._on_resize)
        self._refresh_info()

    def _surface_size(self) -> SurfaceSize:
        bbox = self.ax.get_window_extent()
        return SurfaceSize(float(bbox.width), float(bbox.height))

    def _build_widgets(self, multiplier: float):
        ax_v = self.fig.add_axes([0.78, 0.60, 0.18, 0.03])
        self.sl_speed = Slider(ax_v, 'v0 (m/s)', 1.0, 200.0, valinit=self.params.speed)
        ax_a = self.fig.add_axes([0.78, 0.55, 0.18, 0.03])
        self.sl_angle = Slider(ax_a, 'angle (°)', 0.0, 90.0, valinit=self.params.angle_deg)
        ax_h = self.fig.add_axes([0.78, 0.50, 0.18, 0.03])
        self.sl_height = Slider(ax_h, 'h0 (m)', 0.0, 100.0,
                                valinit=self.params.initial_height)
        ax_m = self.fig.add_axes([0.78, 0.45, 0.18, 0.03])
        self.sl_mult = Slider(ax_m, 'speed', 0.1, 5.0, valinit=multiplier)
        self.sl_mult.valtext.set_text(format_speed_multiplier(multiplier))
        self.sl_mult.on_changed(self._on_multiplier)

        ax_planet = self.fig.add_axes([0.78, 0.16, 0.18, 0.26])
        keys = list(ALL_PLANETS)
        self.rb_planet = RadioButtons(ax_planet, [ALL_PLANETS[k]['name'] for k in keys],
                                      active=keys.index(self.planet))
        self.rb_planet.on_clicked(self._on_planet)

        ax_sim = self.fig.add_axes([0.74, 0.06, 0.11, 0.06])
        self.btn_sim = Button(ax_sim, 'Simulate')
        self.btn_sim.on_clicked(self._on_simulate)
        ax_reset = self.fig.add_axes([0.86, 0.06, 0.11, 0.06])
        self.btn_reset = Button(ax_reset, 'Reset')
        self.btn_reset.on_clicked(self._on_reset)

    # ── Drawing ───────────────────────────────────────────────────────────
    def _apply_planet_style(self):
        data = get_planet(self.planet)
        size = self._surface_size()
        _surface_axes(self.ax, size.width, size.height, data['bg_color'])
        self.grid_artist.color = data['grid_color']
        layout = self.stepper.grid.current
        if layout is not None:
            self._draw_grid(layout)

    def _draw_grid(self, layout: GridLayout):
        _surface_axes(self.ax, layout.width, layout.height,
                      get_planet(self.planet)['bg_color'])
        self.grid_artist.draw(layout)
        self.fig.canvas.draw_idle()

    def _draw_point(self, point: TrajectoryPoint):
        dot, = self.ax.plot(point.px, point.py, 'o', color=STYLE['trail_color'],
                            markeredgecolor=STYLE['trail_edge'], markersize=3)
        self._trail.append(dot)
        self.ball.set_data([point.px], [point.py])
        self.fig.canvas.draw_idle()

    def _clear_trail(self):
        for dot in self._trail:
            dot.remove()
        self._trail = []
        self.ball.set_data([], [])

    def _refresh_info(self):
        status = self.stepper.status
        summary = self.stepper.summary
        if summary is not None:
            height_s, range_s, time_s = summary.formatted()
            readout = self.stepper.plan.readout
        else:
            height_s = range_s = time_s = '---'
            readout = ''
        self.info_text.set_text(
            f"Max height : {height_s}\n"
            f"Range      : {range_s}\n"
            f"Flight time: {time_s}\n"
            f"{readout}\n"
            f"Status     : {status.label}")
        self.info_text.set_color(STYLE['status_colors'][status])
        self.fig.canvas.draw_idle()

    # ── Event handlers ────────────────────────────────────────────────────
    def _on_simulate(self, _event):
        self.params = LaunchParameters(speed=self.sl_speed.val,
                                       angle_deg=self.sl_angle.val,
                                       initial_height=self.sl_height.val)
        self._clear_trail()
        try:
            run = self.stepper.start(self.params, gravity_field(self.planet),
                                     self._surface_size())
        except ValidationError as exc:
            logger.warning("Invalid launch parameters: %s", exc)
            self.info_text.set_text(f"Invalid input:\n{exc}")
            self.fig.canvas.draw_idle()
            return
        if run is None:
            self.info_text.set_text("Extreme values:\nlaunch not confirmed")
            self.fig.canvas.draw_idle()

    def _on_reset(self, _event):
        self._clear_trail()
        self.stepper.reset()
        if self.stepper.grid.current is not None:
            self._draw_grid(self.stepper.grid.current)
        self._refresh_info()

    def _on_multiplier(self, value):
        self.sl_mult.valtext.set_text(format_speed_multiplier(value))
        self.stepper.set_speed_multiplier(value)

    def _on_planet(self, label):
        self.planet = next(k for k, d in ALL_PLANETS.items() if d['name'] == label)
        restart = self.stepper.is_ticking
        if restart:
            self._clear_trail()
        self._apply_planet_style()
        self.stepper.on_gravity_change(gravity_field(self.planet))

    def _on_resize(self, _event):
        self.stepper.on_resize(self._surface_size())
        self._draw_grid(self.stepper.grid.current)


def launch_viewer(params: Optional[LaunchParameters] = None,
                  planet: str = DEFAULT_PLANET, multiplier: float = 1.0):
    """Open the interactive viewer (blocks until the window closes)."""
    viewer = TrajectoryViewer(params, planet, multiplier)
    plt.show()
    return viewer
