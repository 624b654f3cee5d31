#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  PROJECTILE TRAJECTORY SIMULATOR — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the simulation pipeline for one launch:
    1. Input validation (with confirmation for extreme values)
    2. Closed-form summary (max height, range, flight time)
    3. Scale plan and coordinate grid for the drawing surface
    4. Headless tick-by-tick run
    5. Validation against reference launches
    6. Static trajectory plots
    7. Animated run GIF

  All outputs saved to outputs/ directory.

  Usage:
    python main.py                                  # Earth, 20 m/s @ 45°
    python main.py --speed 5 --angle 30 --height 2 --planet moon
    python main.py --quick                          # skip animation
    python main.py --interactive                    # open the viewer
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import os
import sys
import time

import matplotlib

from trajectory_sim.errors import ValidationError
from trajectory_sim.kinematics import LaunchParameters, validate_launch
from trajectory_sim.logging_config import setup_logging
from trajectory_sim.planets import ALL_PLANETS, DEFAULT_PLANET, GravityField, gravity_field
from trajectory_sim.scaling import format_speed_multiplier
from trajectory_sim.stepper import TrajectoryStepper, ManualScheduler, SurfaceSize
from trajectory_sim.validation import validate_against_reference


def banner():
    print("""
╔═══════════════════════════════════════════════════════════════════════╗
║                                                                       ║
║     PROJECTILE TRAJECTORY SIMULATOR                                   ║
║     ─────────────────────────────────────────────────────             ║
║     Constant gravity · Earth · Moon · Mars · Venus · Jupiter ·        ║
║     Mercury │ Adaptive scale and units (mm … Mm, μs … h)              ║
║                                                                       ║
╚═══════════════════════════════════════════════════════════════════════╝
""")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Projectile trajectory simulator.")
    parser.add_argument('--speed', type=float, default=20.0, help="launch speed (m/s)")
    parser.add_argument('--angle', type=float, default=45.0, help="launch angle (degrees)")
    parser.add_argument('--height', type=float, default=0.0, help="initial height (m)")
    parser.add_argument('--planet', default=DEFAULT_PLANET, choices=sorted(ALL_PLANETS),
                        help="body providing gravity")
    parser.add_argument('--gravity', type=float, default=None,
                        help="custom gravity (m/s²), overrides --planet")
    parser.add_argument('--multiplier', type=float, default=1.0,
                        help="animation speed multiplier")
    parser.add_argument('--width', type=float, default=800.0, help="surface width (px)")
    parser.add_argument('--height-px', type=float, default=600.0, help="surface height (px)")
    parser.add_argument('--out', default='outputs', help="output directory")
    parser.add_argument('--quick', action='store_true', help="skip the GIF animation")
    parser.add_argument('--yes', action='store_true',
                        help="accept extreme input values without asking")
    parser.add_argument('--interactive', action='store_true',
                        help="open the interactive viewer instead")
    parser.add_argument('--verbose', action='store_true', help="debug logging")
    parser.add_argument('--log-file', default=None, help="also write the log to this file")
    return parser.parse_args(argv)


def confirm_extreme(warnings_found, assume_yes: bool) -> bool:
    for w in warnings_found:
        print(f"  ⚠ {w}")
    if assume_yes:
        return True
    try:
        answer = input("  Continue? [y/N] ").strip().lower()
    except EOFError:
        return False
    return answer in ('y', 'yes')


def main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    start_time = time.time()

    if not args.interactive:
        matplotlib.use('Agg')
    import matplotlib.pyplot as plt
    from trajectory_sim.visualization import (
        ensure_output_dir, plot_run, plot_trajectory, create_run_animation, launch_viewer,
    )

    params = LaunchParameters(speed=args.speed, angle_deg=args.angle,
                              initial_height=args.height)
    try:
        validate_launch(params)
        gravity = (GravityField(args.gravity, name='Custom') if args.gravity is not None
                   else gravity_field(args.planet))
    except ValidationError as exc:
        print(f"  ✗ Invalid input: {exc}")
        return 2

    if args.interactive:
        launch_viewer(params, args.planet, args.multiplier)
        return 0

    banner()
    out = ensure_output_dir(args.out)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Input Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Launch Parameters")
    print(f"  Speed {params.speed:g} m/s | Angle {params.angle_deg:g}° | "
          f"Height {params.initial_height:g} m | {gravity.name} g={gravity.gravity:g} m/s²")
    print(f"  Surface {args.width:g}x{args.height_px:g} px | "
          f"Animation speed {format_speed_multiplier(args.multiplier)}")

    stepper = TrajectoryStepper(ManualScheduler(), multiplier=args.multiplier)
    run = stepper.start(params, gravity, SurfaceSize(args.width, args.height_px),
                        confirm=lambda found: confirm_extreme(found, args.yes))
    if run is None:
        print("  Cancelled.")
        return 1

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Closed-form Summary
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Trajectory Summary")
    print(run.summary.summary())

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Scale Plan & Grid
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Scale Plan & Coordinate Grid")
    plan = run.plan
    layout = stepper.grid.current
    print(f"  {plan.readout}{'  (default, degenerate trajectory)' if plan.degenerate else ''}")
    print(f"  Tick step: {plan.meter_step:g} m = {plan.pixel_step:.1f} px "
          f"({plan.display_unit}, rounding {plan.rounding_threshold:g})")
    print(f"  {layout.x_label.text}: {', '.join(layout.tick_labels('x'))}")
    print(f"  {layout.y_label.text}: {', '.join(layout.tick_labels('y'))}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Tick-by-tick Run
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Stepped Run")
    run = stepper.run_to_completion()
    print(f"  Status: {run.status.label} after {len(run.points)} points "
          f"(Δt = {run.time_step:g} s, interval {stepper.scheduler.interval:g} ms)")
    if run.points:
        last = run.points[-1]
        print(f"  Last point: t={last.time:.2f} s  x={last.x:.2f} m  y={last.y:.2f} m")
    if run.error:
        print(f"  ✗ {run.error}")

    fig_run = plot_run(run, layout, planet=args.planet, save_path=f'{out}/01_surface_view.png')
    plt.close(fig_run)
    print(f"\n  ✓ Saved: {out}/01_surface_view.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Validation — Reference Launches")
    validate_against_reference(verbose=True)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Trajectory Plot
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Trajectory Plot")
    fig_traj = plot_trajectory(run.summary, save_path=f'{out}/02_trajectory.png')
    plt.close(fig_traj)
    print(f"  ✓ Saved: {out}/02_trajectory.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Animation
    # ══════════════════════════════════════════════════════════════════════
    if not args.quick:
        section("PHASE 7: Run Animation (GIF)")
        create_run_animation(params, planet=args.planet, gravity=gravity,
                             surface=(args.width, args.height_px),
                             multiplier=args.multiplier,
                             save_path=f'{out}/03_run_animation.gif',
                             confirm=lambda found: True)
        print(f"  ✓ Saved: {out}/03_run_animation.gif")
    else:
        section("PHASE 7: Animation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"""
  All outputs saved to: {os.path.abspath(out)}/
  Total runtime: {elapsed:.1f} seconds
""")
    return 0


if __name__ == "__main__":
    sys.exit(main())
