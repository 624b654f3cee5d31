"""
Unit Tests for the Coordinate Grid Builder
==========================================
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajectory_sim.grid import CoordinateGridBuilder, build_grid
from trajectory_sim.scaling import ScalePlan, plan_scale
from trajectory_sim.stepper import SurfaceSize


def make_plan(scale, pixel_step, unit='m', factor=1.0, threshold=1.0,
              width=800.0, height=600.0):
    return ScalePlan(
        pixels_per_meter=scale, display_unit=unit, unit_factor=factor,
        rounding_threshold=threshold, meter_step=pixel_step / scale,
        pixel_step=pixel_step, readout_unit='m', readout_value=1.0 / scale,
        surface_width=width, surface_height=height,
    )


class TestAxes:

    def test_axes_only_without_plan(self):
        layout = build_grid(800, 600, None)
        assert layout.ticks == ()
        assert (layout.x_axis.y1, layout.x_axis.x2) == (580.0, 800)
        assert (layout.y_axis.x1, layout.y_axis.y2) == (20.0, 600)
        assert layout.x_label.text == "x [m]"
        assert layout.y_label.text == "y [m]"

    def test_axis_label_positions(self):
        layout = build_grid(800, 600, None)
        assert (layout.x_label.px, layout.x_label.py) == (770.0, 560.0)
        assert (layout.y_label.px, layout.y_label.py) == (35.0, 5.0)


class TestTicks:

    def test_x_ticks_every_pixel_step(self):
        layout = build_grid(800, 600, make_plan(10.0, 100.0))
        assert [m.pixel_position for m in layout.x_ticks] == [
            120.0, 220.0, 320.0, 420.0, 520.0, 620.0, 720.0]
        assert layout.tick_labels('x') == (
            "10.0 m", "20.0 m", "30.0 m", "40.0 m", "50.0 m", "60.0 m", "70.0 m")

    def test_y_ticks_walk_up_from_ground(self):
        layout = build_grid(800, 600, make_plan(10.0, 100.0))
        assert [m.pixel_position for m in layout.y_ticks] == [480.0, 380.0, 280.0, 180.0, 80.0]
        assert layout.tick_labels('y')[0] == "10.0 m"
        assert layout.tick_labels('y')[-1] == "50.0 m"

    def test_tick_geometry(self):
        layout = build_grid(800, 600, make_plan(10.0, 100.0))
        first_x = layout.x_ticks[0]
        assert (first_x.line.y1, first_x.line.y2) == (575.0, 585.0)
        assert first_x.label_anchor == (100.0, 585.0)
        first_y = layout.y_ticks[0]
        assert (first_y.line.x1, first_y.line.x2) == (15.0, 25.0)
        assert first_y.label_anchor == (35.0, 473.0)

    def test_ticks_stay_on_surface(self):
        plan = plan_scale(40.7747, 10.19368, 800, 600)
        layout = build_grid(800, 600, plan)
        assert layout.x_ticks
        assert all(0 < m.pixel_position < 800 for m in layout.x_ticks)
        assert all(0 < m.pixel_position < 600 for m in layout.y_ticks)

    def test_very_large_values_upgrade_axis_to_km(self):
        layout = build_grid(800, 600, make_plan(0.015625, 156.25))
        assert layout.tick_labels('x')[0] == "10.0 km"
        assert layout.x_label.text == "x [km]"

    def test_thousands_written_in_km_but_axis_keeps_metres(self):
        layout = build_grid(800, 600, make_plan(0.125, 125.0))
        assert layout.tick_labels('x') == (
            "1.0 km", "2.0 km", "3.0 km", "4.0 km", "5.0 km", "6.0 km")
        assert layout.x_label.text == "x [m]"

    def test_tall_metre_axis_below_ten_km(self):
        # steep shot on a tall narrow surface: y ticks run past 1000 m only
        plan = plan_scale(1.0, 1100.0, 400, 2000)
        layout = build_grid(400, 2000, plan)
        assert plan.display_unit == 'm'
        assert layout.tick_labels('y')[-1].endswith('km')
        assert all(m.meters < 10000 for m in layout.y_ticks)
        assert layout.y_label.text == "y [m]"

    def test_small_values_keep_metres(self):
        layout = build_grid(800, 600, make_plan(10.0, 100.0))
        assert layout.x_label.text == "x [m]"
        assert layout.y_label.text == "y [m]"

    def test_bad_pixel_step_gives_no_ticks(self):
        layout = build_grid(800, 600, make_plan(10.0, float('nan')))
        assert layout.ticks == ()


class TestBuilder:

    def test_rebuild_is_idempotent(self):
        builder = CoordinateGridBuilder()
        plan = plan_scale(40.7747, 10.19368, 800, 600)
        first = builder.rebuild(SurfaceSize(800, 600), plan)
        second = builder.rebuild(SurfaceSize(800, 600), plan)
        assert first == second
        assert builder.current is second

    def test_rebuild_replaces_previous_layout(self):
        builder = CoordinateGridBuilder()
        builder.rebuild(SurfaceSize(800, 600), make_plan(10.0, 100.0))
        layout = builder.rebuild(SurfaceSize(800, 600), None)
        assert builder.current is layout
        assert layout.ticks == ()


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
