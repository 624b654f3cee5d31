"""
Unit Tests for the Scale Planner
================================
Pixel scale, degenerate fallback, unit ladders and tick label tiers.
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajectory_sim.config import SimulationConfig
from trajectory_sim.errors import DegenerateScaleError
from trajectory_sim.scaling import (
    compute_scale, plan_scale, readout_unit, format_scale_readout,
    axis_units, tick_spacing, format_tick_label,
    format_length, format_duration, format_speed_multiplier,
)


class TestSummaryFormatting:
    """Independent unit ladders for length and time."""

    @pytest.mark.parametrize("meters,expected", [
        (0.0005, "0.5 mm"),
        (0.0009, "0.9 mm"),
        (0.001, "0.10 cm"),
        (0.05, "5.00 cm"),
        (0.1, "0.10 m"),
        (40.7747, "40.77 m"),
        (999.0, "999.00 m"),
        (1000.0, "1.0 km"),
        (2500.0, "2.5 km"),
        (2e6, "2.0 Mm"),
    ])
    def test_length_ladder(self, meters, expected):
        assert format_length(meters) == expected

    @pytest.mark.parametrize("seconds,expected", [
        (0.0005, "500.0 μs"),
        (0.05, "50.00 ms"),
        (0.1, "0.10 s"),
        (45.0, "45.00 s"),
        (60.0, "1.0 min"),
        (120.0, "2.0 min"),
        (3600.0, "1.0 h"),
        (7200.0, "2.0 h"),
    ])
    def test_time_ladder(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_ladders_are_independent(self):
        # height in cm, range in km, time in min at the same moment
        assert format_length(0.05).endswith('cm')
        assert format_length(5000.0).endswith('km')
        assert format_duration(90.0).endswith('min')

    def test_undefined_values_show_placeholder(self):
        assert format_length(float('nan')) == '---'
        assert format_duration(float('inf')) == '---'
        assert format_length(None) == '---'

    def test_speed_multiplier_text(self):
        assert format_speed_multiplier(1.0) == "1.0x"
        assert format_speed_multiplier(2.5) == "2.5x"


class TestScale:

    def test_fits_smaller_axis_with_margin(self):
        scale = compute_scale(40.7747, 10.19368, 800, 600)
        expected = min(760 / 40.7747, 560 / 10.19368) * 0.9
        assert scale == pytest.approx(expected)
        # landing point stays inside the usable width
        assert 20 + 40.7747 * scale < 800 - 20

    def test_tall_trajectory_limited_by_height(self):
        scale = compute_scale(10.0, 500.0, 800, 600)
        assert scale == pytest.approx(560 / 500.0 * 0.9)

    @pytest.mark.parametrize("max_range,max_h", [
        (0.0, 10.0), (10.0, 0.0), (0.0, 0.0),
        (float('nan'), 5.0), (5.0, float('inf')), (-1.0, 5.0),
    ])
    def test_degenerate_extent_raises(self, max_range, max_h):
        with pytest.raises(DegenerateScaleError):
            compute_scale(max_range, max_h, 800, 600)

    def test_surface_too_small_raises(self):
        with pytest.raises(DegenerateScaleError):
            compute_scale(10.0, 10.0, 40, 600)

    def test_plan_falls_back_to_default(self):
        plan = plan_scale(0.0, 0.0, 800, 600)
        assert plan.pixels_per_meter == 1.0
        assert plan.degenerate
        assert np.isfinite(plan.pixel_step) and plan.pixel_step > 0

    def test_plan_uses_configured_default(self):
        plan = plan_scale(float('nan'), 1.0, 800, 600, SimulationConfig(default_scale=2.0))
        assert plan.pixels_per_meter == 2.0

    def test_scale_positive_and_finite_over_wide_range(self):
        for max_range in [1e-6, 1e-3, 0.5, 40.0, 1e4, 1e8]:
            for max_h in [1e-6, 0.2, 10.0, 1e5, 1e9]:
                for w, h in [(41, 41), (800, 600), (3840, 2160)]:
                    scale = compute_scale(max_range, max_h, w, h)
                    assert np.isfinite(scale) and scale > 0

    def test_to_surface_maps_origin_to_margin_corner(self):
        plan = plan_scale(40.0, 10.0, 800, 600)
        assert plan.to_surface(0.0, 0.0) == (20.0, 580.0)
        px, py = plan.to_surface(10.0, 5.0)
        assert px == pytest.approx(20 + 10 * plan.pixels_per_meter)
        assert py == pytest.approx(580 - 5 * plan.pixels_per_meter)


class TestReadout:

    def test_kilometres_when_pixel_covers_over_1000m(self):
        unit, value = readout_unit(0.0005)
        assert unit == 'km'
        assert value == pytest.approx(2.0)

    def test_centimetres_when_pixel_under_10cm(self):
        unit, value = readout_unit(20.0)
        assert unit == 'cm'
        assert value == pytest.approx(5.0)

    def test_metres_otherwise(self):
        assert format_scale_readout(1.0) == "Scale: 1 px = 1.00 m"
        assert format_scale_readout(4.0) == "Scale: 1 px = 0.25 m"

    def test_plan_readout_matches_helper(self):
        plan = plan_scale(40.7747, 10.19368, 800, 600)
        assert plan.readout == format_scale_readout(plan.pixels_per_meter)


class TestAxisUnits:

    def test_km_for_wide_spans(self):
        assert axis_units(800, 0.5) == ('km', 0.001, 0.1)

    def test_cm_for_tiny_spans(self):
        assert axis_units(800, 10000.0) == ('cm', 100.0, 1.0)

    def test_m_otherwise(self):
        assert axis_units(800, 1.0) == ('m', 1.0, 1.0)

    def test_eight_ticks_across_width(self):
        meter_step, pixel_step = tick_spacing(800, 10.0, 1.0)
        assert meter_step == 10.0
        assert pixel_step == pytest.approx(100.0)

    def test_step_never_below_threshold(self):
        meter_step, _ = tick_spacing(800, 1000.0, 1.0)
        assert meter_step == 1.0

    def test_km_threshold_step(self):
        meter_step, pixel_step = tick_spacing(800, 0.01, 0.1)
        assert meter_step == pytest.approx(10000.0)
        assert pixel_step == pytest.approx(100.0)


class TestTickLabels:
    """Four-tier tick label format."""

    @pytest.mark.parametrize("meters,factor,unit,text,axis_unit", [
        (5.0, 1.0, 'm', "5.00 m", 'm'),
        (50.0, 1.0, 'm', "50.0 m", 'm'),
        (150.0, 1.0, 'm', "150 m", 'm'),
        (1500.0, 1.0, 'm', "1.5 km", 'm'),
        (9999.0, 1.0, 'm', "10.0 km", 'm'),
        (10000.0, 1.0, 'm', "10.0 km", 'km'),
        (25000.0, 1.0, 'm', "25.0 km", 'km'),
        (0.05, 100.0, 'cm', "5.00 cm", 'cm'),
        (0.5, 100.0, 'cm', "50.0 cm", 'cm'),
        (5000.0, 0.001, 'km', "5.00 km", 'km'),
        (250000.0, 0.001, 'km', "250 km", 'km'),
    ])
    def test_tiers(self, meters, factor, unit, text, axis_unit):
        assert format_tick_label(meters, factor, unit) == (text, axis_unit)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
