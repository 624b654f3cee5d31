"""
Unit Tests for the Kinematics Model
===================================
Closed-form flight figures, input validation and the gravity table.
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajectory_sim.errors import ValidationError, ExtremeValueWarning
from trajectory_sim.kinematics import (
    LaunchParameters, validate_launch, extreme_value_warnings,
    position, flight_time, max_height, horizontal_range,
    compute_summary, sample_trajectory,
)
from trajectory_sim.planets import GravityField, ALL_PLANETS, get_planet, gravity_field


EARTH = 9.81
MOON = 1.62

LAUNCHES = [
    (20.0, 45.0, 0.0, EARTH),
    (5.0, 30.0, 2.0, MOON),
    (15.0, 60.0, 10.0, EARTH),
    (8.0, 0.0, 50.0, EARTH),
    (30.0, 90.0, 0.0, 3.72),
    (400.0, 10.0, 1200.0, 24.79),
    (0.5, 75.0, 0.01, 8.87),
]


class TestClosedForm:
    """Verify flight time, apex and range against known values."""

    def test_reference_launch(self):
        p = LaunchParameters(speed=20.0, angle_deg=45.0, initial_height=0.0)
        assert abs(flight_time(p, EARTH) - 2.883) < 0.005
        assert abs(max_height(p, EARTH) - 10.194) < 0.005
        assert abs(horizontal_range(p, EARTH) - 40.775) < 0.005

    def test_range_equals_v_squared_over_g_at_45(self):
        p = LaunchParameters(speed=20.0, angle_deg=45.0)
        assert horizontal_range(p, EARTH) == pytest.approx(400.0 / EARTH)

    def test_low_gravity_flies_longer_higher_farther(self):
        p = LaunchParameters(speed=5.0, angle_deg=30.0, initial_height=2.0)
        moon = compute_summary(p, GravityField(MOON))
        earth = compute_summary(p, GravityField(EARTH))
        assert moon.flight_time > earth.flight_time
        assert moon.max_height > earth.max_height
        assert moon.range > earth.range
        assert moon.flight_time == pytest.approx(3.7456, abs=1e-3)
        assert earth.flight_time == pytest.approx(0.9424, abs=1e-3)

    @pytest.mark.parametrize("speed,angle,height,g", LAUNCHES)
    def test_lands_at_flight_time(self, speed, angle, height, g):
        p = LaunchParameters(speed, angle, height)
        T = flight_time(p, g)
        _, y = position(p, g, T)
        scale = max(1.0, max_height(p, g))
        assert abs(y) < 1e-9 * scale

    @pytest.mark.parametrize("speed,angle,height,g", LAUNCHES)
    def test_above_ground_during_flight(self, speed, angle, height, g):
        p = LaunchParameters(speed, angle, height)
        T = flight_time(p, g)
        t = np.linspace(0.0, T, 101)[1:-1]
        _, y = position(p, g, t)
        assert np.all(y > 0)

    @pytest.mark.parametrize("speed,angle,height,g", LAUNCHES)
    def test_apex_and_range_bounds(self, speed, angle, height, g):
        p = LaunchParameters(speed, angle, height)
        assert max_height(p, g) >= height
        assert horizontal_range(p, g) >= 0

    def test_horizontal_throw_apex_is_launch_height(self):
        p = LaunchParameters(speed=8.0, angle_deg=0.0, initial_height=50.0)
        assert max_height(p, EARTH) == 50.0
        assert flight_time(p, EARTH) == pytest.approx(np.sqrt(2 * 50.0 / EARTH))

    def test_vertical_throw_has_no_range(self):
        p = LaunchParameters(speed=30.0, angle_deg=90.0)
        assert horizontal_range(p, EARTH) == pytest.approx(0.0, abs=1e-9)

    def test_non_positive_gravity_gives_nan(self):
        p = LaunchParameters()
        assert np.isnan(flight_time(p, 0.0))
        assert np.isnan(max_height(p, -1.0))

    def test_position_vectorized(self):
        p = LaunchParameters(speed=10.0, angle_deg=30.0)
        t = np.array([0.0, 0.5, 1.0])
        x, y = position(p, EARTH, t)
        assert x.shape == (3,)
        assert x[0] == 0.0 and y[0] == 0.0
        assert x[2] == pytest.approx(10.0 * np.cos(np.radians(30.0)))

    def test_sample_trajectory_ends_on_ground(self):
        p = LaunchParameters(speed=15.0, angle_deg=60.0, initial_height=10.0)
        t, x, y = sample_trajectory(p, EARTH, n=50)
        assert len(t) == 50
        assert y[-1] == pytest.approx(0.0, abs=1e-9)
        assert np.all(y >= 0)
        assert x[-1] == pytest.approx(horizontal_range(p, EARTH))


class TestSummary:

    def test_formatted_strings(self):
        s = compute_summary(LaunchParameters(20.0, 45.0, 0.0), GravityField(EARTH))
        assert s.formatted() == ("10.19 m", "40.77 m", "2.88 s")

    def test_summary_box_mentions_body(self):
        s = compute_summary(LaunchParameters(), gravity_field('mars'))
        text = s.summary()
        assert 'Mars' in text
        assert 'Flight time' in text


class TestValidation:
    """Launch contract: speed > 0, 0 ≤ angle ≤ 90, height ≥ 0."""

    @pytest.mark.parametrize("kwargs,field", [
        (dict(speed=0.0), 'speed'),
        (dict(speed=-3.0), 'speed'),
        (dict(angle_deg=-1.0), 'angle_deg'),
        (dict(angle_deg=90.5), 'angle_deg'),
        (dict(initial_height=-0.1), 'initial_height'),
        (dict(speed=float('nan')), 'speed'),
        (dict(initial_height=float('inf')), 'initial_height'),
        (dict(speed='fast'), 'speed'),
    ])
    def test_rejects_bad_input(self, kwargs, field):
        with pytest.raises(ValidationError) as info:
            validate_launch(LaunchParameters(**kwargs))
        assert info.value.field == field

    def test_accepts_edges(self):
        validate_launch(LaunchParameters(speed=0.01, angle_deg=0.0, initial_height=0.0))
        validate_launch(LaunchParameters(speed=1.0, angle_deg=90.0))

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_launch(LaunchParameters(speed=0.0))

    def test_extreme_values_are_warnings(self):
        found = extreme_value_warnings(LaunchParameters(speed=1500.0, initial_height=2000.0))
        assert [w.field for w in found] == ['speed', 'initial_height']
        assert all(isinstance(w, ExtremeValueWarning) for w in found)

    def test_ordinary_values_have_no_warnings(self):
        assert extreme_value_warnings(LaunchParameters(speed=1000.0, initial_height=1000.0)) == []


class TestGravityTable:

    def test_all_planets_have_positive_gravity(self):
        for key in ALL_PLANETS:
            assert gravity_field(key).gravity > 0

    def test_lookup_is_case_insensitive(self):
        assert get_planet('Moon')['gravity'] == 1.62

    def test_unknown_planet(self):
        with pytest.raises(ValidationError):
            get_planet('pluto')

    @pytest.mark.parametrize("g", [0.0, -9.81, float('nan'), float('inf'), None])
    def test_gravity_must_be_positive_finite(self, g):
        with pytest.raises(ValidationError):
            GravityField(g)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
