"""
Test Suite: Orbit Math
======================
Unit tests for the kinematic circular-orbit functions.

Tests:
- Distance from the orbit centre equals the radius
- Central body (zero radius) stays at the origin
- Quarter-period and direction of travel
- Angle wrapping for long sessions
- Orbit path polyline
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orrery.physics import (
    TWO_PI,
    wrap_angle,
    orbit_angle,
    orbit_position,
    orbit_offset,
    circular_orbit_path,
    orbital_period
)


class TestOrbitPosition:
    """Tests for orbit_position"""

    def test_distance_equals_radius(self):
        """Any orbit point lies exactly `radius` from the centre"""
        rng = np.random.default_rng(7)
        for _ in range(200):
            radius = rng.uniform(0.1, 60000.0)
            speed = rng.uniform(-2.0, 2.0)
            phase = rng.uniform(-10.0, 10.0)
            time = rng.uniform(0.0, 10000.0)

            x, z = orbit_position(radius, speed, phase, time)
            assert np.hypot(x, z) == pytest.approx(radius, rel=1e-9)

    @pytest.mark.parametrize("speed,phase,time", [
        (0.0, 0.0, 0.0),
        (1.0, 2.5, 17.3),
        (-0.3, -1.0, 1e6),
    ])
    def test_zero_radius_stays_at_origin(self, speed, phase, time):
        """The central body never moves"""
        assert orbit_position(0.0, speed, phase, time) == (0.0, 0.0)

    def test_start_position_uses_phase(self):
        """At time 0 the angle is the initial phase"""
        x, z = orbit_position(100.0, 1.0, np.pi / 2, 0.0)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert z == pytest.approx(100.0)

    def test_quarter_period(self):
        """Speed 1 covers a quarter orbit in 0.25 time units"""
        x, z = orbit_position(100.0, 1.0, 0.0, 0.25)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert z == pytest.approx(100.0)

    def test_negative_speed_reverses_direction(self):
        """Signed speed: negative orbits the other way"""
        _, z_forward = orbit_position(50.0, 1.0, 0.0, 0.1)
        _, z_backward = orbit_position(50.0, -1.0, 0.0, 0.1)
        assert z_forward > 0
        assert z_backward == pytest.approx(-z_forward)

    def test_wrapped_matches_unwrapped(self):
        """Dropping whole revolutions does not move the body"""
        for time in (0.0, 0.37, 12.5, 1234.567):
            plain = orbit_position(16000.0, 0.005, 5.1, time, wrap=False)
            wrapped = orbit_position(16000.0, 0.005, 5.1, time, wrap=True)
            np.testing.assert_allclose(wrapped, plain, atol=1e-6)

    def test_deterministic(self):
        """Same inputs give the same output"""
        assert orbit_position(3.0, 0.2, 1.0, 9.0) == orbit_position(3.0, 0.2, 1.0, 9.0)


class TestOrbitAngle:
    """Tests for angle helpers"""

    def test_angle_formula(self):
        """angle = time * speed * 2pi + phase"""
        assert orbit_angle(0.5, 0.3, 2.0) == pytest.approx(2.0 * 0.5 * TWO_PI + 0.3)

    def test_wrapped_angle_in_range(self):
        """Wrapped angles stay in [0, 2pi)"""
        for time in (0.0, 1.0, 99.99, 1e7):
            angle = orbit_angle(3.7, 4.0, time, wrap=True)
            assert 0.0 <= angle < TWO_PI

    def test_wrap_angle(self):
        assert wrap_angle(TWO_PI + 1.0) == pytest.approx(1.0)
        assert wrap_angle(-1.0) == pytest.approx(TWO_PI - 1.0)


class TestOrbitOffset:
    """Tests for the 3D offset and path helpers"""

    def test_offset_lies_in_orbital_plane(self):
        offset = orbit_offset(100.0, 1.0, 0.0, 0.1)
        assert offset.shape == (3,)
        assert offset[1] == 0.0

    def test_orbit_path_is_closed_circle(self):
        path = circular_orbit_path(250.0, segments=64)
        assert path.shape == (65, 3)
        np.testing.assert_allclose(path[0], path[-1], atol=1e-9)
        np.testing.assert_allclose(np.linalg.norm(path, axis=1), 250.0)
        assert np.all(path[:, 1] == 0.0)

    def test_orbital_period(self):
        assert orbital_period(0.25) == pytest.approx(4.0)
        assert orbital_period(-2.0) == pytest.approx(0.5)
        assert orbital_period(0.0) == float('inf')


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
