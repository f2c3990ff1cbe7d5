"""
Orbit Math
==========
Kinematic circular orbits in the XZ plane.

    angle = time * angular_speed * 2*pi + initial_phase
    x     = radius * cos(angle)
    z     = radius * sin(angle)
    y     = 0   (orbital plane)

angular_speed is measured in revolutions per simulation-time unit, so a
body with speed 1 completes one orbit every 1.0 time units. There is no
gravitation here: positions are a pure function of time.
"""

import numpy as np
from typing import Tuple

TWO_PI = 2.0 * np.pi

# Segments used for the drawn orbit path
ORBIT_PATH_SEGMENTS = 128


def wrap_angle(angle: float) -> float:
    """Wrap an angle into [0, 2*pi)."""
    return float(np.mod(angle, TWO_PI))


def orbit_angle(angular_speed: float,
                initial_phase: float,
                time: float,
                wrap: bool = False) -> float:
    """
    Angle of a body on its orbit at a given simulation time.

    With wrap=True the whole revolutions are dropped before scaling by
    2*pi, which keeps the angle small during long sessions.
    """
    cycles = time * angular_speed
    if wrap:
        cycles = cycles % 1.0
        return wrap_angle(cycles * TWO_PI + initial_phase)
    return cycles * TWO_PI + initial_phase


def orbit_position(radius: float,
                   angular_speed: float,
                   initial_phase: float,
                   time: float,
                   wrap: bool = False) -> Tuple[float, float]:
    """
    Position (x, z) on a circular orbit centred on the origin.

    A zero radius (the central body) always sits at (0, 0).
    """
    if radius == 0:
        return 0.0, 0.0

    angle = orbit_angle(angular_speed, initial_phase, time, wrap)
    return float(radius * np.cos(angle)), float(radius * np.sin(angle))


def orbit_offset(radius: float,
                 angular_speed: float,
                 initial_phase: float,
                 time: float,
                 wrap: bool = False) -> np.ndarray:
    """Orbit position as a 3-vector with y fixed at the orbital plane."""
    x, z = orbit_position(radius, angular_speed, initial_phase, time, wrap)
    return np.array([x, 0.0, z])


def circular_orbit_path(radius: float, segments: int = ORBIT_PATH_SEGMENTS) -> np.ndarray:
    """
    Closed polyline tracing an orbit, shape (segments + 1, 3).

    The first and last points coincide so the path can be drawn as a
    line strip.
    """
    theta = np.linspace(0.0, TWO_PI, segments + 1)
    path = np.zeros((segments + 1, 3))
    path[:, 0] = radius * np.cos(theta)
    path[:, 2] = radius * np.sin(theta)
    return path


def orbital_period(angular_speed: float) -> float:
    """Simulation time for one full revolution (inf for a fixed body)."""
    if angular_speed == 0:
        return float('inf')
    return 1.0 / abs(angular_speed)
