"""
Physics Module
==============
Orbit kinematics for the orrery.

Submodules:
- orbit_math: circular orbit positions, angle wrapping, orbit paths
- hierarchy: parent/child composition into world transforms
"""

from .orbit_math import (
    TWO_PI,
    wrap_angle,
    orbit_angle,
    orbit_position,
    orbit_offset,
    circular_orbit_path,
    orbital_period
)

from .hierarchy import (
    Transform,
    HierarchyComposer
)

__all__ = [
    # Orbit math
    'TWO_PI',
    'wrap_angle',
    'orbit_angle',
    'orbit_position',
    'orbit_offset',
    'circular_orbit_path',
    'orbital_period',
    # Hierarchy
    'Transform',
    'HierarchyComposer',
]
