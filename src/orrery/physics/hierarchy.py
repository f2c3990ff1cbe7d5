"""
Hierarchy Composer
==================
Resolves parent/child orbits into world transforms, once per tick.

A root body orbits the origin. A child body orbits its parent's world
position as computed earlier in the same tick:

    child_world = parent_world + orbit_offset(child, time)

Each body also spins about its local vertical axis (rotation += speed
every tick) and carries a static axial tilt about its local Z axis.

Processing order comes from the registry (parents before children), so
composition is a single flat pass with no recursion.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional
from pyrr import matrix44

from .orbit_math import orbit_offset, wrap_angle

logger = logging.getLogger(__name__)


@dataclass
class Transform:
    """World transform of one body."""
    position: np.ndarray
    rotation: float = 0.0     # accumulated spin about local Y (radians)
    tilt: float = 0.0         # static axial tilt about local Z (radians)
    scale: float = 1.0

    def model_matrix(self) -> np.ndarray:
        """
        4x4 model matrix in pyrr's row-vector convention.

        Applied to a local point p as p * S * Rz(tilt) * Ry(spin) * T, which
        matches a column-vector T * Ry * Rz * S.
        """
        scale = matrix44.create_from_scale([self.scale] * 3)
        tilt = matrix44.create_from_z_rotation(self.tilt)
        spin = matrix44.create_from_y_rotation(self.rotation)
        translation = matrix44.create_from_translation(self.position)

        model = matrix44.multiply(scale, tilt)
        model = matrix44.multiply(model, spin)
        return matrix44.multiply(model, translation)


class HierarchyComposer:
    """
    Composes world transforms for a registry of bodies.

    Stateless apart from configuration; all per-body state lives on the
    Body objects themselves.
    """

    def __init__(self, wrap_angles: bool = True):
        self.wrap_angles = wrap_angles

    def local_offset(self, body, time: float) -> np.ndarray:
        """Orbit offset of a body relative to its orbit centre."""
        cfg = body.config
        return orbit_offset(cfg.orbit_radius, cfg.orbit_speed, cfg.initial_phase,
                            time, wrap=self.wrap_angles)

    def world_position(self, body, time: float,
                       parent_position: Optional[np.ndarray] = None) -> np.ndarray:
        """
        World position of a body at `time`.

        Bodies with a parent require the parent's world position for this
        tick; composing a child before its parent is a programming error.
        """
        offset = self.local_offset(body, time)
        if body.parent_id is None:
            return offset
        if parent_position is None:
            raise ValueError(f"Body '{body.id}' composed before its parent '{body.parent_id}'")
        return np.asarray(parent_position, dtype=float) + offset

    def compose(self, body, time: float,
                parent_position: Optional[np.ndarray] = None) -> Transform:
        """
        Advance the body's spin and set its world transform for `time`.

        Returns the body's (mutated) Transform.
        """
        transform = body.transform
        transform.position = self.world_position(body, time, parent_position)

        rotation = transform.rotation + body.config.rotation_speed
        transform.rotation = wrap_angle(rotation) if self.wrap_angles else rotation
        return transform

    def compose_all(self, registry, time: float) -> Dict[str, np.ndarray]:
        """
        Compose every body in parent-before-child order.

        Returns {body_id: world_position} for this tick.
        """
        positions: Dict[str, np.ndarray] = {}
        for body in registry.update_order():
            parent_position = positions.get(body.parent_id) if body.parent_id else None
            transform = self.compose(body, time, parent_position)
            positions[body.id] = transform.position
        return positions
