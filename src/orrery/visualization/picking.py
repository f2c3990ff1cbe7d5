"""
Pointer Picking & Selection
===========================
Maps a 2D pointer click to a celestial body and manages the single
selection.

PIPELINE:
    pointer (px) -> NDC -> ray through the camera (pyrr)
                 -> world-space AABB of every tagged primitive
                 -> nearest hit (smallest ray parameter) -> owning body

Primitives are tagged with their owner's id when the drawable is attached
to the registry, so a pick is a flat scan with no scene traversal.

SELECTION PROTOCOL:
    hit B, selection None/A  -> restore A, save B's scale once,
                                scale B by the highlight factor,
                                show B's name + description
    hit B, selection B       -> no-op
    miss                     -> restore + clear selection, hide the panel
                                (hidden on every miss, selected or not)
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from pyrr import Matrix44, aabb, geometric_tests, matrix44, ray as pyrr_ray

logger = logging.getLogger(__name__)

HIGHLIGHT_SCALE = 1.05


@dataclass
class Viewport:
    """Drawable area in pixels."""
    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / max(self.height, 1)


@dataclass
class Camera:
    """Perspective camera looking at a target point."""
    position: np.ndarray
    target: np.ndarray = field(default_factory=lambda: np.zeros(3))
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    fov: float = 60.0
    near: float = 0.1
    far: float = 100000.0
    aspect_ratio: float = 16 / 9
    max_distance: Optional[float] = None

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float)
        self.target = np.asarray(self.target, dtype=float)
        self.up = np.asarray(self.up, dtype=float)

    def view_matrix(self) -> np.ndarray:
        return Matrix44.look_at(tuple(self.position), tuple(self.target), tuple(self.up))

    def projection_matrix(self) -> np.ndarray:
        return Matrix44.perspective_projection(self.fov, self.aspect_ratio, self.near, self.far)

    def view_projection(self) -> np.ndarray:
        """Row-vector view * projection, as written to the shaders."""
        return matrix44.multiply(self.view_matrix(), self.projection_matrix())

    def zoom(self, factor: float, min_distance: float = 1.0):
        """Move along the view direction; factor < 1 moves closer."""
        offset = self.position - self.target
        distance = np.linalg.norm(offset)
        if distance == 0:
            return
        new_distance = distance * factor
        if self.max_distance is not None:
            new_distance = min(new_distance, self.max_distance)
        new_distance = max(new_distance, min_distance)
        self.position = self.target + offset / distance * new_distance

    def orbit(self, d_yaw: float, d_pitch: float):
        """Rotate around the target: yaw about world Y, pitch kept off the poles."""
        offset = self.position - self.target
        distance = np.linalg.norm(offset)
        if distance == 0:
            return
        yaw = np.arctan2(offset[0], offset[2]) + d_yaw
        pitch = np.arcsin(np.clip(offset[1] / distance, -1.0, 1.0)) + d_pitch
        pitch = np.clip(pitch, -np.radians(89), np.radians(89))
        self.position = self.target + distance * np.array([
            np.cos(pitch) * np.sin(yaw),
            np.sin(pitch),
            np.cos(pitch) * np.cos(yaw),
        ])


@dataclass
class Primitive:
    """
    A pickable piece of a drawable: an axis-aligned box in drawable-local
    coordinates. owner_id is filled in by the registry on attach.
    """
    bbox_min: np.ndarray
    bbox_max: np.ndarray
    name: str = ""
    owner_id: Optional[str] = None

    def world_aabb(self, model: np.ndarray) -> np.ndarray:
        """AABB enclosing the local box after a row-vector model transform."""
        lo = np.asarray(self.bbox_min, dtype=float)
        hi = np.asarray(self.bbox_max, dtype=float)
        corners = np.array([
            [x, y, z]
            for x in (lo[0], hi[0])
            for y in (lo[1], hi[1])
            for z in (lo[2], hi[2])
        ])
        homogeneous = np.hstack([corners, np.ones((8, 1))])
        world = np.dot(homogeneous, model)
        return aabb.create_from_points(world[:, :3] / world[:, 3:4])


@dataclass
class PickHit:
    """One ray/primitive intersection."""
    body_id: str
    distance: float
    point: np.ndarray
    primitive: Primitive


def screen_to_ndc(x: float, y: float, viewport: Viewport) -> Tuple[float, float]:
    """Pixel coordinates (origin top-left) to normalized device coordinates."""
    ndc_x = (x / viewport.width) * 2.0 - 1.0
    ndc_y = -(y / viewport.height) * 2.0 + 1.0
    return ndc_x, ndc_y


def _unproject(ndc_x: float, ndc_y: float, ndc_z: float, inverse_vp: np.ndarray) -> np.ndarray:
    clip = np.array([ndc_x, ndc_y, ndc_z, 1.0])
    world = np.dot(clip, inverse_vp)
    return world[:3] / world[3]


def ray_from_screen(x: float, y: float, viewport: Viewport, camera: Camera) -> np.ndarray:
    """
    World-space ray under a pointer position.

    Returns a pyrr ray (2x3 array: origin on the near plane, unit direction).
    """
    ndc_x, ndc_y = screen_to_ndc(x, y, viewport)
    inverse_vp = matrix44.inverse(camera.view_projection())

    near_point = _unproject(ndc_x, ndc_y, -1.0, inverse_vp)
    far_point = _unproject(ndc_x, ndc_y, 1.0, inverse_vp)
    direction = far_point - near_point
    direction /= np.linalg.norm(direction)
    return pyrr_ray.create(near_point, direction)


def intersect_ray(ray: np.ndarray, registry) -> List[PickHit]:
    """
    All hits of a ray against the registry's primitive index, nearest first.
    Each hit resolves to the body named by the primitive's owner tag.

    Bodies without a drawable have no primitives and are never hit.
    """
    hits: List[PickHit] = []
    origin, direction = ray[0], ray[1]

    for primitives in registry.primitive_index().values():
        for primitive in primitives:
            body = registry.find(primitive.owner_id)
            if body is None:
                continue
            box = primitive.world_aabb(body.transform.model_matrix())
            point = geometric_tests.ray_intersect_aabb(ray, box)
            if point is None:
                continue
            distance = float(np.dot(point - origin, direction))
            hits.append(PickHit(body_id=body.id, distance=distance, point=point, primitive=primitive))

    hits.sort(key=lambda hit: hit.distance)
    return hits


class SelectionController:
    """
    Picking plus single-selection state.

    The only mutation it performs on bodies is the highlight scale; the
    UI is told what to show through show_info / hide_info.
    """

    def __init__(self, registry, ui=None, highlight_scale: float = HIGHLIGHT_SCALE):
        self.registry = registry
        self.ui = ui
        self.highlight_scale = highlight_scale

        self.selected = None
        self._saved_scales: Dict[str, float] = {}

    @property
    def selected_id(self) -> Optional[str]:
        return self.selected.id if self.selected is not None else None

    def pick(self, x: float, y: float, viewport: Viewport, camera: Camera):
        """Body under the pointer, or None."""
        return self.pick_ray(ray_from_screen(x, y, viewport, camera))

    def pick_ray(self, ray: np.ndarray):
        hits = intersect_ray(ray, self.registry)
        if not hits:
            return None
        return self.registry.get(hits[0].body_id)

    def handle_click(self, x: float, y: float, viewport: Viewport, camera: Camera):
        """Pick and apply the selection protocol. Returns the selected body."""
        body = self.pick(x, y, viewport, camera)
        if body is None:
            self._drop_selection()
            if self.ui is not None:
                self.ui.hide_info()
        else:
            self.select(body)
        return self.selected

    def select(self, body):
        if self.selected is body:
            return

        self._restore(self.selected)

        if body.id not in self._saved_scales:
            self._saved_scales[body.id] = body.scale
        body.scale = self._saved_scales[body.id] * self.highlight_scale
        self.selected = body

        logger.info("Selected %s", body.id)
        if self.ui is not None:
            self.ui.show_info(body.id, body.config.description)

    def clear(self):
        """Deselect and hide the panel. Without a selection this does nothing."""
        if self._drop_selection() and self.ui is not None:
            self.ui.hide_info()

    def _drop_selection(self) -> bool:
        if self.selected is None:
            return False
        logger.info("Deselected %s", self.selected.id)
        self._restore(self.selected)
        self.selected = None
        return True

    def _restore(self, body):
        if body is None:
            return
        saved = self._saved_scales.pop(body.id, None)
        if saved is not None:
            body.scale = saved
