"""
Modern OpenGL Renderer for the Orrery
=====================================

ModernGL window hosting the solar system simulation.
Proper shading with the Sun as the light source.

Draws:
- Bodies as glTF scenes (model files) or procedural spheres
- Circular orbit paths following each orbit centre
- A fixed random starfield

The window is the host frame loop: every on_render calls
simulation.frame(), which loads assets while LOADING and composes
transforms + submits the frame while RUNNING.
"""

import logging
import numpy as np
import moderngl
import moderngl_window as mglw
from pyrr import matrix44
from typing import Dict, List, Optional, Tuple

from .engine_interface import DrawableBackend
from .picking import Primitive
from ..physics import circular_orbit_path
from ..ui import UIInterface

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Orrery - Solar System"

# Vertex shader with proper lighting
VERTEX_SHADER = """
#version 330

in vec3 in_position;
in vec3 in_normal;

out vec3 v_position;
out vec3 v_normal;

uniform mat4 model;
uniform mat4 view;
uniform mat4 projection;

void main() {
    v_position = vec3(model * vec4(in_position, 1.0));
    v_normal = mat3(transpose(inverse(model))) * in_normal;
    gl_Position = projection * view * model * vec4(in_position, 1.0);
}
"""

# Fragment shader with Blinn-Phong lighting from a point light at the Sun
FRAGMENT_SHADER = """
#version 330

in vec3 v_position;
in vec3 v_normal;

out vec4 fragColor;

uniform vec3 color;
uniform vec3 light_pos;
uniform vec3 view_pos;
uniform float ambient_strength;
uniform float specular_strength;
uniform float shininess;
uniform float emissive;

void main() {
    vec3 ambient = ambient_strength * vec3(0.25, 0.25, 0.25);

    vec3 norm = normalize(v_normal);
    vec3 light_dir = normalize(light_pos - v_position);
    float diff = max(dot(norm, light_dir), 0.0);
    vec3 diffuse = diff * vec3(1.0, 0.98, 0.95);

    vec3 view_dir = normalize(view_pos - v_position);
    vec3 halfway_dir = normalize(light_dir + view_dir);
    float spec = pow(max(dot(norm, halfway_dir), 0.0), shininess);
    vec3 specular = specular_strength * spec * vec3(1.0, 1.0, 1.0);

    vec3 lit = (ambient + diffuse + specular) * color;
    vec3 result = mix(lit, color, emissive);

    // Gamma correction
    result = pow(result, vec3(1.0/2.2));

    fragColor = vec4(result, 1.0);
}
"""

# Line shader for orbit paths and stars
LINE_VERTEX_SHADER = """
#version 330
in vec3 in_position;
uniform mat4 mvp;
uniform float point_size;
void main() {
    gl_PointSize = point_size;
    gl_Position = mvp * vec4(in_position, 1.0);
}
"""

LINE_FRAGMENT_SHADER = """
#version 330
out vec4 fragColor;
uniform vec4 color;
void main() {
    fragColor = color;
}
"""

ORBIT_COLOR = (0x88 / 255, 0x88 / 255, 0x88 / 255, 0.5)
STAR_COUNT = 2000
STAR_SPREAD = 100000.0


def create_sphere_mesh(radius: float = 1.0, segments: int = 32) -> Tuple[np.ndarray, np.ndarray]:
    """Create sphere triangle vertices and normals (Y up)."""
    vertices = []
    normals = []

    def point(i, j):
        lat = np.pi * (-0.5 + i / segments)
        lon = 2 * np.pi * j / segments
        n = [np.cos(lat) * np.cos(lon), np.sin(lat), np.cos(lat) * np.sin(lon)]
        return [radius * c for c in n], n

    for i in range(segments):
        for j in range(segments):
            p00, n00 = point(i, j)
            p01, n01 = point(i, j + 1)
            p10, n10 = point(i + 1, j)
            p11, n11 = point(i + 1, j + 1)

            # Two triangles per quad, counter-clockwise from outside
            vertices.extend(p00 + p10 + p01)
            normals.extend(n00 + n10 + n01)
            vertices.extend(p01 + p10 + p11)
            normals.extend(n01 + n10 + n11)

    return np.array(vertices, dtype='f4'), np.array(normals, dtype='f4')


def create_starfield(count: int = STAR_COUNT, spread: float = STAR_SPREAD,
                     seed: Optional[int] = None) -> np.ndarray:
    """Random star positions in a cube of side 2 * spread."""
    rng = np.random.default_rng(seed)
    return rng.uniform(-spread, spread, size=(count, 3)).astype('f4')


def _gl_bytes(mat: np.ndarray) -> bytes:
    return np.asarray(mat, dtype='f4').tobytes()


class SphereDrawable:
    """Procedural sphere with a flat colour."""

    def __init__(self, body_id: str, vao, vertex_count: int, color, emissive: float = 0.0):
        self.body_id = body_id
        self.vao = vao
        self.vertex_count = vertex_count
        self.color = tuple(color)
        self.emissive = emissive
        self.matrix = np.identity(4, dtype='f4')

    def primitives(self) -> List[Primitive]:
        return [Primitive(np.array([-1.0, -1.0, -1.0]), np.array([1.0, 1.0, 1.0]), name=self.body_id)]

    def draw(self, prog, view, projection):
        prog['model'].write(_gl_bytes(self.matrix))
        prog['color'].value = self.color
        prog['emissive'].value = self.emissive
        self.vao.render(moderngl.TRIANGLES, vertices=self.vertex_count)

    def release(self):
        # The vertex array shares the window's sphere buffer
        self.vao.release()


class SceneDrawable:
    """A loaded glTF scene drawn with the body's model matrix."""

    def __init__(self, body_id: str, scene):
        self.body_id = body_id
        self.scene = scene
        self.matrix = np.identity(4, dtype='f4')

    def primitives(self) -> List[Primitive]:
        """
        One box around the whole scene. Mesh boxes are in mesh-local
        coordinates; the scene box already includes every node matrix.
        """
        if self.scene.bbox_min is None or self.scene.bbox_max is None:
            self.scene.calc_scene_bbox()
        if self.scene.bbox_min is None or self.scene.bbox_max is None:
            logger.warning("%s: scene has no bounds, not pickable", self.body_id)
            return []
        return [Primitive(np.array(self.scene.bbox_min, dtype=float),
                          np.array(self.scene.bbox_max, dtype=float),
                          name=self.body_id)]

    def draw(self, prog, view, projection):
        self.scene.draw(
            projection_matrix=projection,
            camera_matrix=matrix44.multiply(self.matrix, view).astype('f4'),
        )

    def release(self):
        self.scene.release()


class TitleBarUI(UIInterface):
    """Shows selection and loading progress in the window title."""

    def __init__(self, wnd):
        self.wnd = wnd

    def show_info(self, title: str, description: str):
        self.wnd.title = f"{title} - {WINDOW_TITLE}"
        print(f"[{title}] {description}")

    def hide_info(self):
        self.wnd.title = WINDOW_TITLE

    def set_loading_percent(self, percent: int):
        self.wnd.title = f"Loading Models: {percent}% - {WINDOW_TITLE}"

    def loading_complete(self):
        self.wnd.title = WINDOW_TITLE


class OrreryWindow(mglw.WindowConfig, DrawableBackend):
    """
    ModernGL window for the orrery.

    Acts as the simulation's drawable backend; input is forwarded to the
    simulation's InputHub.
    """

    gl_version = (3, 3)
    title = WINDOW_TITLE
    window_size = (1280, 720)
    aspect_ratio = None  # follow the window on resize
    resizable = True
    samples = 4  # Anti-aliasing

    # Injected by ModernGLRenderer.run
    simulation_instance = None

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        self.ctx.enable(moderngl.DEPTH_TEST)
        self.ctx.enable(moderngl.PROGRAM_POINT_SIZE)

        # Shaders
        self.prog = self.ctx.program(
            vertex_shader=VERTEX_SHADER,
            fragment_shader=FRAGMENT_SHADER,
        )
        self.line_prog = self.ctx.program(
            vertex_shader=LINE_VERTEX_SHADER,
            fragment_shader=LINE_FRAGMENT_SHADER,
        )

        self._create_sphere_buffer()
        self._create_starfield()

        self.drawables: Dict[str, object] = {}
        self.orbit_paths: Dict[str, Tuple[object, object, int]] = {}
        self._released = False

        self.simulation = self.simulation_instance
        if self.simulation is None:
            raise RuntimeError("OrreryWindow needs a simulation; run it through ModernGLRenderer")

        self.simulation.set_ui(TitleBarUI(self.wnd))
        self.simulation.start(self)
        self._create_orbit_paths()

        width, height = self.wnd.size
        self.simulation.input_hub.resize(width, height)

    # ------------------------------------------------------------------
    # GPU resources
    # ------------------------------------------------------------------

    def _create_sphere_buffer(self):
        sphere_v, sphere_n = create_sphere_mesh(radius=1.0, segments=32)
        sphere_data = np.zeros(len(sphere_v) // 3, dtype=[
            ('in_position', 'f4', 3),
            ('in_normal', 'f4', 3),
        ])
        sphere_data['in_position'] = sphere_v.reshape(-1, 3)
        sphere_data['in_normal'] = sphere_n.reshape(-1, 3)

        self.sphere_vbo = self.ctx.buffer(sphere_data.tobytes())
        self.sphere_vertex_count = len(sphere_v) // 3

    def _create_starfield(self):
        stars = create_starfield()
        self.star_vbo = self.ctx.buffer(stars.tobytes())
        self.star_vao = self.ctx.vertex_array(self.line_prog, [(self.star_vbo, '3f', 'in_position')])
        self.star_count = len(stars)

    def _create_orbit_paths(self):
        """One line strip per orbiting body, in its orbit centre's frame."""
        for body in self.simulation.registry:
            if body.config.orbit_radius == 0:
                continue
            path = circular_orbit_path(body.config.orbit_radius).astype('f4')
            vbo = self.ctx.buffer(path.tobytes())
            vao = self.ctx.vertex_array(self.line_prog, [(vbo, '3f', 'in_position')])
            self.orbit_paths[body.id] = (vbo, vao, len(path))

    # ------------------------------------------------------------------
    # DrawableBackend
    # ------------------------------------------------------------------

    def create_drawable(self, body) -> SphereDrawable:
        vao = self.ctx.vertex_array(
            self.prog,
            [(self.sphere_vbo, '3f 3f', 'in_position', 'in_normal')]
        )
        emissive = 1.0 if body.config.is_central else 0.0
        drawable = SphereDrawable(body.id, vao, self.sphere_vertex_count, body.config.color, emissive)
        self.drawables[body.id] = drawable
        return drawable

    def load_drawable(self, body, path: str) -> SceneDrawable:
        scene = self.load_scene(path)
        drawable = SceneDrawable(body.id, scene)
        self.drawables[body.id] = drawable
        return drawable

    def apply_transform(self, handle, matrix: np.ndarray):
        handle.matrix = np.asarray(matrix, dtype='f4')

    def submit_frame(self):
        camera = self.simulation.camera
        projection = camera.projection_matrix().astype('f4')
        view = camera.view_matrix().astype('f4')
        view_projection = matrix44.multiply(view, projection)

        self._render_stars(view_projection)
        self._render_orbits(view_projection)

        self.prog['light_pos'].value = tuple(self.simulation.registry.central_body.position)
        self.prog['view_pos'].value = tuple(camera.position)
        self.prog['ambient_strength'].value = 0.6
        self.prog['specular_strength'].value = 0.3
        self.prog['shininess'].value = 32.0
        self.prog['view'].write(_gl_bytes(view))
        self.prog['projection'].write(_gl_bytes(projection))

        for body in self.simulation.registry.loaded_bodies():
            body.drawable.draw(self.prog, view, projection)

    def _render_stars(self, view_projection):
        self.line_prog['mvp'].write(_gl_bytes(view_projection))
        self.line_prog['color'].value = (1.0, 1.0, 1.0, 1.0)
        self.line_prog['point_size'].value = 1.2
        self.star_vao.render(moderngl.POINTS, vertices=self.star_count)

    def _render_orbits(self, view_projection):
        registry = self.simulation.registry
        self.ctx.enable(moderngl.BLEND)
        self.line_prog['color'].value = ORBIT_COLOR
        for body_id, (_, vao, count) in self.orbit_paths.items():
            body = registry.get(body_id)
            centre = registry.get(body.parent_id).position if body.parent_id else np.zeros(3)
            model = matrix44.create_from_translation(centre)
            self.line_prog['mvp'].write(_gl_bytes(matrix44.multiply(model, view_projection)))
            vao.render(moderngl.LINE_STRIP, vertices=count)
        self.ctx.disable(moderngl.BLEND)

    def release(self):
        if self._released:
            return
        self._released = True
        for drawable in self.drawables.values():
            drawable.release()
        for vbo, vao, _ in self.orbit_paths.values():
            vao.release()
            vbo.release()
        self.drawables.clear()
        self.orbit_paths.clear()
        self.star_vao.release()
        self.star_vbo.release()
        self.sphere_vbo.release()
        logger.info("Released GPU resources")

    # ------------------------------------------------------------------
    # Window events
    # ------------------------------------------------------------------

    def on_render(self, time: float, frame_time: float):
        """Render frame."""
        self.ctx.clear(0.0, 0.0, 0.02)
        self.ctx.enable(moderngl.DEPTH_TEST)
        self.simulation.frame()

    def on_resize(self, width: int, height: int):
        self.simulation.input_hub.resize(width, height)

    def on_mouse_press_event(self, x: int, y: int, button: int):
        if button == self.wnd.mouse.left:
            self.simulation.input_hub.pointer(x, y, button)

    def on_mouse_drag_event(self, x: int, y: int, dx: int, dy: int):
        self.simulation.camera.orbit(-dx * 0.005, dy * 0.005)

    def on_mouse_scroll_event(self, x_offset: float, y_offset: float):
        self.simulation.camera.zoom(0.9 if y_offset > 0 else 1.1)

    def on_close(self):
        self.simulation.teardown()
