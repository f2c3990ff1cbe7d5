"""
Orrery Visualization Engine Interface
=====================================

Pluggable renderer abstraction.
Swap between engines without touching the orbit kinematics or picking.

Supported engines:
- ModernGL (default) - OpenGL 3.3+ window, glTF models, Blinn-Phong spheres
- Headless - No rendering, just frame and transform counting

Usage:
    from orrery.visualization.engine_interface import create_renderer

    renderer = create_renderer('moderngl')  # or 'headless'
    renderer.run(simulation)
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional
import numpy as np

from .picking import Primitive


class DrawableBackend(ABC):
    """What the simulation needs from a renderer: drawables and frames."""

    @abstractmethod
    def create_drawable(self, body) -> Any:
        """Procedural drawable for a body without a model file."""
        pass

    @abstractmethod
    def load_drawable(self, body, path: str) -> Any:
        """Load a model file for a body. Raises on failure."""
        pass

    @abstractmethod
    def apply_transform(self, handle, matrix: np.ndarray):
        """Set the world matrix of a drawable for the next frame."""
        pass

    @abstractmethod
    def submit_frame(self):
        """Draw everything with the transforms applied this tick."""
        pass

    def release(self):
        """Free drawables and GPU resources."""
        pass


class RendererInterface(ABC):
    """Abstract base for all orrery renderers."""

    @abstractmethod
    def initialize(self):
        """Initialize the rendering engine."""
        pass

    @abstractmethod
    def run(self, simulation, frames: Optional[int] = None):
        """Run the host frame loop (blocking)."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if renderer is still active."""
        pass

    @abstractmethod
    def shutdown(self):
        """Clean up resources."""
        pass


class HeadlessDrawable:
    """Stand-in drawable: a unit box, scaled by the body's model matrix."""

    def __init__(self, body_id: str, path: Optional[str] = None):
        self.body_id = body_id
        self.path = path
        self.matrix = np.identity(4)
        self.released = False

    def primitives(self) -> List[Primitive]:
        return [Primitive(np.array([-1.0, -1.0, -1.0]), np.array([1.0, 1.0, 1.0]), name=self.body_id)]

    def __repr__(self):
        return f"HeadlessDrawable({self.body_id!r})"


class HeadlessRenderer(RendererInterface, DrawableBackend):
    """No-op renderer for tests and runs without a display."""

    def __init__(self):
        self._running = False
        self._frame_count = 0
        self._transform_count = 0
        self.drawables: List[HeadlessDrawable] = []

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def transform_count(self) -> int:
        return self._transform_count

    def initialize(self):
        self._running = True
        print("[Headless] Renderer initialized (no display)")

    def create_drawable(self, body) -> HeadlessDrawable:
        drawable = HeadlessDrawable(body.id)
        self.drawables.append(drawable)
        return drawable

    def load_drawable(self, body, path: str) -> HeadlessDrawable:
        if not Path(path).is_file():
            raise FileNotFoundError(path)
        drawable = HeadlessDrawable(body.id, path)
        self.drawables.append(drawable)
        return drawable

    def apply_transform(self, handle, matrix: np.ndarray):
        handle.matrix = matrix
        self._transform_count += 1

    def submit_frame(self):
        self._frame_count += 1

    def release(self):
        for drawable in self.drawables:
            drawable.released = True

    def run(self, simulation, frames: Optional[int] = None):
        """Drive the simulation for `frames` host frames (default 1000)."""
        self._running = True
        simulation.start(self)
        for _ in range(frames if frames is not None else 1000):
            if not self._running:
                break
            simulation.frame()
        simulation.teardown()
        self.shutdown()

    def is_running(self) -> bool:
        return self._running

    def shutdown(self):
        if not self._running:
            return
        self._running = False
        print(f"[Headless] Shutdown after {self._frame_count} frames")


class ModernGLRenderer(RendererInterface):
    """ModernGL window renderer with proper shaders."""

    def __init__(self):
        self._window_class = None
        self._running = False

    def initialize(self):
        # Lazy import to avoid requiring moderngl if not used
        from .modern_renderer import OrreryWindow

        self._window_class = OrreryWindow
        self._running = True
        print("[ModernGL] Renderer initialized")

    def run(self, simulation, frames: Optional[int] = None):
        import moderngl_window as mglw

        # Inject the simulation into the window config
        class ConfiguredWindow(self._window_class):
            simulation_instance = simulation

        mglw.run_window_config(ConfiguredWindow, args=[])
        self.shutdown()

    def is_running(self) -> bool:
        return self._running

    def shutdown(self):
        self._running = False


# Registry of available engines
RENDERERS = {
    'moderngl': ModernGLRenderer,
    'opengl': ModernGLRenderer,  # Alias
    'headless': HeadlessRenderer,
    'none': HeadlessRenderer,
}


def create_renderer(engine: str = 'moderngl') -> RendererInterface:
    """
    Create a renderer instance.

    Args:
        engine: One of 'moderngl', 'headless'

    Returns:
        Initialized renderer
    """
    engine = engine.lower()

    if engine not in RENDERERS:
        available = ', '.join(RENDERERS.keys())
        raise ValueError(f"Unknown engine '{engine}'. Available: {available}")

    renderer = RENDERERS[engine]()
    renderer.initialize()

    return renderer


def get_recommended_engine() -> str:
    """Get the recommended engine for this system."""
    try:
        import moderngl
        return 'moderngl'
    except ImportError:
        pass

    return 'headless'
