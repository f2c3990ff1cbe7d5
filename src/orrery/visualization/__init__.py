"""
Visualization Module
====================
Renderers and pointer picking for the orrery.

The ModernGL window is imported lazily by the renderer factory so the
picking and headless code work without an OpenGL context.
"""

from .picking import (
    Camera,
    Viewport,
    Primitive,
    PickHit,
    SelectionController,
    screen_to_ndc,
    ray_from_screen,
    intersect_ray,
    HIGHLIGHT_SCALE
)
from .engine_interface import (
    DrawableBackend,
    RendererInterface,
    HeadlessRenderer,
    HeadlessDrawable,
    ModernGLRenderer,
    create_renderer,
    get_recommended_engine
)

__all__ = [
    'Camera',
    'Viewport',
    'Primitive',
    'PickHit',
    'SelectionController',
    'screen_to_ndc',
    'ray_from_screen',
    'intersect_ray',
    'HIGHLIGHT_SCALE',
    'DrawableBackend',
    'RendererInterface',
    'HeadlessRenderer',
    'HeadlessDrawable',
    'ModernGLRenderer',
    'create_renderer',
    'get_recommended_engine',
]
