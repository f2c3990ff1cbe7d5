"""
Celestial Body Entity
=====================
Static parameters and live state of one body in the orrery.

    BodyConfig  - typed record built once from configuration
    Body        - the config plus per-tick transient state
                  (world position, accumulated spin, scale, drawable)

The drawable handle belongs to the renderer. A Body only holds it so the
update loop can push transforms and the picker can resolve hits.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..errors import ConfigurationError
from ..physics.hierarchy import Transform


DEFAULT_COLOR = (0.8, 0.8, 0.8)


def parse_color(value) -> Tuple[float, float, float]:
    """Accept 0xRRGGBB ints, '#rrggbb' strings or an RGB triple in [0, 1]."""
    if value is None:
        return DEFAULT_COLOR
    if isinstance(value, str):
        text = value.strip().lstrip('#')
        if text.lower().startswith('0x'):
            text = text[2:]
        try:
            value = int(text, 16)
        except ValueError:
            raise ConfigurationError(f"Invalid colour '{value}'")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ConfigurationError(f"Colour out of range: {value:#x}")
        return (
            ((value >> 16) & 0xFF) / 255.0,
            ((value >> 8) & 0xFF) / 255.0,
            (value & 0xFF) / 255.0,
        )
    rgb = tuple(float(c) for c in value)
    if len(rgb) != 3:
        raise ConfigurationError(f"Colour must have 3 components, got {value!r}")
    return rgb


@dataclass(frozen=True)
class BodyConfig:
    """
    Static description of a celestial body.

    orbit_speed is in revolutions per simulation-time unit, rotation_speed
    in radians per tick, axial_tilt in degrees.
    """
    name: str
    orbit_radius: float = 0.0
    orbit_speed: float = 0.0
    initial_phase: float = 0.0
    rotation_speed: float = 0.0
    axial_tilt: float = 0.0
    parent: Optional[str] = None
    description: str = ""
    model: Optional[str] = None
    model_scale: float = 1.0
    color: Tuple[float, float, float] = DEFAULT_COLOR

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ConfigurationError("Body name must be a non-empty string")

        for attr in ('orbit_radius', 'orbit_speed', 'initial_phase',
                     'rotation_speed', 'axial_tilt', 'model_scale'):
            value = getattr(self, attr)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigurationError(f"{self.name}: {attr} must be a finite number, got {value!r}")

        if self.orbit_radius < 0:
            raise ConfigurationError(f"{self.name}: orbit_radius must be >= 0")
        if self.model_scale <= 0:
            raise ConfigurationError(f"{self.name}: model_scale must be > 0")
        if self.parent == self.name:
            raise ConfigurationError(f"{self.name}: a body cannot orbit itself")

    @property
    def is_central(self) -> bool:
        """The central body has no orbit and no parent."""
        return self.orbit_radius == 0 and self.parent is None

    @property
    def axial_tilt_radians(self) -> float:
        return math.radians(self.axial_tilt)


class Body:
    """
    A celestial body with its live transform.

    World position and spin are advanced by the hierarchy composer; the
    scale is changed only by the selection highlight.
    """

    def __init__(self, config: BodyConfig):
        self.config = config

        # Transient state
        self.transform = Transform(
            position=np.zeros(3),
            rotation=0.0,
            tilt=config.axial_tilt_radians,
            scale=config.model_scale,
        )
        self.drawable: Optional[Any] = None

    @property
    def id(self) -> str:
        return self.config.name

    @property
    def parent_id(self) -> Optional[str]:
        return self.config.parent

    @property
    def position(self) -> np.ndarray:
        return self.transform.position

    @property
    def scale(self) -> float:
        return self.transform.scale

    @scale.setter
    def scale(self, value: float):
        self.transform.scale = value

    @property
    def is_loaded(self) -> bool:
        return self.drawable is not None

    def get_status_report(self) -> dict:
        """Telemetry snapshot for logging and the CLI summary."""
        return {
            'id': self.id,
            'position': self.position.copy(),
            'rotation': self.transform.rotation,
            'scale': self.scale,
            'loaded': self.is_loaded,
        }

    def __repr__(self):
        return f"Body({self.id!r}, parent={self.parent_id!r}, loaded={self.is_loaded})"
