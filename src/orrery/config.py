"""
Orrery Configuration
====================
YAML configuration with built-in defaults for the reference solar system.

    simulation:  time_increment, highlight_scale, wrap_angles, load_budget
    camera:      position, target, fov, near, far, max_distance
    assets:      models_dir (relative model paths resolve against it)
    bodies:      list of body records (see BodyConfig)

User sections are merged over the defaults key by key; a user `bodies`
list replaces the default list.
"""

import copy
import logging
import yaml
import numpy as np
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .entities import BodyConfig, BodyRegistry
from .entities.body import parse_color
from .errors import ConfigurationError
from .visualization.picking import Camera

logger = logging.getLogger(__name__)

BODY_KEYS = {
    'name', 'orbit_radius', 'orbit_speed', 'initial_phase', 'rotation_speed',
    'axial_tilt', 'parent', 'description', 'model', 'model_scale', 'color',
}


@dataclass
class SimulationSettings:
    time_increment: float = 0.01
    highlight_scale: float = 1.05
    wrap_angles: bool = True
    load_budget: int = 1          # asset loads per frame while loading


@dataclass
class CameraSettings:
    position: tuple = (0.0, 15000.0, 30000.0)
    target: tuple = (0.0, 0.0, 0.0)
    fov: float = 60.0
    near: float = 0.1
    far: float = 100000.0
    max_distance: float = 80000.0


def _default_config() -> Dict:
    """Default configuration if no file provided"""
    return {
        'simulation': {
            'time_increment': 0.01,
            'highlight_scale': 1.05,
            'wrap_angles': True,
            'load_budget': 1,
        },
        'camera': {
            'position': [0.0, 15000.0, 30000.0],
            'target': [0.0, 0.0, 0.0],
            'fov': 60.0,
            'near': 0.1,
            'far': 100000.0,
            'max_distance': 80000.0,
        },
        'assets': {
            'models_dir': None,
        },
        'bodies': [
            {
                'name': "Sun",
                'orbit_radius': 0,
                'axial_tilt': 7.25,
                'rotation_speed': 0.001,
                'orbit_speed': 0,
                'initial_phase': 0,
                'color': 0xffcc33,
                'model_scale': 32,
                'description': "The Sun is the star at the center of our Solar System. It's a nearly "
                               "perfect sphere of hot plasma, with internal convective motion that "
                               "generates a magnetic field.",
            },
            {
                'name': "Mercury",
                'orbit_radius': 6000,
                'axial_tilt': 0.09,
                'rotation_speed': 0.004,
                'orbit_speed': 0.008,
                'initial_phase': 1.2,
                'color': 0xa9a9a9,
                'model_scale': 6,
                'description': "Mercury is the smallest and innermost planet in the Solar System. "
                               "It completes an orbit around the Sun every 88 Earth days.",
            },
            {
                'name': "Venus",
                'orbit_radius': 11000,
                'axial_tilt': 532.2,
                'rotation_speed': 0.002,
                'orbit_speed': 0.006,
                'initial_phase': 3.7,
                'color': 0xe6e6e6,
                'model_scale': 7.34,
                'description': "Venus is the second planet from the Sun and Earth's closest planetary "
                               "neighbor. It's similar in structure and size to Earth, but its thick "
                               "atmosphere traps heat in a runaway greenhouse effect.",
            },
            {
                'name': "Earth",
                'orbit_radius': 16000,
                'axial_tilt': 70.32,
                'rotation_speed': 0.01,
                'orbit_speed': 0.005,
                'initial_phase': 5.1,
                'color': 0x3366ff,
                'model_scale': 10,
                'description': "Earth is the third planet from the Sun and the only astronomical "
                               "object known to harbor life. About 71% of Earth's surface is "
                               "water-covered.",
            },
            {
                'name': "Moon",
                'parent': "Earth",
                'orbit_radius': 1500,
                'axial_tilt': 6.68,
                'rotation_speed': 0.01,
                'orbit_speed': 0.05,
                'initial_phase': 0,
                'color': 0xcccccc,
                'model_scale': 2,
                'description': "The Moon is Earth's only natural satellite. It is the fifth-largest "
                               "satellite in the Solar System and the largest among planetary "
                               "satellites relative to the size of the planet that it orbits.",
            },
            {
                'name': "Mars",
                'orbit_radius': 24000,
                'axial_tilt': 75.57,
                'rotation_speed': 0.008,
                'orbit_speed': 0.004,
                'initial_phase': 0.6,
                'color': 0xcc3300,
                'model_scale': 7,
                'description': "Mars is the fourth planet from the Sun and the second-smallest planet "
                               "in the Solar System. Known as the 'Red Planet' due to its reddish "
                               "appearance from iron oxide on its surface.",
            },
            {
                'name': "Jupiter",
                'orbit_radius': 32000,
                'axial_tilt': 9.39,
                'rotation_speed': 0.01,
                'orbit_speed': 0.002,
                'initial_phase': 2.2,
                'color': 0xe6b800,
                'model_scale': 18,
                'description': "Jupiter is the fifth planet from the Sun and the largest in the Solar "
                               "System. It's a gas giant with a mass two and a half times that of all "
                               "the other planets combined.",
            },
            {
                'name': "Saturn",
                'orbit_radius': 40000,
                'axial_tilt': 80.19,
                'rotation_speed': 0.008,
                'orbit_speed': 0.0015,
                'initial_phase': 4.8,
                'color': 0xd9c36c,
                'model_scale': 2.0,
                'description': "Saturn is the sixth planet from the Sun and has the most extensive ring "
                               "system of any planet. It's known for its prominent rings, which are "
                               "mostly made of ice particles with a smaller amount of rocky debris.",
            },
            {
                'name': "Uranus",
                'orbit_radius': 48000,
                'axial_tilt': 293.31,
                'rotation_speed': 0.012,
                'orbit_speed': 0.001,
                'initial_phase': 3.2,
                'color': 0x99ccff,
                'model_scale': 8,
                'description': "Uranus is the seventh planet from the Sun. It has the third-largest "
                               "planetary radius and fourth-largest planetary mass in the Solar System. "
                               "Like the other gas giants, it has no solid surface.",
            },
            {
                'name': "Neptune",
                'orbit_radius': 56000,
                'axial_tilt': 84.96,
                'rotation_speed': 0.01,
                'orbit_speed': 0.0008,
                'initial_phase': 1.8,
                'color': 0x0066ff,
                'model_scale': 8,
                'description': "Neptune is the eighth and farthest planet from the Sun. It's the "
                               "fourth-largest planet by diameter and the densest giant planet. "
                               "Neptune's atmosphere features active and visible weather patterns.",
            },
        ],
    }


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load a YAML config and merge it over the defaults.

    Relative `assets.models_dir` is resolved against the config file's
    directory.
    """
    config = _default_config()
    if not config_path:
        return config

    path = Path(config_path)
    with open(path, 'r') as f:
        try:
            user = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"{path}: invalid YAML: {exc}") from exc
    if not isinstance(user, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping")

    for section, values in user.items():
        if section == 'bodies':
            config['bodies'] = values
        elif section in config and isinstance(values, dict):
            config[section].update(values)
        else:
            raise ConfigurationError(f"{path}: unknown section '{section}'")

    models_dir = config['assets'].get('models_dir')
    if models_dir and not Path(models_dir).is_absolute():
        config['assets']['models_dir'] = str((path.parent / models_dir).resolve())

    logger.info("Loaded configuration from %s", path)
    return config


def parse_bodies(config: Dict) -> List[BodyConfig]:
    """Turn the `bodies` section into typed records."""
    bodies = config.get('bodies')
    if not bodies:
        raise ConfigurationError("Configuration defines no bodies")

    models_dir = config.get('assets', {}).get('models_dir')
    records = []
    for entry in bodies:
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Body entry must be a mapping, got {entry!r}")
        unknown = set(entry) - BODY_KEYS
        if unknown:
            raise ConfigurationError(f"{entry.get('name', '?')}: unknown keys {sorted(unknown)}")
        if 'name' not in entry:
            raise ConfigurationError(f"Body entry without a name: {entry!r}")

        values = copy.deepcopy(entry)
        values['color'] = parse_color(values.get('color'))
        model = values.get('model')
        if model and models_dir and not Path(model).is_absolute():
            values['model'] = str(Path(models_dir) / model)

        records.append(BodyConfig(**values))
    return records


def build_registry(config: Dict) -> BodyRegistry:
    return BodyRegistry(parse_bodies(config))


def simulation_settings(config: Dict) -> SimulationSettings:
    section = config.get('simulation', {})
    try:
        settings = SimulationSettings(**section)
    except TypeError as exc:
        raise ConfigurationError(f"simulation: {exc}")
    if settings.time_increment <= 0:
        raise ConfigurationError("simulation.time_increment must be > 0")
    if settings.load_budget < 1:
        raise ConfigurationError("simulation.load_budget must be >= 1")
    return settings


def camera_settings(config: Dict) -> CameraSettings:
    section = dict(config.get('camera', {}))
    for key in ('position', 'target'):
        if key in section:
            section[key] = tuple(float(v) for v in section[key])
    try:
        return CameraSettings(**section)
    except TypeError as exc:
        raise ConfigurationError(f"camera: {exc}")


def make_camera(settings: CameraSettings, aspect_ratio: float = 16 / 9) -> Camera:
    return Camera(
        position=np.array(settings.position),
        target=np.array(settings.target),
        fov=settings.fov,
        near=settings.near,
        far=settings.far,
        aspect_ratio=aspect_ratio,
        max_distance=settings.max_distance,
    )
