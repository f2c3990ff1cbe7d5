"""
Orrery - Main Entry Point
=========================
Builds the simulation from configuration and hands it to a renderer.

    orrery                              # ModernGL window, default system
    orrery --config config/solar_system.yaml
    orrery --engine headless --frames 500
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from .config import (
    build_registry,
    camera_settings,
    load_config,
    make_camera,
    simulation_settings,
)
from .errors import ConfigurationError
from .simulation import SolarSystemSimulation
from .ui import LoggingUI
from .visualization.engine_interface import create_renderer, get_recommended_engine
from .visualization.picking import Viewport

logger = logging.getLogger(__name__)


def build_simulation(config_path: Optional[str] = None,
                     viewport: Optional[Viewport] = None) -> SolarSystemSimulation:
    """Load configuration and assemble a simulation ready to start."""
    config = load_config(config_path)
    viewport = viewport or Viewport(1280, 720)

    return SolarSystemSimulation(
        registry=build_registry(config),
        settings=simulation_settings(config),
        ui=LoggingUI(),
        camera=make_camera(camera_settings(config), viewport.aspect_ratio),
        viewport=viewport,
    )


def _print_summary(sim: SolarSystemSimulation, real_time: float):
    """Print end-of-run status per body"""
    print("=" * 50)
    print(f"Simulation complete. Ticks: {sim.clock.ticks}, Sim time: {sim.clock.time:.2f}, "
          f"Real time: {real_time:.2f}s")
    print(f"Assets: {sim.tracker.loaded} loaded, {sim.tracker.failed} failed")
    for body_id, report in sim.registry.get_status_report().items():
        x, y, z = report['position']
        status = "" if report['loaded'] else "  (not loaded)"
        print(f"  {body_id:<8} x={x:10.1f} y={y:6.1f} z={z:10.1f} "
              f"spin={report['rotation']:5.2f}{status}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive 3D solar system")
    parser.add_argument("--config", type=str, default=None, help="YAML configuration file")
    parser.add_argument("--engine", type=str, default=None,
                        help="Renderer: moderngl or headless (default: best available)")
    parser.add_argument("--frames", type=int, default=1000,
                        help="Frames to run with the headless engine")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        sim = build_simulation(args.config)
    except (ConfigurationError, OSError) as e:
        logger.error("Cannot start: %s", e)
        return 2

    engine = args.engine or get_recommended_engine()
    renderer = create_renderer(engine)

    start_time = time.time()
    renderer.run(sim, frames=args.frames)
    _print_summary(sim, time.time() - start_time)
    return 0


if __name__ == "__main__":
    sys.exit(main())
