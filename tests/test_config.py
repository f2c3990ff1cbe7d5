"""
Test Suite: Configuration
=========================
YAML loading, default merging and validation.

Tests:
- Built-in defaults describe the reference solar system
- User sections merge over the defaults; `bodies` replaces them
- Unknown sections / keys and invalid values raise ConfigurationError
- Relative model paths resolve against the config file
- The shipped config loads and the headless entry point runs
"""

import numpy as np
import pytest
import sys
import yaml
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orrery.config import (
    build_registry,
    camera_settings,
    load_config,
    make_camera,
    parse_bodies,
    simulation_settings,
)
from orrery.errors import ConfigurationError
from orrery.main import build_simulation, main

ROOT = Path(__file__).parent.parent
SHIPPED_CONFIG = ROOT / "config" / "solar_system.yaml"


def write_config(tmp_path, data, name="orrery.yaml"):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestDefaults:
    """Configuration without a file"""

    def test_reference_bodies(self):
        registry = build_registry(load_config())

        assert len(registry) == 10
        assert registry.central_body.id == "Sun"
        assert registry.get("Moon").parent_id == "Earth"
        assert registry.get("Moon").config.orbit_radius == 1500

    def test_default_settings(self):
        config = load_config()
        settings = simulation_settings(config)

        assert settings.time_increment == pytest.approx(0.01)
        assert settings.highlight_scale == pytest.approx(1.05)
        assert settings.wrap_angles is True

        camera = camera_settings(config)
        assert camera.position == (0.0, 15000.0, 30000.0)
        assert camera.max_distance == 80000.0

    def test_defaults_are_not_shared(self):
        config = load_config()
        config['bodies'].clear()
        assert len(load_config()['bodies']) == 10


class TestMerging:
    """User YAML over the defaults"""

    def test_section_merges_key_by_key(self, tmp_path):
        path = write_config(tmp_path, {'simulation': {'time_increment': 0.05}})
        settings = simulation_settings(load_config(path))

        assert settings.time_increment == pytest.approx(0.05)
        assert settings.highlight_scale == pytest.approx(1.05)

    def test_bodies_replace_defaults(self, tmp_path):
        path = write_config(tmp_path, {'bodies': [
            {'name': "Star"},
            {'name': "World", 'orbit_radius': 50, 'orbit_speed': 0.1, 'color': "#00ff00"},
        ]})
        registry = build_registry(load_config(path))

        assert registry.ids() == ["Star", "World"]
        assert registry.get("World").config.color == (0.0, 1.0, 0.0)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert len(load_config(str(path))['bodies']) == 10

    def test_models_dir_relative_to_config(self, tmp_path):
        path = write_config(tmp_path, {
            'assets': {'models_dir': "models"},
            'bodies': [{'name': "Star", 'model': "star.glb"}],
        })
        bodies = parse_bodies(load_config(path))

        assert Path(bodies[0].model) == (tmp_path / "models" / "star.glb").resolve()

    def test_absolute_model_path_kept(self, tmp_path):
        model = str(tmp_path / "elsewhere" / "star.glb")
        path = write_config(tmp_path, {
            'assets': {'models_dir': "models"},
            'bodies': [{'name': "Star", 'model': model}],
        })
        assert parse_bodies(load_config(path))[0].model == model

    def test_make_camera(self):
        camera = make_camera(camera_settings(load_config()), aspect_ratio=2.0)
        np.testing.assert_allclose(camera.position, [0.0, 15000.0, 30000.0])
        assert camera.aspect_ratio == 2.0
        assert camera.max_distance == 80000.0


class TestValidation:
    """Rejected configurations"""

    def test_unknown_section(self, tmp_path):
        path = write_config(tmp_path, {'physics': {'gravity': True}})
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("simulation: {time_increment: [0.1\n")
        with pytest.raises(ConfigurationError, match="invalid YAML"):
            load_config(str(path))

    def test_non_mapping_top_level(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_unknown_body_key(self, tmp_path):
        path = write_config(tmp_path, {'bodies': [{'name': "Star", 'mass': 1.0}]})
        with pytest.raises(ConfigurationError, match="mass"):
            build_registry(load_config(path))

    def test_body_without_name(self, tmp_path):
        path = write_config(tmp_path, {'bodies': [{'orbit_radius': 0}]})
        with pytest.raises(ConfigurationError):
            build_registry(load_config(path))

    def test_empty_bodies(self, tmp_path):
        path = write_config(tmp_path, {'bodies': []})
        with pytest.raises(ConfigurationError):
            build_registry(load_config(path))

    def test_unknown_simulation_key(self, tmp_path):
        path = write_config(tmp_path, {'simulation': {'speed_of_light': 1}})
        with pytest.raises(ConfigurationError):
            simulation_settings(load_config(path))

    def test_non_positive_increment(self, tmp_path):
        path = write_config(tmp_path, {'simulation': {'time_increment': 0}})
        with pytest.raises(ConfigurationError):
            simulation_settings(load_config(path))

    def test_unknown_camera_key(self, tmp_path):
        path = write_config(tmp_path, {'camera': {'zoom': 3}})
        with pytest.raises(ConfigurationError):
            camera_settings(load_config(path))


class TestShippedConfig:
    def test_loads(self):
        config = load_config(str(SHIPPED_CONFIG))
        registry = build_registry(config)

        assert registry.central_body.id == "Sun"
        assert registry.get("Moon").parent_id == "Earth"
        simulation_settings(config)
        camera_settings(config)

    def test_build_simulation(self):
        sim = build_simulation(str(SHIPPED_CONFIG))
        assert len(sim.registry) == len(load_config(str(SHIPPED_CONFIG))['bodies'])


class TestEntryPoint:
    def test_headless_run(self, capsys):
        assert main(["--engine", "headless", "--frames", "50"]) == 0
        out = capsys.readouterr().out
        assert "Simulation complete" in out
        assert "Moon" in out

    def test_bad_config_exit_code(self, tmp_path):
        path = write_config(tmp_path, {'bodies': [{'name': "A"}, {'name': "B"}]})
        assert main(["--engine", "headless", "--config", path]) == 2

    def test_invalid_yaml_exit_code(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("bodies: [\n  - name: Sun\n")
        assert main(["--engine", "headless", "--config", str(path)]) == 2

    def test_summary_reports_every_body(self, tmp_path, capsys):
        path = write_config(tmp_path, {'bodies': [
            {'name': "Star"},
            {'name': "World", 'orbit_radius': 50, 'model': "missing.glb"},
        ]})
        assert main(["--engine", "headless", "--frames", "5", "--config", path]) == 0

        lines = capsys.readouterr().out.splitlines()
        star = next(line for line in lines if line.strip().startswith("Star"))
        world = next(line for line in lines if line.strip().startswith("World"))
        assert "spin=" in star and "not loaded" not in star
        assert "(not loaded)" in world

    def test_missing_config_exit_code(self, tmp_path):
        assert main(["--engine", "headless", "--config", str(tmp_path / "nope.yaml")]) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
