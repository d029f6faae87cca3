"""Unit tests for the built-in demo scene."""

import numpy as np

from src.lux.scene.objects import Dielectric, Lambert, Metallic


class TestDefaultScene:
    """Tests for create_default_scene."""

    def test_object_layout(self):
        from src.lux.scene.presets import create_default_scene

        scene, _ = create_default_scene()
        objects = scene.objects()
        assert len(objects) == 5

        ground, diffuse, metal, glass, bubble = objects
        assert ground.geometry.radius == 100.0
        assert ground.material == Lambert((0.8, 0.8, 0.0))
        assert diffuse.material == Lambert((0.1, 0.2, 0.5))
        assert metal.material == Metallic((0.8, 0.6, 0.2), fuzz=0.3)
        assert glass.material == Dielectric(1.5)
        # Inner surface of the hollow glass ball
        assert bubble.geometry.radius == -0.45
        assert bubble.geometry.center == glass.geometry.center

    def test_camera_looks_at_target(self):
        from src.lux.scene.presets import DEFAULT_LOOKAT, DEFAULT_LOOKFROM, create_default_scene

        _, camera = create_default_scene(aspect_ratio=2.0)
        origin, direction = camera.ray_for(0.5, 0.5)
        expected = np.subtract(DEFAULT_LOOKAT, DEFAULT_LOOKFROM)
        expected = expected / np.linalg.norm(expected)
        assert np.allclose(origin, DEFAULT_LOOKFROM)
        assert np.allclose(direction, expected, atol=1e-9)

    def test_camera_aspect_ratio(self):
        from src.lux.scene.presets import create_default_camera

        camera = create_default_camera(aspect_ratio=3.0)
        width = np.linalg.norm(camera.horizontal_span)
        height = np.linalg.norm(camera.vertical_span)
        assert np.isclose(width / height, 3.0)

    def test_camera_overrides(self):
        from src.lux.scene.presets import create_default_camera

        camera = create_default_camera(lookfrom=(0.0, 0.0, 5.0), lookat=(0.0, 0.0, 0.0), vfov=90.0)
        assert np.allclose(camera.position, (0.0, 0.0, 5.0))
        assert np.isclose(np.linalg.norm(camera.vertical_span), 2.0)
