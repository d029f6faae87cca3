"""Unit tests for the look-at pinhole camera.

Tests cover:
- Basis and image plane derived by look_at
- Host-side ray_for
- Uploaded camera and get_ray inside a kernel
- Degenerate up vector
"""

import math

import numpy as np
import taichi as ti


def _simple_camera():
    from src.lux.camera.pinhole import Camera

    return Camera.look_at(
        position=(0.0, 0.0, 0.0),
        lookat=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        vertical_fov_degrees=90.0,
        aspect_ratio=2.0,
    )


class TestLookAt:
    """Tests for Camera.look_at."""

    def test_image_plane(self):
        camera = _simple_camera()
        assert np.allclose(camera.position, (0.0, 0.0, 0.0))
        assert np.allclose(camera.lower_left_corner, (-2.0, -1.0, -1.0))
        assert np.allclose(camera.horizontal_span, (4.0, 0.0, 0.0))
        assert np.allclose(camera.vertical_span, (0.0, 2.0, 0.0))

    def test_fov_sets_span(self):
        from src.lux.camera.pinhole import Camera

        camera = Camera.look_at((0, 0, 0), (0, 0, -1), (0, 1, 0), 60.0, 1.0)
        expected = 2.0 * math.tan(math.radians(30.0))
        assert abs(camera.vertical_span[1] - expected) < 1e-9
        assert abs(camera.horizontal_span[0] - expected) < 1e-9

    def test_oblique_camera_center_ray_points_at_target(self):
        from src.lux.camera.pinhole import Camera

        camera = Camera.look_at((-2.0, 2.0, 1.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0), 30.0, 2.0)
        _, direction = camera.ray_for(0.5, 0.5)
        expected = np.array([2.0, -2.0, -2.0]) / np.sqrt(12.0)
        assert np.allclose(direction, expected, atol=1e-9)

    def test_spans_are_orthogonal(self):
        from src.lux.camera.pinhole import Camera

        camera = Camera.look_at((3.0, 1.0, 2.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0), 45.0, 1.5)
        assert abs(np.dot(camera.horizontal_span, camera.vertical_span)) < 1e-9

    def test_degenerate_up_gives_nan(self):
        from src.lux.camera.pinhole import Camera

        with np.errstate(invalid="ignore", divide="ignore"):
            camera = Camera.look_at((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 1.0, 0.0), 45.0, 1.0)
        assert any(math.isnan(c) for c in camera.horizontal_span)


class TestRayFor:
    """Tests for host-side ray generation."""

    def test_center_ray(self):
        origin, direction = _simple_camera().ray_for(0.5, 0.5)
        assert np.allclose(origin, (0.0, 0.0, 0.0))
        assert np.allclose(direction, (0.0, 0.0, -1.0))

    def test_corner_ray(self):
        _, direction = _simple_camera().ray_for(0.0, 0.0)
        expected = np.array([-2.0, -1.0, -1.0]) / np.sqrt(6.0)
        assert np.allclose(direction, expected)


class TestGetRay:
    """Tests for the uploaded camera."""

    def test_setup_camera_info(self):
        from src.lux.camera.pinhole import get_camera_info, setup_camera

        setup_camera(_simple_camera())
        info = get_camera_info()
        assert np.allclose(info["position"], (0.0, 0.0, 0.0))
        assert np.allclose(info["lower_left"], (-2.0, -1.0, -1.0))
        assert np.allclose(info["horizontal"], (4.0, 0.0, 0.0))
        assert np.allclose(info["vertical"], (0.0, 2.0, 0.0))

    def test_get_ray_matches_host(self):
        from src.lux.camera.pinhole import get_ray, setup_camera

        camera = _simple_camera()
        setup_camera(camera)

        directions = ti.Vector.field(3, dtype=ti.f32, shape=3)
        coords = [(0.5, 0.5), (0.0, 0.0), (0.25, 0.9)]

        @ti.kernel
        def test_kernel():
            for i in ti.static(range(3)):
                ray = get_ray(coords[i][0], coords[i][1])
                directions[i] = ray.direction

        test_kernel()
        result = directions.to_numpy()
        for i, (s, t) in enumerate(coords):
            _, expected = camera.ray_for(s, t)
            assert np.allclose(result[i], expected, atol=1e-5)
