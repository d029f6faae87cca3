"""Tests for the host-side rendering API.

This module tests:
- to_rgb8 gamma and quantization
- Renderer sample accumulation, callbacks and generators
- Reset and image output
- The one-call render() entry point

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

import numpy as np
import pytest

from src.lux.scene.manager import Scene
from src.lux.scene.objects import Lambert


def _look_down_z(aspect_ratio: float = 1.0, vfov: float = 90.0):
    from src.lux.camera.pinhole import Camera

    return Camera.look_at((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 1.0, 0.0), vfov, aspect_ratio)


def _setup_small_scene():
    from src.lux.camera.pinhole import setup_camera
    from src.lux.scene.intersection import upload_scene

    scene = Scene()
    scene.add_sphere((0.0, 0.0, -2.0), 1.0, Lambert((0.5, 0.5, 0.5)))
    upload_scene(scene)
    setup_camera(_look_down_z())


class TestToRgb8:
    """Test gamma-2 quantization."""

    def test_sky_horizon_values(self):
        from src.lux.core.renderer import to_rgb8

        pixels = to_rgb8(np.array([0.75, 0.85, 1.0], dtype=np.float32))
        assert pixels.tolist() == [221, 236, 255]

    def test_zero_is_black(self):
        from src.lux.core.renderer import to_rgb8

        assert to_rgb8(np.zeros(3)).tolist() == [0, 0, 0]

    def test_values_above_one_saturate(self):
        from src.lux.core.renderer import to_rgb8

        assert to_rgb8(np.array([1.5, 4.0, 100.0])).tolist() == [255, 255, 255]

    def test_negative_values_clamp_to_zero(self):
        from src.lux.core.renderer import to_rgb8

        assert to_rgb8(np.array([-0.5])).tolist() == [0]

    def test_quarter_is_half_brightness(self):
        from src.lux.core.renderer import to_rgb8

        # sqrt(0.25) * 255.99 = 127.995, truncated
        assert to_rgb8(np.array([0.25])).tolist() == [127]

    def test_dtype_and_shape(self):
        from src.lux.core.renderer import to_rgb8

        pixels = to_rgb8(np.full((4, 5, 3), 0.5, dtype=np.float32))
        assert pixels.shape == (4, 5, 3)
        assert pixels.dtype == np.uint8


class TestRendererSamples:
    """Test sample accumulation."""

    def test_init_state(self):
        from src.lux.core.renderer import Renderer

        renderer = Renderer(32, 16, seed=5)
        assert renderer.width == 32
        assert renderer.height == 16
        assert renderer.seed == 5
        assert renderer.sample_count == 0

    def test_init_rejects_oversized_dimensions(self):
        from src.lux.core.renderer import Renderer

        with pytest.raises(ValueError, match="exceed maximum"):
            Renderer(4096, 100)

    def test_render_accumulates(self):
        from src.lux.core.renderer import Renderer

        _setup_small_scene()
        renderer = Renderer(8, 8)
        renderer.render(3)
        renderer.render(2, batch_size=2)
        assert renderer.sample_count == 5

    def test_zero_samples_is_noop(self):
        from src.lux.core.renderer import Renderer

        _setup_small_scene()
        renderer = Renderer(8, 8)
        renderer.render(0)
        assert renderer.sample_count == 0

    def test_reset(self):
        from src.lux.core.renderer import Renderer

        _setup_small_scene()
        renderer = Renderer(8, 8)
        renderer.render(4)
        renderer.reset()
        assert renderer.sample_count == 0
        assert np.all(renderer.get_image_numpy() == 0.0)

    def test_repr(self):
        from src.lux.core.renderer import Renderer

        renderer = Renderer(8, 4, seed=2)
        assert repr(renderer) == "Renderer(width=8, height=4, seed=2, samples=0)"


class TestRendererProgress:
    """Test progress callbacks and the generator interface."""

    def test_callback_called_per_batch(self):
        from src.lux.core.renderer import Renderer

        _setup_small_scene()
        renderer = Renderer(8, 8)
        calls = []
        renderer.render(10, batch_size=4, callback=lambda cur, tgt: calls.append((cur, tgt)))
        assert calls == [(4, 10), (8, 10), (10, 10)]

    def test_progressive_yields(self):
        from src.lux.core.renderer import Renderer

        _setup_small_scene()
        renderer = Renderer(8, 8)
        renderer.render(2)
        progress = list(renderer.render_progressive(3, batch_size=1))
        assert progress == [(3, 5), (4, 5), (5, 5)]

    def test_batch_size_does_not_change_image(self):
        from src.lux.core.renderer import Renderer

        _setup_small_scene()
        renderer = Renderer(8, 8, seed=11)
        renderer.render(6, batch_size=6)
        whole = renderer.get_image_uint8()

        renderer.reset()
        renderer.render(6, batch_size=1)
        assert np.array_equal(whole, renderer.get_image_uint8())


class TestRendererOutput:
    """Test image read-out and saving."""

    def test_image_shapes(self):
        from src.lux.core.renderer import Renderer

        _setup_small_scene()
        renderer = Renderer(12, 6)
        renderer.render(2)
        assert renderer.get_image_numpy().shape == (6, 12, 3)
        pixels = renderer.get_image_uint8()
        assert pixels.shape == (6, 12, 3)
        assert pixels.dtype == np.uint8

    def test_save_image(self, tmp_path):
        from src.lux.core.renderer import Renderer
        from src.lux.output.export import load_png

        _setup_small_scene()
        renderer = Renderer(12, 6)
        renderer.render(2)
        path = renderer.save_image(tmp_path / "out" / "image.png")
        assert path.exists()
        assert np.array_equal(load_png(path), renderer.get_image_uint8())


class TestRender:
    """Test the one-call render() entry point."""

    def test_shape_and_dtype(self):
        from src.lux.core.renderer import render

        scene = Scene()
        scene.add_sphere((0.0, 0.0, -2.0), 1.0, Lambert((0.5, 0.5, 0.5)))
        pixels = render(scene, _look_down_z(aspect_ratio=2.0), 20, 10, num_samples=2)
        assert pixels.shape == (10, 20, 3)
        assert pixels.dtype == np.uint8

    def test_narrow_view_of_horizon(self):
        from src.lux.core.renderer import render

        camera = _look_down_z(vfov=0.01)
        pixels = render(Scene(), camera, 1, 1, num_samples=4)
        assert pixels[0, 0].tolist() == [221, 236, 255]

    def test_same_seed_is_byte_identical(self):
        from src.lux.scene.presets import create_default_scene
        from src.lux.core.renderer import render

        scene, camera = create_default_scene(aspect_ratio=2.0)
        first = render(scene, camera, 20, 10, num_samples=4, seed=9)
        second = render(scene, camera, 20, 10, num_samples=4, seed=9)
        assert np.array_equal(first, second)
