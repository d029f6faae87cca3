"""Host-side rendering API.

This module wraps the integrator with:
- ``render()``: one call from a Scene and Camera to an RGB8 image
- ``Renderer``: batch rendering with progress callbacks, reset and save
- ``to_rgb8()``: gamma-2 quantization of averaged radiance

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.core.renderer import render
    >>> from src.lux.scene.presets import create_default_scene
    >>>
    >>> scene, camera = create_default_scene(aspect_ratio=2.0)
    >>> pixels = render(scene, camera, 200, 100, num_samples=100, seed=0)
    >>> pixels.shape
    (100, 200, 3)
"""

import logging
import time
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from src.lux.camera.pinhole import Camera, setup_camera
from src.lux.core.integrator import (
    clear_render_target,
    get_averaged_image_numpy,
    get_total_samples,
    render_image,
    setup_render_target,
)
from src.lux.output.export import save_png
from src.lux.scene.intersection import upload_scene
from src.lux.scene.manager import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


def to_rgb8(radiance: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Quantize averaged linear radiance to 8-bit RGB.

    Applies gamma 2 (square root), scales by 255.99, clamps to [0, 255] and
    truncates. Values at or above 1.0 saturate to 255.

    Args:
        radiance: Non-negative radiance array of any shape.

    Returns:
        A uint8 array of the same shape.
    """
    gamma_corrected = np.sqrt(np.maximum(radiance, 0.0))
    scaled = np.clip(gamma_corrected * 255.99, 0.0, 255.0)
    return scaled.astype(np.uint8)


class Renderer:
    """A progressive renderer that accumulates samples over time.

    The scene and camera are read from the uploaded Taichi fields
    (``upload_scene`` and ``setup_camera``); the renderer owns the render
    target and its random streams.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        seed: Seed of the per-pixel random streams.
    """

    def __init__(self, width: int, height: int, seed: int = 0) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            seed: Seed for the per-pixel random streams.

        Raises:
            ValueError: If dimensions are invalid.
        """
        self._width = width
        self._height = height
        self._seed = seed
        setup_render_target(width, height, seed)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return get_total_samples()

    def reset(self) -> None:
        """Clear the accumulator and re-seed the random streams."""
        clear_render_target()

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples with an optional progress callback.

        Accumulates the specified number of samples into the existing buffer.
        The batch size only affects how often the callback runs; the image
        is the same for any batch size.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Number of samples to render before each callback.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).
        """
        for _ in self.render_progressive(num_samples, batch_size, callback):
            pass

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples, yielding progress after each batch.

        Args:
            num_samples: Total number of samples to add.
            batch_size: Number of samples to render before each yield.
            callback: Optional callback called before each yield.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        if num_samples <= 0:
            return

        batch_size = max(1, batch_size)
        target_samples = self.sample_count + num_samples
        logger.info(
            "Rendering %dx%d, %d samples (seed %d)",
            self._width,
            self._height,
            num_samples,
            self._seed,
        )
        start = time.perf_counter()

        remaining = num_samples
        while remaining > 0:
            batch = min(batch_size, remaining)
            render_image(batch)
            remaining -= batch
            logger.debug("Rendered %d/%d samples", self.sample_count, target_samples)

            if callback is not None:
                callback(self.sample_count, target_samples)
            yield (self.sample_count, target_samples)

        logger.info("Rendered %d samples in %.2fs", num_samples, time.perf_counter() - start)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear radiance, shape (height, width, 3)."""
        return get_averaged_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the gamma-corrected 8-bit image, shape (height, width, 3)."""
        return to_rgb8(self.get_image_numpy())

    def save_image(self, filepath: str | Path) -> Path:
        """Save the 8-bit image as a PNG, creating parent directories."""
        return save_png(self.get_image_uint8(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"seed={self.seed}, samples={self.sample_count})"
        )


def render(
    scene: Scene,
    camera: Camera,
    image_width: int,
    image_height: int,
    num_samples: int,
    seed: int = 0,
) -> npt.NDArray[np.uint8]:
    """Render a scene to an RGB8 image.

    Args:
        scene: The objects to render.
        camera: The camera to render through.
        image_width: Image width in pixels.
        image_height: Image height in pixels.
        num_samples: Samples per pixel.
        seed: Seed for the per-pixel random streams. The same seed, scene,
            camera and sample count always give the same image.

    Returns:
        A (image_height, image_width, 3) uint8 array, top row first.

    Raises:
        ValueError: If the image size is invalid or the scene holds an
            unsupported object.
        RuntimeError: If the scene exceeds field capacity.
    """
    upload_scene(scene)
    setup_camera(camera)

    renderer = Renderer(image_width, image_height, seed=seed)
    renderer.render(num_samples, batch_size=max(1, num_samples))
    return renderer.get_image_uint8()
