"""Path tracing integrator.

This module implements the rendering kernel: rays leave the camera, bounce off
spheres according to their materials and pick up the sky color when they
escape. Each launch of the render kernel adds one sample per pixel to a float
accumulation buffer; read-out divides by the sample count.

Radiance along a path is the product of the attenuations of every bounce
times the sky color at the end:

    trace(ray, depth):
        miss                          -> sky(ray.direction)
        hit, absorbed or depth >= 50  -> black
        hit, scattered                -> attenuation * trace(scattered, depth + 1)

The recursion is unrolled into a loop that carries the running throughput.
The scatter draw happens before the depth check, so a path that runs out of
depth still consumes the random numbers of its last bounce.

Sub-pixel jitter and every scattering decision draw from the pixel's own
random stream (see ``src.lux.core.sampler``). Renders are therefore
reproducible for a given seed and independent of thread scheduling.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.camera.pinhole import setup_camera
    >>> from src.lux.core.integrator import render_image, setup_render_target
    >>> from src.lux.scene.intersection import upload_scene
    >>> from src.lux.scene.presets import create_default_scene
    >>>
    >>> scene, camera = create_default_scene()
    >>> upload_scene(scene)
    >>> setup_camera(camera)
    >>> setup_render_target(200, 100, seed=0)
    >>> render_image(num_samples=100)
"""

import logging

import numpy as np
import taichi as ti
import taichi.math as tm

from src.lux.camera.pinhole import get_ray
from src.lux.core.sampler import random_f32, seed_streams
from src.lux.materials.dielectric import scatter_dielectric_by_id
from src.lux.materials.lambert import scatter_lambert_by_id
from src.lux.materials.metallic import scatter_metallic_by_id
from src.lux.scene.intersection import (
    MaterialType,
    closest_intersection,
    material_type_indices,
    material_types,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = 50

# Sky gradient endpoints, blended by the ray's vertical direction
SKY_HORIZON = vec3(1.0, 1.0, 1.0)
SKY_ZENITH = vec3(0.5, 0.7, 1.0)

_LAMBERT = int(MaterialType.LAMBERT)
_METALLIC = int(MaterialType.METALLIC)
_DIELECTRIC = int(MaterialType.DIELECTRIC)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())
_seed = ti.field(dtype=ti.u32, shape=())

# Radiance sums, indexed [x, y] with y = 0 the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Samples accumulated so far (same for every pixel)
_total_samples = ti.field(dtype=ti.i32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int, seed: int = 0) -> None:
    """Initialize the render target buffers and random streams.

    The buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT
    to avoid Taichi kernel recompilation issues.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).
        seed: Seed for the per-pixel random streams.

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _seed[None] = seed & 0xFFFFFFFF
    _render_target_initialized[None] = 1
    logger.debug("Render target %dx%d, seed %d", width, height, seed)

    clear_render_target()


def clear_render_target() -> None:
    """Zero the accumulation buffer and re-seed the random streams.

    After clearing, rendering the same number of samples reproduces the
    previous image exactly.
    """
    _color_buffer.fill(0.0)
    _total_samples[None] = 0
    if _render_target_initialized[None] == 1:
        width, height = get_image_dimensions()
        seed_streams(int(_seed[None]), width * height)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Sky and Material Dispatch
# =============================================================================


@ti.func
def sample_sky(direction: vec3) -> vec3:
    """Sky color for an escaping ray.

    Linear blend from white at the horizon (and below) to light blue
    straight up, by ``t = 0.5 * (direction.y + 1)``.
    """
    t = 0.5 * (direction.y + 1.0)
    return (1.0 - t) * SKY_HORIZON + t * SKY_ZENITH


@ti.func
def _scatter_material(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    """Dispatch to the scatter function of the hit material.

    Args:
        material_id: Entry in the scene material table.
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal from the hit record.
        stream: Random stream of the pixel being traced.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    mat_type = material_types[material_id]
    type_index = material_type_indices[material_id]

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == _LAMBERT:
        scattered_direction, attenuation, did_scatter = scatter_lambert_by_id(
            type_index, normal, stream
        )
    elif mat_type == _METALLIC:
        scattered_direction, attenuation, did_scatter = scatter_metallic_by_id(
            type_index, incident_direction, normal, stream
        )
    elif mat_type == _DIELECTRIC:
        scattered_direction, attenuation, did_scatter = scatter_dielectric_by_id(
            type_index, incident_direction, normal, stream
        )

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace(origin: vec3, direction: vec3, depth: ti.i32, stream: ti.i32) -> vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized).
        depth: Bounce count of this ray; camera rays start at 0.
        stream: Random stream to draw from.

    Returns:
        The radiance estimate (RGB).
    """
    ray_origin = origin
    ray_direction = direction
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current_depth = depth

    # Active flag for path continuation (no break inside ti.func loops)
    active = 1
    while active == 1:
        rec = closest_intersection(ray_origin, ray_direction)

        if rec.hit == 0:
            radiance = throughput * sample_sky(ray_direction)
            active = 0
        else:
            scattered_direction, attenuation, did_scatter = _scatter_material(
                rec.material_id, ray_direction, rec.normal, stream
            )

            if did_scatter == 0 or current_depth >= MAX_DEPTH:
                # Absorbed or out of depth: contributes black
                active = 0
            else:
                throughput *= attenuation
                ray_origin = rec.point
                ray_direction = scattered_direction
                current_depth += 1

    return radiance


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_one_spp(width: ti.i32, height: ti.i32):
    """Add one sample to every pixel of the accumulation buffer."""
    for x, y in ti.ndrange(width, height):
        stream = y * width + x

        s = (ti.cast(x, ti.f32) + random_f32(stream)) / ti.cast(width, ti.f32)
        t = (ti.cast(height - y, ti.f32) + random_f32(stream)) / ti.cast(height, ti.f32)

        ray = get_ray(s, t)
        color = trace(ray.origin, ray.direction, 0, stream)

        _color_buffer[x, y] += color


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, depth: ti.i32, stream: ti.i32) -> vec3:
    result = vec3(0.0, 0.0, 0.0)
    for _ in range(1):
        result = trace(origin, tm.normalize(direction), depth, stream)
    return result


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
    stream: int = 0,
) -> tuple[float, float, float]:
    """Trace a single ray against the uploaded scene.

    This is a Python-callable function for testing. The direction is
    normalized first. The stream must have been seeded, for example by
    ``setup_render_target`` or ``seed_streams``.

    Args:
        origin: Ray origin.
        direction: Ray direction.
        depth: Starting bounce count (MAX_DEPTH means no further bounces).
        stream: Random stream to draw from.

    Returns:
        Tuple of (R, G, B) radiance.
    """
    color = _trace_single_ray(vec3(*origin), vec3(*direction), depth, stream)
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(num_samples: int = 1) -> None:
    """Render the image with the specified number of samples per pixel.

    Accumulates into the color buffer. Can be called multiple times to add
    more samples; the random streams carry on where they stopped, so
    splitting a sample count into batches does not change the result.

    Args:
        num_samples: Number of samples to render per pixel.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    for _ in range(num_samples):
        _render_one_spp(width, height)
    _total_samples[None] += num_samples


def get_total_samples() -> int:
    """Get the number of samples per pixel accumulated so far.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    return int(_total_samples[None])


def get_averaged_image_numpy() -> np.ndarray:
    """Get the averaged radiance as a NumPy array.

    Non-finite values are replaced by zero. Values are not clamped.
    The array shape is (height, width, 3), top row first, dtype float32.
    Before any sample has been rendered the image is all zeros.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    samples = max(get_total_samples(), 1)

    # Extract active region and transpose from (width, height, 3) to (height, width, 3)
    image = _color_buffer.to_numpy()[:width, :height, :]
    image = np.transpose(image, (1, 0, 2)) / np.float32(samples)

    # Check for NaN/Inf and replace with zero
    image = np.where(np.isfinite(image), image, 0.0)

    return image.astype(np.float32)
