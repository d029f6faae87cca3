"""Core rendering components.

Components:
    sampler: Per-pixel PCG random streams
    ray: Ray dataclass and vector helpers
    integrator: Path tracing loop, sky model and render target
    renderer: Host-side render API and RGB8 quantization

The integrator and renderer depend on the scene and camera modules and are
not imported here to avoid circular imports. Import them directly:

    from src.lux.core.integrator import render_image
    from src.lux.core.renderer import Renderer, render
"""

from .ray import (
    Ray,
    length_squared,
    make_ray,
    random_in_unit_sphere,
    ray_at,
    reflect,
    refract,
    schlick,
    vec3,
)
from .sampler import random_f32, seed_streams

__all__ = [
    "Ray",
    "vec3",
    "ray_at",
    "make_ray",
    "length_squared",
    "reflect",
    "refract",
    "schlick",
    "random_in_unit_sphere",
    "random_f32",
    "seed_streams",
]
