"""Ray data structure and vector utilities for the path tracer.

This module provides the Ray dataclass and the vector helpers shared by the
intersection, scattering and integrator code. All operations are Taichi
functions and run inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

from src.lux.core.sampler import random_f32

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Intersection and
            sky sampling assume unit length, so rays are normalized when built.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray with a normalized direction."""
    return Ray(origin=origin, direction=tm.normalize(direction))


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector."""
    return tm.dot(v, v)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction ``incident - 2 * dot(incident, normal) * normal``.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, ratio: ti.f32):
    """Refract an incident vector through a surface using Snell's law.

    The normal must face the side the incident ray comes from, i.e.
    ``dot(incident, normal) <= 0`` for a physically meaningful result.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The surface normal on the incident side (normalized).
        ratio: Ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        A tuple of (did_refract, refracted) where:
        - did_refract: 1 if refraction is possible, 0 on total internal reflection.
        - refracted: The refracted direction (not normalized), or zero vector
          on total internal reflection.
    """
    projected = tm.dot(incident, normal)
    discriminant = 1.0 - ratio * ratio * (1.0 - projected * projected)
    did_refract = 0
    refracted = vec3(0.0, 0.0, 0.0)
    if discriminant > 0.0:
        did_refract = 1
        refracted = ratio * (incident - normal * projected) - normal * ti.sqrt(discriminant)
    return did_refract, refracted


@ti.func
def schlick(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Refractive index of the material.

    Returns:
        ``r0 + (1 - r0) * (1 - cosine)^5`` with ``r0 = ((1 - ref_idx) / (1 + ref_idx))^2``.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_in_unit_sphere(stream: ti.i32) -> vec3:
    """Generate a random point strictly inside the unit sphere.

    Rejection sampling: points are drawn uniformly in [-1, 1]^3 until one has
    squared length below 1. Adding the result to a surface normal gives the
    approximate cosine-weighted diffuse distribution.

    Args:
        stream: Random stream to draw from.

    Returns:
        A random point with squared length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    while found == 0:
        p = 2.0 * vec3(random_f32(stream), random_f32(stream), random_f32(stream)) - 1.0
        if length_squared(p) < 1.0:
            found = 1
    return p
