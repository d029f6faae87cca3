"""Sphere primitive with projection-form ray-sphere intersection.

The intersection projects the vector from the ray origin to the sphere center
onto the (unit length) ray direction, then compares the squared distance of the
center from the ray line against the squared radius:

    hypotenuse  = center - origin
    t_proj      = dot(hypotenuse, direction)
    opposite_sq = dot(hypotenuse, hypotenuse) - t_proj^2

A hit requires ``opposite_sq <= radius^2`` and ``t_proj >= HIT_EPSILON``. The
epsilon keeps a scattered ray from immediately re-hitting the surface it
leaves.

The radius may be negative. Only radius^2 enters the distance test, but the
normal is ``(point - center) / radius``, so a negative radius turns the normal
inward and the sphere behaves as a hollow shell.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.geometry.sphere import hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Minimum accepted hit distance (self-intersection avoidance)
HIT_EPSILON = 0.001


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
        distance: Distance along the ray to the intersection.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The surface normal ``(point - center) / radius``. Unit length;
            points inward for negative radii. Only valid if hit == 1.
        material_id: The material of the hit object, -1 when not yet assigned
            or on a miss.
    """

    hit: ti.i32
    distance: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        distance=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Returns the near root when it lies beyond HIT_EPSILON. When the ray origin
    is inside the sphere the near root falls behind the origin and the far root
    is used instead, so rays travelling through a dielectric find the exit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray. Must be unit length.
        center: The center of the sphere.
        radius: The radius of the sphere; negative values invert the normal.

    Returns:
        A HitRecord (material_id left at -1). Check the hit field to determine
        if an intersection occurred.
    """
    hypotenuse = center - ray_origin
    t_proj = tm.dot(hypotenuse, ray_direction)
    opposite_sq = tm.dot(hypotenuse, hypotenuse) - t_proj * t_proj
    radius_sq = radius * radius

    result = make_miss_record()

    if opposite_sq <= radius_sq and t_proj >= HIT_EPSILON:
        internal = ti.sqrt(radius_sq - opposite_sq)
        distance = t_proj - internal
        if distance < HIT_EPSILON:
            distance = t_proj + internal

        point = ray_origin + distance * ray_direction
        result = HitRecord(
            hit=1,
            distance=distance,
            point=point,
            normal=(point - center) / radius,
            material_id=-1,
        )

    return result
