"""Metallic (fuzzy mirror) material implementation.

The incident direction is mirrored about the normal and perturbed by a random
point inside a sphere of radius ``min(fuzz, 1)``:

    direction = normalize(reflect(d, n) + min(fuzz, 1) * random_in_unit_sphere())

Fuzz is clamped from above only. A negative fuzz is accepted as-is; since the
perturbation is symmetric it behaves like the same positive roughness.

A ray whose scattered direction does not leave the surface
(``dot(direction, n) <= 0``) is absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.materials.metallic import scatter_metallic
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_metallic(
    >>> #     albedo, fuzz, incident_dir, normal, stream
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from src.lux.core.ray import random_in_unit_sphere, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metallic(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    """Compute the scattered direction for a metallic material.

    Args:
        albedo: The reflective color (RGB).
        fuzz: Roughness of the reflection; values above 1 act as 1.
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal (normalized).
        stream: Random stream to draw from.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The fuzzed reflection (normalized).
        - attenuation: The albedo.
        - did_scatter: 1 if the direction leaves the surface, 0 if absorbed.
    """
    reflected = reflect(incident_direction, normal)
    fuzz_offset = tm.min(fuzz, 1.0) * random_in_unit_sphere(stream)
    scattered_direction = tm.normalize(reflected + fuzz_offset)

    did_scatter = 1
    if tm.dot(scattered_direction, normal) <= 0.0:
        did_scatter = 0

    return scattered_direction, albedo, did_scatter


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metallic materials in the scene
MAX_METALLIC_MATERIALS = 1024

metallic_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METALLIC_MATERIALS)
metallic_fuzzes = ti.field(dtype=ti.f32, shape=MAX_METALLIC_MATERIALS)
num_metallic_materials = ti.field(dtype=ti.i32, shape=())


def clear_metallic_materials() -> None:
    """Clear all metallic materials."""
    num_metallic_materials[None] = 0


def add_metallic_material(albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
    """Add a metallic material to the material registry.

    Args:
        albedo: The reflective color as (R, G, B). Not validated.
        fuzz: Reflection roughness. Stored unclamped; the clamp to 1 happens
            when scattering. Default is 0 (perfect mirror).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_metallic_materials[None]
    if idx >= MAX_METALLIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of metallic materials ({MAX_METALLIC_MATERIALS}) exceeded"
        )

    metallic_albedos[idx] = [albedo[0], albedo[1], albedo[2]]
    metallic_fuzzes[idx] = fuzz
    num_metallic_materials[None] = idx + 1
    return idx


def get_metallic_material_count() -> int:
    """Get the number of metallic materials in the registry."""
    return int(num_metallic_materials[None])


@ti.func
def scatter_metallic_by_id(
    material_idx: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    """Scatter off a metallic material looked up by registry index."""
    return scatter_metallic(
        metallic_albedos[material_idx],
        metallic_fuzzes[material_idx],
        incident_direction,
        normal,
        stream,
    )
