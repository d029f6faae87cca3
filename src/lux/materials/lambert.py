"""Lambert (diffuse) material implementation.

Diffuse scattering offsets the surface normal by a random point inside the
unit sphere and normalizes the sum:

    direction = normalize(normal + random_in_unit_sphere())

This is not exact cosine-weighted hemisphere sampling, but it is the
distribution the reference renders are produced with. A Lambert surface
never absorbs a ray; the attenuation is the albedo.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.materials.lambert import scatter_lambert
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambert(albedo, normal, stream)
"""

import taichi as ti
import taichi.math as tm

from src.lux.core.ray import random_in_unit_sphere

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambert(albedo: vec3, normal: vec3, stream: ti.i32):
    """Sample a scattered direction for a Lambert material.

    Args:
        albedo: The diffuse reflectance color (RGB).
        normal: The surface normal at the hit point (unit length).
        stream: Random stream to draw from.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The sampled direction (normalized).
        - attenuation: The albedo.
        - did_scatter: Always 1.
    """
    scattered_direction = tm.normalize(normal + random_in_unit_sphere(stream))
    return scattered_direction, albedo, 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambert materials in the scene
MAX_LAMBERT_MATERIALS = 1024

lambert_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERT_MATERIALS)
num_lambert_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambert_materials() -> None:
    """Clear all Lambert materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambert_materials[None] = 0


def add_lambert_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambert material to the material registry.

    Args:
        albedo: The diffuse reflectance color as (R, G, B). Not validated.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_lambert_materials[None]
    if idx >= MAX_LAMBERT_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambert materials ({MAX_LAMBERT_MATERIALS}) exceeded"
        )

    lambert_albedos[idx] = [albedo[0], albedo[1], albedo[2]]
    num_lambert_materials[None] = idx + 1
    return idx


def get_lambert_material_count() -> int:
    """Get the number of Lambert materials in the registry."""
    return int(num_lambert_materials[None])


@ti.func
def scatter_lambert_by_id(material_idx: ti.i32, normal: vec3, stream: ti.i32):
    """Scatter off a Lambert material looked up by registry index."""
    return scatter_lambert(lambert_albedos[material_idx], normal, stream)
