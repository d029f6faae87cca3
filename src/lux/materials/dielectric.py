"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when the refraction discriminant is not positive

Which side of the surface the ray is on follows from the sign of
``dot(direction, normal)``. A positive dot means the ray is leaving the
medium: the normal is flipped, the index ratio is ``ior`` and the Schlick
cosine is ``ior * dot(d, n)``. Otherwise the ray is entering with ratio
``1 / ior`` and cosine ``-dot(d, n)``.

One uniform draw chooses between the mirror reflection and the refracted ray
with the Schlick reflectance as reflection probability (1 under total
internal reflection). The medium does not absorb, so the attenuation is white
and the ray always scatters.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     ior, incident_dir, normal, stream
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from src.lux.core.ray import reflect, refract, schlick
from src.lux.core.sampler import random_f32

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def reflect_probability(
    refractive_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
) -> ti.f32:
    """Probability that a dielectric reflects rather than refracts.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal from the hit record.

    Returns:
        1.0 under total internal reflection, otherwise the Schlick reflectance.
    """
    outward_normal, ratio, cosine = _orient(refractive_index, incident_direction, normal)
    did_refract, _ = refract(incident_direction, outward_normal, ratio)
    probability = 1.0
    if did_refract == 1:
        probability = schlick(cosine, refractive_index)
    return probability


@ti.func
def _orient(refractive_index: ti.f32, incident_direction: vec3, normal: vec3):
    """Pick the outward normal, index ratio and Schlick cosine for a hit."""
    d_dot_n = tm.dot(incident_direction, normal)
    magnitude = tm.length(incident_direction)

    outward_normal = normal
    ratio = 1.0 / refractive_index
    cosine = -d_dot_n / magnitude

    if d_dot_n > 0.0:
        # Exiting the medium
        outward_normal = -normal
        ratio = refractive_index
        cosine = refractive_index * d_dot_n / magnitude

    return outward_normal, ratio, cosine


@ti.func
def scatter_dielectric(
    refractive_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    """Compute the scattered direction for a dielectric material.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal from the hit record.
        stream: Random stream to draw from.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted direction (normalized).
        - attenuation: White (1, 1, 1).
        - did_scatter: Always 1.
    """
    outward_normal, ratio, cosine = _orient(refractive_index, incident_direction, normal)
    did_refract, refracted = refract(incident_direction, outward_normal, ratio)

    probability = 1.0
    if did_refract == 1:
        probability = schlick(cosine, refractive_index)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if random_f32(stream) < probability:
        scattered_direction = tm.normalize(reflect(incident_direction, normal))
    else:
        scattered_direction = tm.normalize(refracted)

    return scattered_direction, vec3(1.0, 1.0, 1.0), 1


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 1024

dielectric_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(refractive_index: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        refractive_index: Index of refraction. Default is 1.5 (typical glass).
            Not validated; 1.0 gives a non-refracting, fully transmissive
            material. Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_refractive_indices[idx] = refractive_index
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def scatter_dielectric_by_id(
    material_idx: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    """Scatter off a dielectric material looked up by registry index."""
    return scatter_dielectric(
        dielectric_refractive_indices[material_idx],
        incident_direction,
        normal,
        stream,
    )
