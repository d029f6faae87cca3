"""Scene upload and closest-hit queries.

Spheres are stored in Taichi fields (Structure of Arrays). Every object gets
its own entry in the material table, so material id ``i`` always belongs to
object ``i``. The material table maps an id to a material type and an index
into that type's registry.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.scene.intersection import upload_scene, query_closest_intersection
    >>> upload_scene(scene)
    >>> hit = query_closest_intersection((0, 0, 0), (0, 0, -1))
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti
import taichi.math as tm

from src.lux.geometry.sphere import HitRecord, hit_sphere, make_miss_record
from src.lux.materials.dielectric import add_dielectric_material, clear_dielectric_materials
from src.lux.materials.lambert import add_lambert_material, clear_lambert_materials
from src.lux.materials.metallic import add_metallic_material, clear_metallic_materials
from src.lux.scene.objects import Dielectric, Lambert, Metallic, Sphere

if TYPE_CHECKING:
    from src.lux.scene.manager import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Material kinds, used to dispatch to a scatter function."""

    LAMBERT = 0
    METALLIC = 1
    DIELECTRIC = 2


# Maximum number of objects supported in the scene
MAX_SPHERES = 1024
MAX_MATERIALS = MAX_SPHERES

# Sphere storage: Structure of Arrays layout for GPU efficiency
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# material_types[i] is the MaterialType of material i,
# material_type_indices[i] its index in the per-type registry
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

# Result slot for host-side queries
_query_result = HitRecord.field(shape=())


def clear_scene() -> None:
    """Clear all uploaded spheres and materials.

    Resets the counts to zero. The field data is not cleared but will be
    overwritten when new objects are added.
    """
    num_spheres[None] = 0
    num_materials[None] = 0
    clear_lambert_materials()
    clear_metallic_materials()
    clear_dielectric_materials()


def _register_material(material) -> int:
    """Add a material to its type registry and the material table."""
    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    if isinstance(material, Lambert):
        material_type = MaterialType.LAMBERT
        type_index = add_lambert_material(material.albedo)
    elif isinstance(material, Metallic):
        material_type = MaterialType.METALLIC
        type_index = add_metallic_material(material.albedo, material.fuzz)
    elif isinstance(material, Dielectric):
        material_type = MaterialType.DIELECTRIC
        type_index = add_dielectric_material(material.refractive_index)
    else:
        raise ValueError(f"Unknown material type: {type(material).__name__}")

    material_types[material_id] = int(material_type)
    material_type_indices[material_id] = type_index
    num_materials[None] = material_id + 1
    return material_id


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int) -> int:
    """Add a sphere to the uploaded scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere; may be negative.
        material_id: The material table entry to shade the sphere with.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def upload_scene(scene: "Scene") -> None:
    """Replace the uploaded scene with the objects of ``scene``, in order.

    Raises:
        RuntimeError: If the scene exceeds field capacity.
        ValueError: If an object has an unsupported geometry or material.
    """
    clear_scene()
    for obj in scene.objects():
        if not isinstance(obj.geometry, Sphere):
            raise ValueError(f"Unknown geometry type: {type(obj.geometry).__name__}")
        material_id = _register_material(obj.material)
        add_sphere(obj.geometry.center, obj.geometry.radius, material_id)
    logger.debug("Uploaded %d objects", num_spheres[None])


def get_sphere_count() -> int:
    """Get the number of spheres in the uploaded scene."""
    return int(num_spheres[None])


def get_material_count() -> int:
    """Get the number of entries in the material table."""
    return int(num_materials[None])


@ti.func
def closest_intersection(ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Find the nearest sphere hit along a ray.

    Objects are tested in upload order and a hit only replaces the current
    one when it is strictly closer, so the first object wins exact ties.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray (unit length).

    Returns:
        The closest HitRecord with material_id filled in, or a miss record.
    """
    closest = tm.inf
    result = make_miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(ray_origin, ray_direction, sphere_centers[i], sphere_radii[i])
        if rec.hit == 1 and rec.distance < closest:
            closest = rec.distance
            rec.material_id = sphere_material_ids[i]
            result = rec

    return result


@ti.kernel
def _query_kernel(origin: vec3, direction: vec3):
    for _ in range(1):
        _query_result[None] = closest_intersection(origin, tm.normalize(direction))


@dataclass(frozen=True)
class IntersectionResult:
    """Host-side copy of a closest-hit query.

    Attributes:
        distance: Distance along the (normalized) ray.
        point: The hit point.
        normal: ``(point - center) / radius`` of the sphere hit.
        material_id: Index of the hit object in upload order.
    """

    distance: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    material_id: int


def query_closest_intersection(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> IntersectionResult | None:
    """Run ``closest_intersection`` for a single ray from the host.

    The direction is normalized before the query.

    Returns:
        An IntersectionResult, or None when the ray misses everything.
    """
    _query_kernel(vec3(*origin), vec3(*direction))
    if _query_result.hit[None] == 0:
        return None

    point = _query_result.point.to_numpy().astype(np.float64)
    normal = _query_result.normal.to_numpy().astype(np.float64)
    return IntersectionResult(
        distance=float(_query_result.distance[None]),
        point=(float(point[0]), float(point[1]), float(point[2])),
        normal=(float(normal[0]), float(normal[1]), float(normal[2])),
        material_id=int(_query_result.material_id[None]),
    )
