"""Material scattering functions and per-type registries.

Components:
    lambert: Diffuse scattering
    metallic: Fuzzy mirror reflection
    dielectric: Refraction with Schlick-weighted reflection

Every scatter function returns ``(direction, attenuation, did_scatter)``.
Material registries are Taichi fields, so import these modules after
``ti.init``.
"""

from .dielectric import (
    add_dielectric_material,
    clear_dielectric_materials,
    get_dielectric_material_count,
    reflect_probability,
    scatter_dielectric,
)
from .lambert import (
    add_lambert_material,
    clear_lambert_materials,
    get_lambert_material_count,
    scatter_lambert,
)
from .metallic import (
    add_metallic_material,
    clear_metallic_materials,
    get_metallic_material_count,
    scatter_metallic,
)

__all__ = [
    "scatter_lambert",
    "add_lambert_material",
    "clear_lambert_materials",
    "get_lambert_material_count",
    "scatter_metallic",
    "add_metallic_material",
    "clear_metallic_materials",
    "get_metallic_material_count",
    "scatter_dielectric",
    "reflect_probability",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
]
