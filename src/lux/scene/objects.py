"""Host-side value types describing a scene.

Geometry and materials are closed variant sets of frozen dataclasses. A
SceneObject pairs one geometry with one material by value; two objects built
from equal materials are independent once uploaded.

None of the parameters are validated. Albedos outside [0, 1], negative fuzz,
negative radii and refractive indices below 1 are all passed through to the
renderer unchanged.

Example:
    >>> from src.lux.scene.objects import Lambert, SceneObject, Sphere
    >>> ball = SceneObject(Sphere((0.0, 0.0, -1.0), 0.5), Lambert((0.1, 0.2, 0.5)))
"""

from dataclasses import dataclass
from typing import Any, Union

Vec3 = tuple[float, float, float]


def _to_vec3(values: Any) -> Vec3:
    """Convert any three-element sequence to a float tuple."""
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass(frozen=True)
class Sphere:
    """Sphere geometry.

    Attributes:
        center: Center of the sphere.
        radius: Radius. A negative radius keeps the same surface but turns the
            normal inward, which is how hollow glass shells are modeled.
    """

    center: Vec3
    radius: float

    def to_dict(self) -> dict[str, Any]:
        return {"type": "sphere", "center": list(self.center), "radius": self.radius}


@dataclass(frozen=True)
class Lambert:
    """Diffuse material with a constant albedo."""

    albedo: Vec3

    def to_dict(self) -> dict[str, Any]:
        return {"type": "lambert", "albedo": list(self.albedo)}


@dataclass(frozen=True)
class Metallic:
    """Fuzzy mirror material.

    Attributes:
        albedo: Reflective color.
        fuzz: Roughness; clamped to 1 when scattering.
    """

    albedo: Vec3
    fuzz: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"type": "metallic", "albedo": list(self.albedo), "fuzz": self.fuzz}


@dataclass(frozen=True)
class Dielectric:
    """Transparent refracting material (glass, water)."""

    refractive_index: float = 1.5

    def to_dict(self) -> dict[str, Any]:
        return {"type": "dielectric", "refractive_index": self.refractive_index}


Geometry = Sphere
Material = Union[Lambert, Metallic, Dielectric]


@dataclass(frozen=True)
class SceneObject:
    """A geometry paired with the material it is shaded with."""

    geometry: Geometry
    material: Material

    def to_dict(self) -> dict[str, Any]:
        return {"geometry": self.geometry.to_dict(), "material": self.material.to_dict()}


def geometry_from_dict(data: dict[str, Any]) -> Geometry:
    """Build a geometry from its dictionary form.

    Raises:
        ValueError: If the geometry type is unknown.
    """
    geometry_type = str(data.get("type", "")).lower()
    if geometry_type == "sphere":
        return Sphere(
            center=_to_vec3(data.get("center", [0.0, 0.0, 0.0])),
            radius=float(data.get("radius", 1.0)),
        )
    raise ValueError(f"Unknown geometry type: {geometry_type}")


def material_from_dict(data: dict[str, Any]) -> Material:
    """Build a material from its dictionary form.

    Raises:
        ValueError: If the material type is unknown.
    """
    material_type = str(data.get("type", "")).lower()
    if material_type == "lambert":
        return Lambert(albedo=_to_vec3(data.get("albedo", [0.5, 0.5, 0.5])))
    elif material_type == "metallic":
        return Metallic(
            albedo=_to_vec3(data.get("albedo", [0.8, 0.8, 0.8])),
            fuzz=float(data.get("fuzz", 0.0)),
        )
    elif material_type == "dielectric":
        return Dielectric(refractive_index=float(data.get("refractive_index", 1.5)))
    raise ValueError(f"Unknown material type: {material_type}")


def scene_object_from_dict(data: dict[str, Any]) -> SceneObject:
    """Build a SceneObject from ``{"geometry": {...}, "material": {...}}``."""
    return SceneObject(
        geometry=geometry_from_dict(data.get("geometry", {})),
        material=material_from_dict(data.get("material", {})),
    )
