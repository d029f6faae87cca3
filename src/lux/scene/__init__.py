"""Scene description and management.

Components:
    objects: Geometry and material value types (Sphere, Lambert, Metallic,
        Dielectric, SceneObject)
    manager: Scene container, serialization and JSON scene files
    intersection: Upload to Taichi fields and closest-hit queries
    presets: The built-in three-sphere demo scene

Only the host-side modules are re-exported here. ``intersection`` and
``presets`` allocate Taichi fields and must be imported after ``ti.init``.
"""

from .manager import Scene, SceneConfig, load_scene_file, save_scene_file
from .objects import Dielectric, Lambert, Metallic, SceneObject, Sphere

__all__ = [
    "Scene",
    "SceneConfig",
    "load_scene_file",
    "save_scene_file",
    "SceneObject",
    "Sphere",
    "Lambert",
    "Metallic",
    "Dielectric",
]
