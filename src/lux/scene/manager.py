"""Scene container and serialization.

A Scene is an ordered list of SceneObjects. Insertion order is stable and is
the order the intersection loop tests objects in, which only matters for
exact distance ties (the earlier object wins).

The Scene lives entirely on the host. It is copied into Taichi fields by
``src.lux.scene.intersection.upload_scene`` when a render starts, so the same
Scene can be edited and rendered again.

Example:
    >>> from src.lux.scene.manager import Scene
    >>> from src.lux.scene.objects import Lambert, Metallic
    >>> scene = Scene()
    >>> scene.add_sphere((0.0, 0.0, -1.0), 0.5, Lambert((0.1, 0.2, 0.5)))
    >>> scene.add_sphere((1.0, 0.0, -1.0), 0.5, Metallic((0.8, 0.6, 0.2), fuzz=0.3))
    >>> data = scene.to_dict()  # JSON-serializable
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.lux.scene.objects import (
    Material,
    SceneObject,
    Sphere,
    Vec3,
    scene_object_from_dict,
)

logger = logging.getLogger(__name__)


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        objects: List of object configurations, each holding a ``geometry``
            and a ``material`` dictionary.
    """

    objects: list[dict[str, Any]] = field(default_factory=list)


class Scene:
    """Ordered collection of scene objects.

    Example:
        >>> scene = Scene()
        >>> scene.add_sphere((0.0, -100.5, -1.0), 100.0, Lambert((0.8, 0.8, 0.0)))
        >>> len(scene)
        1
    """

    def __init__(self, objects: Iterable[SceneObject] = ()) -> None:
        self._objects: list[SceneObject] = list(objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __repr__(self) -> str:
        return f"Scene(objects={len(self._objects)})"

    def add_object(self, obj: SceneObject) -> int:
        """Append an object to the scene.

        Returns:
            The index of the object, which is also its material id once the
            scene is uploaded.
        """
        self._objects.append(obj)
        return len(self._objects) - 1

    def add_sphere(self, center: Vec3, radius: float, material: Material) -> int:
        """Append a sphere with the given material.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius; negative values make a hollow shell.
            material: The material the sphere is shaded with.

        Returns:
            The index of the added object.
        """
        geometry = Sphere(
            center=(float(center[0]), float(center[1]), float(center[2])),
            radius=float(radius),
        )
        return self.add_object(SceneObject(geometry=geometry, material=material))

    def objects(self) -> tuple[SceneObject, ...]:
        """Return the objects in insertion order."""
        return tuple(self._objects)

    def clear(self) -> None:
        """Remove every object."""
        self._objects.clear()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        return SceneConfig(objects=[obj.to_dict() for obj in self._objects])

    def from_config(self, config: SceneConfig) -> None:
        """Replace the scene contents with a configuration.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If an object has an unknown geometry or material type.
        """
        objects = [scene_object_from_dict(obj_config) for obj_config in config.objects]
        self._objects = objects
        logger.debug("Loaded %d objects from config", len(objects))

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {"objects": self.to_config().objects}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Build a scene from a dictionary with an ``objects`` key."""
        scene = cls()
        scene.from_config(SceneConfig(objects=list(data.get("objects", []))))
        return scene


def load_scene_file(path: str | Path) -> Scene:
    """Load a scene from a JSON file.

    Args:
        path: Path to a JSON document shaped like ``Scene.to_dict()``.

    Returns:
        The loaded Scene.

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If an object has an unknown geometry or material type.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    scene = Scene.from_dict(data)
    logger.info("Loaded scene %s with %d objects", path, len(scene))
    return scene


def save_scene_file(scene: Scene, path: str | Path) -> None:
    """Write a scene to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(scene.to_dict(), f, indent=2)
