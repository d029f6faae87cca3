"""Built-in demo scene.

The default scene is the classic three-sphere layout: a large ground sphere,
a diffuse blue ball in the middle, a fuzzy gold metal ball on the right and a
hollow glass ball on the left (a glass sphere with a slightly smaller
negative-radius sphere inside it).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.scene.presets import create_default_scene
    >>> scene, camera = create_default_scene(aspect_ratio=2.0)
"""

from src.lux.camera.pinhole import Camera
from src.lux.scene.manager import Scene
from src.lux.scene.objects import Dielectric, Lambert, Metallic

# Default camera placement
DEFAULT_LOOKFROM = (-2.0, 2.0, 1.0)
DEFAULT_LOOKAT = (0.0, 0.0, -1.0)
DEFAULT_VUP = (0.0, 1.0, 0.0)
DEFAULT_VFOV = 30.0


def create_default_scene(aspect_ratio: float = 2.0) -> tuple[Scene, Camera]:
    """Create the three-sphere demo scene and its camera.

    Args:
        aspect_ratio: Image width divided by height.

    Returns:
        Tuple of (scene, camera).
    """
    scene = Scene()

    # Ground
    scene.add_sphere((0.0, -100.5, -1.0), 100.0, Lambert((0.8, 0.8, 0.0)))

    # Diffuse
    scene.add_sphere((0.0, 0.0, -1.0), 0.5, Lambert((0.1, 0.2, 0.5)))

    # Gold metal
    scene.add_sphere((1.0, 0.0, -1.0), 0.5, Metallic((0.8, 0.6, 0.2), fuzz=0.3))

    # Hollow glass: outer surface plus an inward-facing inner surface
    scene.add_sphere((-1.0, 0.0, -1.0), 0.5, Dielectric(1.5))
    scene.add_sphere((-1.0, 0.0, -1.0), -0.45, Dielectric(1.5))

    camera = create_default_camera(aspect_ratio)
    return scene, camera


def create_default_camera(
    aspect_ratio: float = 2.0,
    lookfrom: tuple[float, float, float] = DEFAULT_LOOKFROM,
    lookat: tuple[float, float, float] = DEFAULT_LOOKAT,
    vfov: float = DEFAULT_VFOV,
) -> Camera:
    """Create the demo camera, optionally overriding its placement."""
    return Camera.look_at(
        position=lookfrom,
        lookat=lookat,
        up=DEFAULT_VUP,
        vertical_fov_degrees=vfov,
        aspect_ratio=aspect_ratio,
    )
