"""Look-at pinhole camera.

The camera is built from a position, a point to look at, an up vector, a
vertical field of view and an aspect ratio. It stores only what ray
generation needs: the position and the lower-left corner plus the two spans
of a virtual image plane at unit distance in front of the camera.

Image coordinates (s, t) are normalized:
    s = 0 is the left edge, s = 1 the right edge
    t = 0 is the bottom edge, t = 1 the top edge

An up vector parallel to the view direction gives a degenerate basis (NaN
components). This is not checked.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.lux.camera.pinhole import Camera, setup_camera, get_ray
    >>> camera = Camera.look_at(
    ...     position=(-2.0, 2.0, 1.0),
    ...     lookat=(0.0, 0.0, -1.0),
    ...     up=(0.0, 1.0, 0.0),
    ...     vertical_fov_degrees=30.0,
    ...     aspect_ratio=2.0,
    ... )
    >>> setup_camera(camera)
    >>> # Inside a kernel: ray = get_ray(0.5, 0.5)
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from src.lux.core.ray import Ray, make_ray

logger = logging.getLogger(__name__)


def _as_tuple(v: np.ndarray) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """A look-at pinhole camera.

    Attributes:
        position: Camera position in world space.
        lower_left_corner: Lower-left corner of the image plane.
        horizontal_span: Vector across the full width of the image plane.
        vertical_span: Vector across the full height of the image plane.
    """

    position: tuple[float, float, float]
    lower_left_corner: tuple[float, float, float]
    horizontal_span: tuple[float, float, float]
    vertical_span: tuple[float, float, float]

    @classmethod
    def look_at(
        cls,
        position: tuple[float, float, float],
        lookat: tuple[float, float, float],
        up: tuple[float, float, float],
        vertical_fov_degrees: float,
        aspect_ratio: float,
    ) -> "Camera":
        """Build a camera from look-at parameters.

        Args:
            position: Where the camera is.
            lookat: The point the camera looks toward.
            up: Approximate up direction; must not be parallel to the view
                direction.
            vertical_fov_degrees: Vertical field of view in degrees.
            aspect_ratio: Image width divided by height.

        Returns:
            The derived Camera.
        """
        theta = math.radians(vertical_fov_degrees)
        half_height = math.tan(theta / 2.0)
        half_width = aspect_ratio * half_height

        origin = np.array(position, dtype=np.float64)
        target = np.array(lookat, dtype=np.float64)
        vup = np.array(up, dtype=np.float64)

        # w points from lookat toward the camera (backward)
        w = origin - target
        w = w / np.linalg.norm(w)
        u = np.cross(vup, w)
        u = u / np.linalg.norm(u)
        v = np.cross(w, u)

        lower_left = origin - half_width * u - half_height * v - w

        return cls(
            position=_as_tuple(origin),
            lower_left_corner=_as_tuple(lower_left),
            horizontal_span=_as_tuple(2.0 * half_width * u),
            vertical_span=_as_tuple(2.0 * half_height * v),
        )

    def ray_for(self, s: float, t: float):
        """Compute the ray through image coordinates (s, t) on the host.

        Returns:
            A tuple of (origin, direction) with a normalized direction.
        """
        origin = np.array(self.position, dtype=np.float64)
        target = (
            np.array(self.lower_left_corner, dtype=np.float64)
            + s * np.array(self.horizontal_span, dtype=np.float64)
            + t * np.array(self.vertical_span, dtype=np.float64)
        )
        direction = target - origin
        direction = direction / np.linalg.norm(direction)
        return _as_tuple(origin), _as_tuple(direction)


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_horizontal_span = ti.Vector.field(3, dtype=ti.f32, shape=())
_vertical_span = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload a camera for use by ``get_ray``.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    _camera_position[None] = list(camera.position)
    _lower_left_corner[None] = list(camera.lower_left_corner)
    _horizontal_span[None] = list(camera.horizontal_span)
    _vertical_span[None] = list(camera.vertical_span)
    logger.debug("Camera set up at %s", camera.position)


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (s, t).

    Args:
        s: Horizontal coordinate, 0 at the left edge and 1 at the right.
        t: Vertical coordinate, 0 at the bottom edge and 1 at the top.

    Returns:
        A Ray from the camera position with a normalized direction.
    """
    origin = _camera_position[None]
    target = _lower_left_corner[None] + s * _horizontal_span[None] + t * _vertical_span[None]
    return make_ray(origin, target - origin)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with position, lower_left, horizontal and vertical.
    """
    position = _camera_position[None]
    lower_left = _lower_left_corner[None]
    horizontal = _horizontal_span[None]
    vertical = _vertical_span[None]

    return {
        "position": (float(position[0]), float(position[1]), float(position[2])),
        "lower_left": (float(lower_left[0]), float(lower_left[1]), float(lower_left[2])),
        "horizontal": (float(horizontal[0]), float(horizontal[1]), float(horizontal[2])),
        "vertical": (float(vertical[0]), float(vertical[1]), float(vertical[2])),
    }
