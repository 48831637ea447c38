"""Fixed pinhole camera for primary ray generation.

The camera sits at the world origin and looks down the -z axis with +y up.
Primary rays pass through pixel centers on a virtual image plane at unit
distance (z = -1). The plane spans 2 * tan(fov / 2) vertically, and its
horizontal extent is scaled by the aspect ratio so pixels stay square.

Pixel coordinates follow the frame buffer convention:
- i = 0: left column, i = width - 1: right column
- j = 0: bottom row, j = height - 1: top row

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinytrace.camera.pinhole import PinholeCamera, setup_camera
    >>> setup_camera(PinholeCamera(fov=60.0, aspect_ratio=4.0 / 3.0))
    >>> # Use get_primary_ray(i, j, width, height) within a Taichi kernel
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from tinytrace.core.ray import Ray, make_ray, normalize, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the fixed pinhole camera.

    Attributes:
        fov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the output image.
    """

    fov: float
    aspect_ratio: float

    def __post_init__(self) -> None:
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view = {self.fov} must be in (0, 180) degrees")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"Aspect ratio = {self.aspect_ratio} must be positive")


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_tan_half_fov = ti.field(dtype=ti.f32, shape=())
_aspect_ratio = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Load the camera parameters into Taichi fields.

    Must be called before rendering.

    Args:
        camera: Camera configuration.
    """
    _tan_half_fov[None] = math.tan(math.radians(camera.fov) / 2.0)
    _aspect_ratio[None] = camera.aspect_ratio


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of pixel (i, j).

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the origin with a normalized direction.
    """
    tan_half = _tan_half_fov[None]
    x = (2.0 * (ti.cast(pixel_i, ti.f32) + 0.5) / ti.cast(width, ti.f32) - 1.0) * tan_half
    y = (2.0 * (ti.cast(pixel_j, ti.f32) + 0.5) / ti.cast(height, ti.f32) - 1.0) * tan_half
    x *= _aspect_ratio[None]

    direction = normalize(vec3(x, y, -1.0))
    return make_ray(vec3(0.0, 0.0, 0.0), direction)


@ti.kernel
def _primary_ray_direction(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32
) -> tm.vec3:
    return get_primary_ray(pixel_i, pixel_j, width, height).direction


def primary_ray_direction(
    pixel_i: int, pixel_j: int, width: int, height: int
) -> tuple[float, float, float]:
    """Get the primary ray direction for a pixel from Python.

    Returns:
        The normalized direction as (x, y, z).
    """
    d = _primary_ray_direction(pixel_i, pixel_j, width, height)
    return (float(d[0]), float(d[1]), float(d[2]))


def get_camera_info() -> dict[str, float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with tan_half_fov and aspect_ratio.
    """
    return {
        "tan_half_fov": float(_tan_half_fov[None]),
        "aspect_ratio": float(_aspect_ratio[None]),
    }
