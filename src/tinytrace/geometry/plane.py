"""Infinite horizontal ground plane with a procedural checkerboard.

The plane y = height carries no stored material. Its color at a hit point
is derived from the parity of floor(x / size) + floor(z / size), alternating
between two fixed colors.

Rays whose vertical direction component is below PARALLEL_EPSILON in
magnitude are treated as parallel to the plane and never hit it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinytrace.geometry.plane import GroundPlane, hit_ground_plane
    >>> floor = GroundPlane(
    ...     height=-4.0,
    ...     checker_size=2.0,
    ...     color_a=ti.math.vec3(0.3, 0.3, 0.3),
    ...     color_b=ti.math.vec3(0.3, 0.2, 0.1),
    ... )
    >>> # Use hit_ground_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from tinytrace.core.ray import make_ray, ray_at

from .sphere import HitRecord, make_miss_hit_record, orient_normal

vec3 = tm.vec3

PARALLEL_EPSILON = 1e-3

DEFAULT_PLANE_HEIGHT = -4.0
DEFAULT_CHECKER_SIZE = 2.0
DEFAULT_CHECKER_COLOR_A = (0.3, 0.3, 0.3)
DEFAULT_CHECKER_COLOR_B = (0.3, 0.2, 0.1)


@ti.dataclass
class GroundPlane:
    """A horizontal checkerboard plane.

    Attributes:
        height: The y coordinate of the plane.
        checker_size: Edge length of one checker square.
        color_a: Color of squares with even index parity.
        color_b: Color of squares with odd index parity.
    """

    height: ti.f32
    checker_size: ti.f32
    color_a: vec3
    color_b: vec3


@ti.func
def hit_ground_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: GroundPlane,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with the ground plane.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction.
        plane: The ground plane.
        t_min: Hits at or before this parameter are ignored.
        t_max: Hits at or beyond this parameter are ignored.

    Returns:
        A HitRecord. The normal is +y or -y, whichever faces the ray;
        front_face is 1 for rays coming from above.
    """
    record = make_miss_hit_record()

    if ti.abs(ray_direction.y) > PARALLEL_EPSILON:
        t = (plane.height - ray_origin.y) / ray_direction.y
        if t_min < t < t_max:
            point = ray_at(make_ray(ray_origin, ray_direction), t)
            normal, front_face = orient_normal(ray_direction, vec3(0.0, 1.0, 0.0))
            record = HitRecord(hit=1, t=t, point=point, normal=normal, front_face=front_face)

    return record


@ti.func
def checkerboard_color(plane: GroundPlane, point: vec3) -> vec3:
    """Procedural color of the plane at a point."""
    ix = ti.cast(ti.floor(point.x / plane.checker_size), ti.i32)
    iz = ti.cast(ti.floor(point.z / plane.checker_size), ti.i32)
    color = plane.color_a
    if ((ix + iz) & 1) == 1:
        color = plane.color_b
    return color
