"""Scene-level ray intersection.

The intersector tests a ray against every sphere and, when enabled, the
checkerboard ground plane, and reports the globally nearest hit. There is no
acceleration structure; every query is a brute-force loop, equally cheap for
primary, secondary and shadow rays.

Hits are tagged with the kind of surface they landed on. Sphere hits carry a
material ID into the material registry; plane hits carry none, and their
material is synthesized from the checkerboard pattern by surface_material().

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinytrace.scene.intersection import add_sphere, intersect_scene, vec3
    >>> add_sphere(vec3(0, 0, -3), 1.0, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import logging

import taichi as ti
import taichi.math as tm

from tinytrace.geometry.plane import (
    DEFAULT_CHECKER_COLOR_A,
    DEFAULT_CHECKER_COLOR_B,
    DEFAULT_CHECKER_SIZE,
    DEFAULT_PLANE_HEIGHT,
    GroundPlane,
    checkerboard_color,
    hit_ground_plane,
)
from tinytrace.geometry.sphere import HitRecord, hit_sphere, make_sphere
from tinytrace.materials.phong import SurfaceMaterial, get_material

logger = logging.getLogger(__name__)

vec3 = tm.vec3
vec4 = tm.vec4

# Surface tags stored in SceneHitRecord.surface
SURFACE_NONE = 0
SURFACE_SPHERE = 1
SURFACE_PLANE = 2

# Fixed shading weights of the ground plane: purely diffuse
PLANE_ALBEDO_DIFFUSE = 1.0
PLANE_ALBEDO_SPECULAR = 0.0
PLANE_ALBEDO_REFLECTIVE = 0.0
PLANE_ALBEDO_REFRACTIVE = 0.0
PLANE_SPECULAR_EXPONENT = 1.0
PLANE_REFRACTIVE_INDEX = 1.0


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if the ray hit anything, 0 otherwise.
        t: Ray parameter of the nearest hit.
        point: The intersection point.
        normal: Unit surface normal facing the incoming ray.
        front_face: 1 if the ray arrived from outside the surface.
        surface: SURFACE_SPHERE, SURFACE_PLANE, or SURFACE_NONE on a miss.
        material_id: Material ID of the hit sphere; -1 for the plane and
            for misses.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    surface: ti.i32
    material_id: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Ground plane state
plane_enabled = ti.field(dtype=ti.i32, shape=())
plane_height = ti.field(dtype=ti.f32, shape=())
plane_checker_size = ti.field(dtype=ti.f32, shape=())
plane_color_a = ti.Vector.field(3, dtype=ti.f32, shape=())
plane_color_b = ti.Vector.field(3, dtype=ti.f32, shape=())


def clear_scene() -> None:
    """Remove all spheres and disable the ground plane.

    The field data is not cleared but will be overwritten when new
    primitives are added.
    """
    num_spheres[None] = 0
    plane_enabled[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If radius is not positive.
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    if radius <= 0.0:
        raise ValueError(f"Sphere radius = {radius} must be positive")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def set_ground_plane(
    height: float = DEFAULT_PLANE_HEIGHT,
    checker_size: float = DEFAULT_CHECKER_SIZE,
    color_a: tuple[float, float, float] = DEFAULT_CHECKER_COLOR_A,
    color_b: tuple[float, float, float] = DEFAULT_CHECKER_COLOR_B,
) -> None:
    """Enable the checkerboard ground plane.

    Args:
        height: The y coordinate of the plane.
        checker_size: Edge length of one checker square (must be positive).
        color_a: Color of squares with even index parity.
        color_b: Color of squares with odd index parity.

    Raises:
        ValueError: If checker_size is not positive.
    """
    if checker_size <= 0.0:
        raise ValueError(f"Checker size = {checker_size} must be positive")

    plane_height[None] = height
    plane_checker_size[None] = checker_size
    plane_color_a[None] = [color_a[0], color_a[1], color_a[2]]
    plane_color_b[None] = [color_b[0], color_b[1], color_b[2]]
    plane_enabled[None] = 1
    logger.debug("Ground plane enabled at y=%s (checker size %s)", height, checker_size)


def disable_ground_plane() -> None:
    """Remove the ground plane from the scene."""
    plane_enabled[None] = 0


def is_ground_plane_enabled() -> bool:
    """Check if the ground plane is part of the scene."""
    return bool(plane_enabled[None])


@ti.func
def get_ground_plane() -> GroundPlane:
    """The current ground plane parameters."""
    return GroundPlane(
        height=plane_height[None],
        checker_size=plane_checker_size[None],
        color_a=plane_color_a[None],
        color_b=plane_color_b[None],
    )


@ti.func
def _to_scene_hit_record(rec: HitRecord, surface: ti.i32, material_id: ti.i32) -> SceneHitRecord:
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        surface=surface,
        material_id=material_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        surface=SURFACE_NONE,
        material_id=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> SceneHitRecord:
    """Find the nearest hit among all spheres and the ground plane.

    Each test is bounded by the closest t found so far, so the record that
    survives has the globally smallest t in (t_min, t_max). The plane is
    tested last and wins only if it is strictly nearer than every sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit.

    Returns:
        The closest hit, or a miss record.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = make_sphere(sphere_centers[i], sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _to_scene_hit_record(rec, SURFACE_SPHERE, sphere_material_ids[i])

    if plane_enabled[None] == 1:
        rec = hit_ground_plane(ray_origin, ray_direction, get_ground_plane(), t_min, closest_t)
        if rec.hit == 1:
            result = _to_scene_hit_record(rec, SURFACE_PLANE, -1)

    return result


@ti.func
def intersect_scene_any(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f32,
    t_max: ti.f32,
) -> ti.i32:
    """Test if the ray hits anything in (t_min, t_max).

    Shadow rays only need to know whether something blocks the light, so
    testing stops at the first hit.

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    hit_any = 0

    for i in range(num_spheres[None]):
        if hit_any == 0:
            sphere = make_sphere(sphere_centers[i], sphere_radii[i])
            rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
            if rec.hit == 1:
                hit_any = 1

    if hit_any == 0 and plane_enabled[None] == 1:
        rec = hit_ground_plane(ray_origin, ray_direction, get_ground_plane(), t_min, t_max)
        if rec.hit == 1:
            hit_any = 1

    return hit_any


@ti.func
def surface_material(rec: SceneHitRecord) -> SurfaceMaterial:
    """Resolve the shading material of a hit.

    Sphere hits look up their material in the registry. Plane hits get a
    synthetic, purely diffuse material whose color is the checkerboard
    color under the hit point.

    Args:
        rec: A record with hit == 1.

    Returns:
        The SurfaceMaterial to shade the hit with.
    """
    material = SurfaceMaterial(
        diffuse_color=vec3(0.0, 0.0, 0.0),
        albedo=vec4(
            PLANE_ALBEDO_DIFFUSE,
            PLANE_ALBEDO_SPECULAR,
            PLANE_ALBEDO_REFLECTIVE,
            PLANE_ALBEDO_REFRACTIVE,
        ),
        specular_exponent=PLANE_SPECULAR_EXPONENT,
        refractive_index=PLANE_REFRACTIVE_INDEX,
    )
    if rec.surface == SURFACE_SPHERE:
        material = get_material(rec.material_id)
    elif rec.surface == SURFACE_PLANE:
        material.diffuse_color = checkerboard_color(get_ground_plane(), rec.point)
    return material
