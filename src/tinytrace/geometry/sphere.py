"""Sphere primitive and ray-sphere intersection.

A sphere is the only finite primitive the renderer supports. Intersection
solves |O + tD - C|^2 = r^2 with the half-b quadratic and the cancellation-free
root formula (q = -(h + sign(h) * sqrt(disc)), t0 = q / a, t1 = c / q), then
keeps the nearest root inside (t_min, t_max). Starting t_min at a small
positive bias is what stops a ray leaving a surface from hitting that same
surface again.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinytrace.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -3), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from tinytrace.core.ray import make_ray, ray_at

vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 otherwise.
        t: Ray parameter of the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal oriented against the ray direction,
            so it always faces the incoming ray. Only valid if hit == 1.
        front_face: 1 if the ray arrived from outside the primitive (the
            geometric outward normal faces the ray), 0 if from inside.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def make_miss_hit_record() -> HitRecord:
    """Create a HitRecord that reports no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
    )


@ti.func
def orient_normal(ray_direction: vec3, outward_normal: vec3):
    """Turn an outward normal so it faces the incoming ray.

    Returns:
        A tuple (normal, front_face).
    """
    normal = outward_normal
    front_face = 1
    if tm.dot(ray_direction, outward_normal) > 0.0:
        normal = -outward_normal
        front_face = 0
    return normal, front_face


@ti.func
def _sphere_roots(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Both roots of a*t^2 + 2*h*t + c = 0, smallest first.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of the reduced discriminant h^2 - a*c.
    """
    q = -(h + ti.select(h < 0.0, -1.0, 1.0) * sqrt_d)

    t0 = 0.0
    t1 = 0.0
    if ti.abs(q) < 1e-10:
        # q vanishes only when h and the discriminant are both ~0
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        swap = t0
        t0 = t1
        t1 = swap

    return t0, t1


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Intersect a ray with a sphere.

    With oc = origin - center the quadratic coefficients are
    a = dot(D, D), h = dot(D, oc), c = dot(oc, oc) - r^2. The nearer root
    is tried first; if it falls outside (t_min, t_max) the farther one is
    used, which is how a ray starting inside the sphere finds the exit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (need not be normalized).
        sphere: The sphere to test.
        t_min: Hits at or before this parameter are ignored.
        t_max: Hits at or beyond this parameter are ignored.

    Returns:
        A HitRecord; check its hit field.
    """
    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = h * h - a * c

    record = make_miss_hit_record()

    if discriminant >= 0.0:
        t0, t1 = _sphere_roots(h, a, c, ti.sqrt(discriminant))

        t = t0
        valid = t_min < t < t_max
        if not valid:
            t = t1
            valid = t_min < t < t_max

        if valid:
            point = ray_at(make_ray(ray_origin, ray_direction), t)
            outward_normal = (point - sphere.center) / sphere.radius
            normal, front_face = orient_normal(ray_direction, outward_normal)
            record = HitRecord(hit=1, t=t, point=point, normal=normal, front_face=front_face)

    return record


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
