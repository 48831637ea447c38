"""Ray data structure and vector utilities for Whitted-style ray tracing.

This module provides the fundamental Ray dataclass and the vector kernel used
by every other part of the renderer: dot/cross products, a guarded normalize,
mirror reflection and Snell refraction. All operations are pure Taichi
functions so they can be called from any kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Vectors shorter than this are treated as degenerate by normalize()
NORMALIZE_EPSILON = 1e-12


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Shading code
            expects it normalized; the dataclass does not enforce it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Zero-length input has no direction. Instead of dividing by zero and
    letting NaN leak into the shading recursion, such vectors (length at or
    below NORMALIZE_EPSILON) come back as the zero vector.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or the zero vector if v
        is degenerate.
    """
    result = vec3(0.0, 0.0, 0.0)
    norm = tm.length(v)
    if norm > NORMALIZE_EPSILON:
        result = v / norm
    return result


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes incident - 2 * dot(incident, normal) * normal. The result has
    the same length as the incident vector and dot(result, normal) equals
    -dot(incident, normal). The normal should be unit length.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f32):
    """Refract an incident vector through a surface.

    Computes the refracted direction using Snell's law. The normal must face
    the incident ray (dot(incident, normal) <= 0) and eta is the ratio of
    the refractive index on the incident side to the one on the transmitted
    side.

    When sin^2 of the transmitted angle exceeds one there is no refracted
    ray (total internal reflection). This is signalled through the second
    return value; the direction is then the zero vector, never NaN.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The surface normal facing the incident ray (normalized).
        eta: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        A tuple (direction, ok) where ok is 1 if a refracted direction
        exists and 0 on total internal reflection.
    """
    cos_i = tm.min(-tm.dot(incident, normal), 1.0)
    sin2_t = eta * eta * (1.0 - cos_i * cos_i)
    result = vec3(0.0, 0.0, 0.0)
    ok = 0
    if sin2_t <= 1.0:
        cos_t = ti.sqrt(1.0 - sin2_t)
        result = eta * incident + (eta * cos_i - cos_t) * normal
        ok = 1
    return result, ok


@ti.func
def refraction_ratio(ior: ti.f32, front_face: ti.i32) -> ti.f32:
    """Ratio of refractive indices for a ray crossing a surface.

    The medium outside every object has index 1.0.

    Args:
        ior: Refractive index of the object's material.
        front_face: 1 if the ray enters the object, 0 if it leaves it.

    Returns:
        1 / ior when entering, ior when leaving.
    """
    ratio = ior
    if front_face == 1:
        ratio = 1.0 / ior
    return ratio


@ti.func
def offset_ray_origin(point: vec3, normal: vec3, direction: vec3, offset: ti.f32) -> vec3:
    """Offset a ray origin to avoid self-intersection.

    Pushes the point along the normal toward the side the new ray travels:
    above the surface for reflected and shadow rays, below it for rays
    transmitted into (or out of) the object.

    Args:
        point: The intersection point.
        normal: The surface normal.
        direction: The direction of the ray being spawned.
        offset: Distance to move along the normal.

    Returns:
        The offset origin point.
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + offset * offset_dir
