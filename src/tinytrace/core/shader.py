"""Whitted-style recursive ray caster.

Given a ray, the caster finds the nearest hit, shades it with Phong-style
direct lighting under binary shadows, and follows the mirror reflection and
the Snell refraction of the ray, blending everything with the four albedo
weights of the hit material:

    color = diffuse_color * diffuse_sum * albedo[0]
          + white * specular_sum * albedo[1]
          + cast(reflected) * albedo[2]
          + cast(refracted) * albedo[3]

Taichi functions cannot recurse, so the recursion is unrolled into a
depth-first walk over an explicit stack of pending (origin, direction,
weight, depth) items held in local vectors. Each item adds weight * local
color to the result (or weight * background on a miss), which sums to the
same color the recursive formula produces. Every pixel owns its stack, so
kernels may shade all pixels in parallel without synchronization.

Rays deeper than max_depth return the background color. Rays at max_depth
are shaded with direct lighting only and spawn no secondary rays.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinytrace.core.settings import RenderSettings
    >>> from tinytrace.core.shader import cast, setup_shader
    >>> setup_shader(RenderSettings(max_depth=2))
    >>> color = cast((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))  # background in an empty scene
"""

import logging

import taichi as ti
import taichi.math as tm

from tinytrace.core.ray import (
    normalize,
    offset_ray_origin,
    reflect,
    refract,
    refraction_ratio,
)
from tinytrace.core.settings import MAX_STACK_SIZE, RenderSettings
from tinytrace.scene.intersection import (
    intersect_scene,
    intersect_scene_any,
    surface_material,
)
from tinytrace.scene.lights import get_light_intensity, get_light_position, num_lights

logger = logging.getLogger(__name__)

vec2 = tm.vec2
vec3 = tm.vec3

# Upper bound of the ray parameter for scene queries
T_MAX = 1e10

# =============================================================================
# Shader Configuration (Taichi fields, written by setup_shader)
# =============================================================================

_max_depth = ti.field(dtype=ti.i32, shape=())
_t_min = ti.field(dtype=ti.f32, shape=())
_ray_offset = ti.field(dtype=ti.f32, shape=())
_background = ti.Vector.field(3, dtype=ti.f32, shape=())

_current_settings: RenderSettings | None = None


def setup_shader(settings: RenderSettings | None = None) -> None:
    """Load depth limit, epsilons and background color into the shader.

    Args:
        settings: The render settings to use. Defaults to RenderSettings().
    """
    global _current_settings

    if settings is None:
        settings = RenderSettings()

    _max_depth[None] = settings.max_depth
    _t_min[None] = settings.t_min
    _ray_offset[None] = settings.ray_offset
    _background[None] = list(settings.background)
    _current_settings = settings
    logger.debug(
        "Shader configured: max_depth=%d t_min=%g ray_offset=%g background=%s",
        settings.max_depth,
        settings.t_min,
        settings.ray_offset,
        settings.background,
    )


def get_shader_settings() -> RenderSettings | None:
    """Get the settings last passed to setup_shader(), or None."""
    return _current_settings


def _check_shader_configured() -> None:
    if get_shader_settings() is None:
        raise RuntimeError("Shader not configured. Call setup_shader() first.")


# =============================================================================
# Direct Lighting
# =============================================================================


@ti.func
def direct_lighting(
    point: vec3,
    normal: vec3,
    view_direction: vec3,
    specular_exponent: ti.f32,
    t_min: ti.f32,
    offset: ti.f32,
):
    """Sum the diffuse and specular light arriving at a surface point.

    For every light a shadow ray is cast from the point, pushed off the
    surface toward the light. Anything hit before the light blocks it
    completely.

    Args:
        point: The surface point.
        normal: Unit normal facing the viewer.
        view_direction: Direction of the ray that hit the point.
        specular_exponent: Phong exponent of the surface.
        t_min: Minimum t for shadow ray hits.
        offset: Shadow ray origin offset along the normal.

    Returns:
        A tuple (diffuse_sum, specular_sum) of intensity-weighted sums.
    """
    diffuse_sum = 0.0
    specular_sum = 0.0

    for k in range(num_lights[None]):
        to_light = get_light_position(k) - point
        light_distance = tm.length(to_light)
        light_dir = normalize(to_light)

        shadow_origin = offset_ray_origin(point, normal, light_dir, offset)
        occluded = intersect_scene_any(shadow_origin, light_dir, t_min, light_distance)

        if occluded == 0:
            intensity = get_light_intensity(k)
            diffuse_sum += intensity * tm.max(0.0, tm.dot(light_dir, normal))
            highlight = tm.max(0.0, tm.dot(reflect(-light_dir, normal), -view_direction))
            specular_sum += intensity * highlight**specular_exponent

    return diffuse_sum, specular_sum


# =============================================================================
# Ray Casting
# =============================================================================


@ti.func
def cast_ray(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Args:
        origin: The ray origin.
        direction: The unit ray direction.
        depth: Recursion depth of the ray (0 for primary rays, never negative).

    Returns:
        The unclamped RGB color.
    """
    max_depth = _max_depth[None]
    t_min = _t_min[None]
    offset = _ray_offset[None]
    background = _background[None]

    # Pending work items, one component per vector
    stack_ox = ti.Vector.zero(ti.f32, MAX_STACK_SIZE)
    stack_oy = ti.Vector.zero(ti.f32, MAX_STACK_SIZE)
    stack_oz = ti.Vector.zero(ti.f32, MAX_STACK_SIZE)
    stack_dx = ti.Vector.zero(ti.f32, MAX_STACK_SIZE)
    stack_dy = ti.Vector.zero(ti.f32, MAX_STACK_SIZE)
    stack_dz = ti.Vector.zero(ti.f32, MAX_STACK_SIZE)
    stack_weight = ti.Vector.zero(ti.f32, MAX_STACK_SIZE)
    stack_depth = ti.Vector.zero(ti.i32, MAX_STACK_SIZE)

    stack_ox[0] = origin.x
    stack_oy[0] = origin.y
    stack_oz[0] = origin.z
    stack_dx[0] = direction.x
    stack_dy[0] = direction.y
    stack_dz[0] = direction.z
    stack_weight[0] = 1.0
    stack_depth[0] = depth
    top = 1

    color = vec3(0.0, 0.0, 0.0)

    while top > 0:
        top -= 1
        ray_origin = vec3(stack_ox[top], stack_oy[top], stack_oz[top])
        ray_direction = vec3(stack_dx[top], stack_dy[top], stack_dz[top])
        weight = stack_weight[top]
        ray_depth = stack_depth[top]

        if ray_depth > max_depth:
            color += weight * background
        else:
            rec = intersect_scene(ray_origin, ray_direction, t_min, T_MAX)

            if rec.hit == 0:
                color += weight * background
            else:
                material = surface_material(rec)
                diffuse_sum, specular_sum = direct_lighting(
                    rec.point,
                    rec.normal,
                    ray_direction,
                    material.specular_exponent,
                    t_min,
                    offset,
                )
                local = (
                    material.diffuse_color * diffuse_sum * material.albedo[0]
                    + vec3(1.0, 1.0, 1.0) * specular_sum * material.albedo[1]
                )
                color += weight * local

                if ray_depth < max_depth:
                    # Refraction is pushed first so reflection is walked first
                    refract_weight = weight * material.albedo[3]
                    if refract_weight != 0.0:
                        eta = refraction_ratio(material.refractive_index, rec.front_face)
                        refract_dir, ok = refract(ray_direction, rec.normal, eta)
                        if ok == 1:
                            refract_dir = normalize(refract_dir)
                            refract_origin = offset_ray_origin(
                                rec.point, rec.normal, refract_dir, offset
                            )
                            stack_ox[top] = refract_origin.x
                            stack_oy[top] = refract_origin.y
                            stack_oz[top] = refract_origin.z
                            stack_dx[top] = refract_dir.x
                            stack_dy[top] = refract_dir.y
                            stack_dz[top] = refract_dir.z
                            stack_weight[top] = refract_weight
                            stack_depth[top] = ray_depth + 1
                            top += 1

                    reflect_weight = weight * material.albedo[2]
                    if reflect_weight != 0.0:
                        reflect_dir = normalize(reflect(ray_direction, rec.normal))
                        reflect_origin = offset_ray_origin(
                            rec.point, rec.normal, reflect_dir, offset
                        )
                        stack_ox[top] = reflect_origin.x
                        stack_oy[top] = reflect_origin.y
                        stack_oz[top] = reflect_origin.z
                        stack_dx[top] = reflect_dir.x
                        stack_dy[top] = reflect_dir.y
                        stack_dz[top] = reflect_dir.z
                        stack_weight[top] = reflect_weight
                        stack_depth[top] = ray_depth + 1
                        top += 1

    return color


# =============================================================================
# Python-callable Entry Points
# =============================================================================


@ti.kernel
def _cast_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.i32,
) -> vec3:
    return cast_ray(vec3(ox, oy, oz), normalize(vec3(dx, dy, dz)), depth)


@ti.kernel
def _direct_lighting_kernel(
    px: ti.f32,
    py: ti.f32,
    pz: ti.f32,
    nx: ti.f32,
    ny: ti.f32,
    nz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    specular_exponent: ti.f32,
) -> vec2:
    diffuse_sum, specular_sum = direct_lighting(
        vec3(px, py, pz),
        normalize(vec3(nx, ny, nz)),
        normalize(vec3(dx, dy, dz)),
        specular_exponent,
        _t_min[None],
        _ray_offset[None],
    )
    return vec2(diffuse_sum, specular_sum)


def cast(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Cast a single ray into the current scene.

    This is a Python-callable function for testing and probing. Rendering
    goes through the frame renderer, which shades all pixels in one kernel.

    Args:
        origin: The ray origin as (x, y, z).
        direction: The ray direction as (x, y, z); normalized before casting.
        depth: Recursion depth to start at (0 for primary rays).

    Returns:
        Tuple of (R, G, B) color values, unclamped.

    Raises:
        RuntimeError: If setup_shader() has not been called.
        ValueError: If depth is negative.
    """
    _check_shader_configured()

    if depth < 0:
        raise ValueError(f"Ray depth = {depth} must be non-negative")

    color = _cast_kernel(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], depth
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def direct_lighting_at(
    point: tuple[float, float, float],
    normal: tuple[float, float, float],
    view_direction: tuple[float, float, float],
    specular_exponent: float = 1.0,
) -> tuple[float, float]:
    """Evaluate direct lighting at a surface point.

    Args:
        point: The surface point.
        normal: Surface normal facing the viewer (normalized before use).
        view_direction: Direction of the incoming ray (normalized before use).
        specular_exponent: Phong exponent of the surface.

    Returns:
        Tuple of (diffuse_sum, specular_sum).

    Raises:
        RuntimeError: If setup_shader() has not been called.
    """
    _check_shader_configured()

    result = _direct_lighting_kernel(
        point[0],
        point[1],
        point[2],
        normal[0],
        normal[1],
        normal[2],
        view_direction[0],
        view_direction[1],
        view_direction[2],
        specular_exponent,
    )
    return (float(result[0]), float(result[1]))
