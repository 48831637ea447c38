"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and the vector/geometry kernel
    settings: Render configuration (image size, field of view, depth, epsilons)
    shader: Recursive Whitted-style ray caster with shadows, reflection
        and refraction
    renderer: Frame buffer and the per-pixel parallel render kernel

All per-ray computation uses Taichi functions and kernels; the outermost
pixel loop of the render kernel runs in parallel without synchronization.
"""

from .ray import (
    NORMALIZE_EPSILON,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    offset_ray_origin,
    ray_at,
    reflect,
    refract,
    refraction_ratio,
    vec3,
)
from .settings import MAX_RECURSION_DEPTH, MAX_STACK_SIZE, RenderSettings

# Note: shader and renderer are NOT imported here because they declare Taichi
# fields at import time. Import them directly once Taichi is initialized:
#   from tinytrace.core.renderer import FrameRenderer

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "refraction_ratio",
    "offset_ray_origin",
    "NORMALIZE_EPSILON",
    "RenderSettings",
    "MAX_RECURSION_DEPTH",
    "MAX_STACK_SIZE",
]
