"""Geometry module for shape primitives.

This module provides the two primitive types the renderer supports:

Components:
    sphere: Sphere primitive with robust ray-sphere intersection
    plane: Infinite horizontal ground plane with a checkerboard pattern

All intersection routines are Taichi functions (@ti.func) returning a
HitRecord whose normal faces the incoming ray:
    record = hit_shape(ray_origin, ray_direction, shape, t_min, t_max)
"""

from .plane import (
    DEFAULT_CHECKER_COLOR_A,
    DEFAULT_CHECKER_COLOR_B,
    DEFAULT_CHECKER_SIZE,
    DEFAULT_PLANE_HEIGHT,
    PARALLEL_EPSILON,
    GroundPlane,
    checkerboard_color,
    hit_ground_plane,
)
from .sphere import HitRecord, Sphere, hit_sphere, make_miss_hit_record, make_sphere, orient_normal

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_miss_hit_record",
    "orient_normal",
    "GroundPlane",
    "hit_ground_plane",
    "checkerboard_color",
    "PARALLEL_EPSILON",
    "DEFAULT_PLANE_HEIGHT",
    "DEFAULT_CHECKER_SIZE",
    "DEFAULT_CHECKER_COLOR_A",
    "DEFAULT_CHECKER_COLOR_B",
]
