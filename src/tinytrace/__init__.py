"""Taichi-based Whitted-style ray tracer.

Renders analytic spheres and an optional checkerboard ground plane under
point lights, with Phong-style direct lighting, hard shadows, mirror
reflection and refraction.

Subpackages:
    core: Vector kernel, render settings, recursive shader and frame renderer
    geometry: Sphere and ground plane intersection
    materials: Material definitions, registry and presets
    scene: Lights, scene intersection, scene manager and the demo scene
    camera: Fixed pinhole camera
    output: PNG export
"""

__version__ = "0.1.0"
