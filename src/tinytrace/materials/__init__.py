"""Materials module for the Phong-style shading model.

Components:
    material: Host-side Material dataclass with validation
    phong: Taichi-side material registry and SurfaceMaterial struct
    presets: Named materials (ivory, glass, red rubber, mirror)

Every material carries a diffuse color, four blending weights (diffuse,
specular, reflective, refractive), a specular exponent and a refractive
index. Spheres reference materials by ID, so one material can be shared by
many spheres.
"""

from .material import Material
from .presets import DEFAULT_MATERIAL, GLASS, IVORY, MIRROR, PRESETS, RED_RUBBER

# Note: phong is NOT imported here because it declares Taichi fields at
# import time. Import it directly once Taichi is initialized:
#   from tinytrace.materials.phong import add_material

__all__ = [
    "Material",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
    "DEFAULT_MATERIAL",
    "PRESETS",
]
