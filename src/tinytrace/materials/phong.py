"""Material registry for the Phong-style shading model.

Materials live in Taichi fields indexed by material ID, so any number of
spheres can share one material by referring to the same index.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinytrace.materials.material import Material
    >>> from tinytrace.materials.phong import add_material
    >>> red = add_material(Material(diffuse_color=(1.0, 0.0, 0.0)))
    >>> # Use get_material(red) within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .material import Material

vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class SurfaceMaterial:
    """Shading properties of a surface, as seen from inside a kernel.

    Attributes:
        diffuse_color: Base RGB color.
        albedo: Diffuse, specular, reflective and refractive weights.
        specular_exponent: Phong highlight exponent.
        refractive_index: Index of refraction.
    """

    diffuse_color: vec3
    albedo: vec4
    specular_exponent: ti.f32
    refractive_index: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

MAX_MATERIALS = 256

material_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Add a material to the registry.

    Args:
        material: The material to store.

    Returns:
        The material ID of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_diffuse_colors[idx] = list(material.diffuse_color)
    material_albedos[idx] = list(material.albedo)
    material_specular_exponents[idx] = material.specular_exponent
    material_refractive_indices[idx] = material.refractive_index
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_id: ti.i32) -> SurfaceMaterial:
    """Look up a material by ID.

    Args:
        material_id: Index of the material in the registry.

    Returns:
        The SurfaceMaterial stored under that ID.
    """
    return SurfaceMaterial(
        diffuse_color=material_diffuse_colors[material_id],
        albedo=material_albedos[material_id],
        specular_exponent=material_specular_exponents[material_id],
        refractive_index=material_refractive_indices[material_id],
    )
