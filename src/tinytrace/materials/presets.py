"""Named materials used by the demo scene."""

from .material import Material

IVORY = Material(
    diffuse_color=(0.4, 0.4, 0.3),
    albedo=(0.6, 0.3, 0.1, 0.0),
    specular_exponent=50.0,
    refractive_index=1.0,
)

GLASS = Material(
    diffuse_color=(0.6, 0.7, 0.8),
    albedo=(0.0, 0.5, 0.1, 0.8),
    specular_exponent=125.0,
    refractive_index=1.5,
)

RED_RUBBER = Material(
    diffuse_color=(0.3, 0.1, 0.1),
    albedo=(0.9, 0.1, 0.0, 0.0),
    specular_exponent=10.0,
    refractive_index=1.0,
)

MIRROR = Material(
    diffuse_color=(1.0, 1.0, 1.0),
    albedo=(0.0, 10.0, 0.8, 0.0),
    specular_exponent=1425.0,
    refractive_index=1.0,
)

# Plain diffuse material
DEFAULT_MATERIAL = Material(diffuse_color=(0.2, 0.7, 0.8))

PRESETS = {
    "ivory": IVORY,
    "glass": GLASS,
    "red_rubber": RED_RUBBER,
    "mirror": MIRROR,
    "default": DEFAULT_MATERIAL,
}
