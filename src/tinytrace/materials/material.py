"""Host-side material description.

A Material holds the optical properties of a surface in the Phong-style
shading model used by the ray caster:

    color = diffuse_color * diffuse * albedo[0]
          + white * specular * albedo[1]
          + reflected * albedo[2]
          + refracted * albedo[3]

The four albedo weights are blending factors, not a physically normalized
distribution, so they need not sum to one.

This module declares no Taichi fields and is safe to import before
ti.init().
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Material:
    """Optical properties of a surface.

    Attributes:
        diffuse_color: Base RGB color. Not clamped; values above one are
            allowed and only limited when the image is encoded.
        albedo: Weights of the diffuse, specular, reflective and refractive
            terms, in that order.
        specular_exponent: Phong exponent controlling highlight sharpness.
        refractive_index: Index of refraction (1.0 means no bending).

    Example:
        >>> glass = Material(
        ...     diffuse_color=(0.6, 0.7, 0.8),
        ...     albedo=(0.0, 0.5, 0.1, 0.8),
        ...     specular_exponent=125.0,
        ...     refractive_index=1.5,
        ... )
    """

    diffuse_color: tuple[float, float, float]
    albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    specular_exponent: float = 1.0
    refractive_index: float = 1.0

    def __post_init__(self) -> None:
        """Validate and normalize the material parameters.

        Raises:
            ValueError: If a tuple has the wrong length, the specular exponent
                is not positive or the refractive index is not positive.
        """
        if len(self.diffuse_color) != 3:
            raise ValueError(
                f"diffuse_color must have 3 components, got {len(self.diffuse_color)}"
            )
        if len(self.albedo) != 4:
            raise ValueError(f"albedo must have 4 weights, got {len(self.albedo)}")
        if self.specular_exponent <= 0.0:
            raise ValueError(f"Specular exponent = {self.specular_exponent} must be positive")
        if self.refractive_index <= 0.0:
            raise ValueError(f"Refractive index = {self.refractive_index} must be positive")

        object.__setattr__(self, "diffuse_color", tuple(float(c) for c in self.diffuse_color))
        object.__setattr__(self, "albedo", tuple(float(w) for w in self.albedo))

    def to_dict(self) -> dict[str, Any]:
        """Export the material to a JSON-friendly dictionary."""
        return {
            "diffuse_color": list(self.diffuse_color),
            "albedo": list(self.albedo),
            "specular_exponent": self.specular_exponent,
            "refractive_index": self.refractive_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Material":
        """Create a material from a dictionary produced by to_dict()."""
        return cls(
            diffuse_color=tuple(data["diffuse_color"]),
            albedo=tuple(data.get("albedo", (1.0, 0.0, 0.0, 0.0))),
            specular_exponent=data.get("specular_exponent", 1.0),
            refractive_index=data.get("refractive_index", 1.0),
        )
