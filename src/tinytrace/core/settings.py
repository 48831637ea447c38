"""Render configuration.

RenderSettings collects every value the renderer accepts as a parameter
rather than a hard-coded constant: image size, field of view, recursion
depth, the self-intersection epsilons and the background color.

This module declares no Taichi fields and is safe to import before
ti.init().

Example:
    >>> from tinytrace.core.settings import RenderSettings
    >>> settings = RenderSettings(width=320, height=240, max_depth=2)
    >>> settings.aspect_ratio
    1.3333333333333333
"""

import math
from dataclasses import asdict, dataclass, fields
from typing import Any

# Pending work items the shader can hold. A depth-first walk over the
# reflection/refraction tree never holds more than max_depth + 1 items.
MAX_STACK_SIZE = 16
MAX_RECURSION_DEPTH = MAX_STACK_SIZE - 2

# Frame buffer capacity (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Defaults of the demo scene
DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
DEFAULT_FOV = math.degrees(4.0 / math.pi)  # half-angle of 2/pi radians
DEFAULT_MAX_DEPTH = 4
DEFAULT_T_MIN = 1e-3
DEFAULT_RAY_OFFSET = 1e-3
DEFAULT_BACKGROUND = (0.2, 0.7, 0.8)


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in degrees.
        max_depth: Maximum recursion depth. Rays at this depth are shaded
            with direct lighting only and spawn no reflection or refraction.
        t_min: Smallest ray parameter accepted as a hit.
        ray_offset: Distance secondary and shadow ray origins are pushed
            along the surface normal.
        background: Color returned for rays that hit nothing.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fov: float = DEFAULT_FOV
    max_depth: int = DEFAULT_MAX_DEPTH
    t_min: float = DEFAULT_T_MIN
    ray_offset: float = DEFAULT_RAY_OFFSET
    background: tuple[float, float, float] = DEFAULT_BACKGROUND

    def __post_init__(self) -> None:
        """Validate the settings.

        Raises:
            ValueError: If any value is outside its supported range.
        """
        if not 0 < self.width <= MAX_IMAGE_WIDTH or not 0 < self.height <= MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) must be positive and at most "
                f"{MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT}"
            )
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view = {self.fov} must be in (0, 180) degrees")
        if not 0 <= self.max_depth <= MAX_RECURSION_DEPTH:
            raise ValueError(
                f"max_depth = {self.max_depth} must be in [0, {MAX_RECURSION_DEPTH}]"
            )
        if self.t_min <= 0.0:
            raise ValueError(f"t_min = {self.t_min} must be positive")
        if self.ray_offset <= 0.0:
            raise ValueError(f"ray_offset = {self.ray_offset} must be positive")
        if len(self.background) != 3:
            raise ValueError(f"background must have 3 components, got {len(self.background)}")
        object.__setattr__(self, "background", tuple(float(c) for c in self.background))

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    def replace(self, **changes: Any) -> "RenderSettings":
        """Return a copy with the given fields changed (and re-validated)."""
        values = asdict(self)
        values.update(changes)
        return RenderSettings(**values)

    def to_dict(self) -> dict[str, Any]:
        """Export the settings to a JSON-friendly dictionary."""
        values = asdict(self)
        values["background"] = list(self.background)
        return values

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RenderSettings":
        """Create settings from a dictionary, using defaults for missing keys.

        Raises:
            ValueError: If the dictionary contains unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown render settings: {sorted(unknown)}")
        values = dict(data)
        if "background" in values:
            values["background"] = tuple(values["background"])
        return cls(**values)
