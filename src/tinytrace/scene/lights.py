"""Point light storage.

Each light is a position and a scalar intensity. Lights contribute
additively, so their order in the list does not matter.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def add_light(position: tuple[float, float, float], intensity: float) -> int:
    """Add a point light.

    Args:
        position: World-space position of the light.
        intensity: Scalar intensity (must be positive).

    Returns:
        The index of the added light.

    Raises:
        ValueError: If intensity is not positive.
        RuntimeError: If the maximum number of lights is exceeded.
    """
    if intensity <= 0.0:
        raise ValueError(f"Light intensity = {intensity} must be positive")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_positions[idx] = [position[0], position[1], position[2]]
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights."""
    return int(num_lights[None])


@ti.func
def get_light_position(light_idx: ti.i32) -> vec3:
    return light_positions[light_idx]


@ti.func
def get_light_intensity(light_idx: ti.i32) -> ti.f32:
    return light_intensities[light_idx]
