"""Demo scene configuration.

The demo scene is the classic four-sphere still life: ivory, glass, red
rubber and mirror spheres above a checkerboard floor, lit by three point
lights, seen from the origin looking down -z.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from tinytrace.scene.presets import create_demo_scene
    >>> scene, settings = create_demo_scene()
"""

from tinytrace.core.settings import RenderSettings
from tinytrace.materials.presets import PRESETS
from tinytrace.scene.manager import SceneManager

# =============================================================================
# Demo Scene Constants
# =============================================================================

# (center, radius, material name)
DEMO_SPHERES = (
    ((-3.0, 0.0, -16.0), 2.0, "ivory"),
    ((-1.0, -1.5, -12.0), 2.0, "glass"),
    ((1.5, -0.5, -18.0), 3.0, "red_rubber"),
    ((7.0, 5.0, -18.0), 4.0, "mirror"),
)

# (position, intensity)
DEMO_LIGHTS = (
    ((-20.0, 20.0, 20.0), 1.5),
    ((30.0, 50.0, -25.0), 1.3),
    ((30.0, 20.0, 30.0), 1.3),
)

FLOOR_HEIGHT = -4.0


def create_demo_scene(
    settings: RenderSettings | None = None,
    with_floor: bool = True,
) -> tuple[SceneManager, RenderSettings]:
    """Build the demo scene.

    Args:
        settings: Render settings to return alongside the scene.
            Defaults to RenderSettings() (1024x768, depth 4).
        with_floor: Whether to add the checkerboard floor.

    Returns:
        Tuple of (scene, settings).
    """
    scene = SceneManager()

    material_ids: dict[str, int] = {}
    for center, radius, name in DEMO_SPHERES:
        if name not in material_ids:
            material_ids[name] = scene.add_material(PRESETS[name])
        scene.add_sphere(center, radius, material_ids[name])

    for position, intensity in DEMO_LIGHTS:
        scene.add_light(position, intensity)

    if with_floor:
        scene.set_ground_plane(height=FLOOR_HEIGHT)

    if settings is None:
        settings = RenderSettings()

    return scene, settings
