"""Scene manager for building a render scene.

The SceneManager is the single owner of a scene: it registers materials,
places spheres that reference them by ID, adds point lights and toggles the
checkerboard ground plane. Everything it adds is written straight into the
Taichi fields read by the intersector and the shader; the scene is read-only
for the duration of a render.

The manager also keeps a host-side record of what it added so a scene can
be exported to, and rebuilt from, a plain dictionary (e.g. a JSON file).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from tinytrace.materials import IVORY
    >>> from tinytrace.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ivory = scene.add_material(IVORY)
    >>> scene.add_sphere(center=(-3.0, 0.0, -16.0), radius=2.0, material_id=ivory)
    >>> scene.add_light(position=(-20.0, 20.0, 20.0), intensity=1.5)
    >>> scene.set_ground_plane(height=-4.0)
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import taichi.math as tm

from tinytrace.geometry.plane import (
    DEFAULT_CHECKER_COLOR_A,
    DEFAULT_CHECKER_COLOR_B,
    DEFAULT_CHECKER_SIZE,
    DEFAULT_PLANE_HEIGHT,
)
from tinytrace.materials.material import Material
from tinytrace.materials.phong import (
    MAX_MATERIALS,
    add_material,
    clear_materials,
    get_material_count,
)
from tinytrace.scene import intersection
from tinytrace.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    is_ground_plane_enabled,
)
from tinytrace.scene.lights import MAX_LIGHTS, add_light, clear_lights, get_light_count

logger = logging.getLogger(__name__)

vec3 = tm.vec3


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene."""

    light_index: int
    position: tuple[float, float, float]
    intensity: float


@dataclass
class GroundPlaneInfo:
    """Parameters of the checkerboard ground plane."""

    height: float = DEFAULT_PLANE_HEIGHT
    checker_size: float = DEFAULT_CHECKER_SIZE
    color_a: tuple[float, float, float] = DEFAULT_CHECKER_COLOR_A
    color_b: tuple[float, float, float] = DEFAULT_CHECKER_COLOR_B


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations (Material.to_dict()).
        spheres: List of sphere configurations.
        lights: List of light configurations.
        ground_plane: Ground plane configuration, or None if disabled.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)
    ground_plane: dict[str, Any] | None = None


def _as_triple(values: Any, name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


class SceneManager:
    """Builds and owns the scene read by the renderer.

    Creating a SceneManager clears any scene data left in the Taichi fields,
    so only one scene exists at a time.

    Attributes:
        materials: Materials in registration order (index == material ID).
        spheres: SphereInfo for every sphere.
        lights: LightInfo for every light.
        ground_plane: GroundPlaneInfo, or None if the plane is disabled.

    Example:
        >>> scene = SceneManager()
        >>> red = scene.add_material(Material(diffuse_color=(1.0, 0.0, 0.0)))
        >>> scene.add_sphere((0, 0, -3), 1.0, red)
        >>> scene.add_sphere((2, 0, -4), 1.0, red)  # material is shared
        >>> scene.add_light((0, 5, 0), 1.0)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[Material] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self.ground_plane: GroundPlaneInfo | None = None
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_materials()
        clear_lights()
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()
        self.ground_plane = None

    def clear(self) -> None:
        """Clear the entire scene (primitives, materials and lights)."""
        self._clear_all()

    # =========================================================================
    # Materials
    # =========================================================================

    def add_material(self, material: Material) -> int:
        """Register a material.

        Args:
            material: The material to register.

        Returns:
            The material ID to pass to add_sphere().

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
        """
        material_id = add_material(material)
        self.materials.append(material)
        logger.debug("Added material %d: %s", material_id, material)
        return material_id

    def get_material(self, material_id: int) -> Material | None:
        """Get a registered material by ID, or None if unknown."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def get_material_count(self) -> int:
        """Get the number of registered materials."""
        return get_material_count()

    # =========================================================================
    # Primitives
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: ID of a registered material.

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If the radius is not positive or material_id is unknown.
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        if material_id < 0 or material_id >= get_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

        center = _as_triple(center, "center")
        sphere_index = add_sphere(vec3(center[0], center[1], center[2]), radius, material_id)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=center,
                radius=radius,
                material_id=material_id,
            )
        )
        logger.debug("Added sphere %d at %s (r=%s)", sphere_index, center, radius)
        return sphere_index

    def add_sphere_with_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> tuple[int, int]:
        """Register a new material and add a sphere that uses it.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_material(material)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    def set_ground_plane(
        self,
        height: float = DEFAULT_PLANE_HEIGHT,
        checker_size: float = DEFAULT_CHECKER_SIZE,
        color_a: tuple[float, float, float] = DEFAULT_CHECKER_COLOR_A,
        color_b: tuple[float, float, float] = DEFAULT_CHECKER_COLOR_B,
    ) -> None:
        """Enable the checkerboard ground plane.

        Raises:
            ValueError: If checker_size is not positive.
        """
        color_a = _as_triple(color_a, "color_a")
        color_b = _as_triple(color_b, "color_b")
        intersection.set_ground_plane(height, checker_size, color_a, color_b)
        self.ground_plane = GroundPlaneInfo(
            height=height,
            checker_size=checker_size,
            color_a=color_a,
            color_b=color_b,
        )

    def disable_ground_plane(self) -> None:
        """Remove the ground plane from the scene."""
        intersection.disable_ground_plane()
        self.ground_plane = None

    def has_ground_plane(self) -> bool:
        """Check if the ground plane is enabled."""
        return is_ground_plane_enabled()

    # =========================================================================
    # Lights
    # =========================================================================

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light.

        Args:
            position: World-space position as (x, y, z).
            intensity: Scalar intensity (must be positive).

        Returns:
            The index of the added light.

        Raises:
            ValueError: If the intensity is not positive.
            RuntimeError: If the maximum number of lights is exceeded.
        """
        position = _as_triple(position, "position")
        light_index = add_light(position, intensity)
        self.lights.append(
            LightInfo(light_index=light_index, position=position, intensity=intensity)
        )
        logger.debug("Added light %d at %s (intensity %s)", light_index, position, intensity)
        return light_index

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        for material in self.materials:
            config.materials.append(material.to_dict())

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for light in self.lights:
            config.lights.append({"position": list(light.position), "intensity": light.intensity})

        if self.ground_plane is not None:
            config.ground_plane = {
                "height": self.ground_plane.height,
                "checker_size": self.ground_plane.checker_size,
                "color_a": list(self.ground_plane.color_a),
                "color_b": list(self.ground_plane.color_b),
            }

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first. Materials are loaded before spheres
        so sphere material IDs resolve.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        try:
            for material_config in config.materials:
                self.add_material(Material.from_dict(material_config))

            for sphere_config in config.spheres:
                self.add_sphere(
                    sphere_config["center"],
                    sphere_config["radius"],
                    sphere_config["material_id"],
                )

            for light_config in config.lights:
                self.add_light(light_config["position"], light_config["intensity"])
        except KeyError as e:
            raise ValueError(f"Missing required scene key: {e}") from e

        if config.ground_plane is not None:
            self.set_ground_plane(
                height=config.ground_plane.get("height", DEFAULT_PLANE_HEIGHT),
                checker_size=config.ground_plane.get("checker_size", DEFAULT_CHECKER_SIZE),
                color_a=config.ground_plane.get("color_a", DEFAULT_CHECKER_COLOR_A),
                color_b=config.ground_plane.get("color_b", DEFAULT_CHECKER_COLOR_B),
            )

        logger.info(
            "Loaded scene: %d materials, %d spheres, %d lights, ground plane %s",
            len(self.materials),
            len(self.spheres),
            len(self.lights),
            "on" if self.ground_plane is not None else "off",
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
            "ground_plane": config.ground_plane,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary produced by to_dict()."""
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
            ground_plane=data.get("ground_plane"),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
