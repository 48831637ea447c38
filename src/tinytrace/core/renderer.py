"""Frame renderer: one primary ray per pixel into a float color buffer.

The render kernel loops over every pixel with ti.ndrange. Taichi runs the
outermost loop of a kernel in parallel; each pixel reads only the scene and
shader configuration and writes only its own buffer cell, so no
synchronization is needed.

Colors are stored unclamped. Clamping and quantization happen when the
image is exported.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from tinytrace.core.renderer import FrameRenderer
    >>> from tinytrace.scene.presets import create_demo_scene
    >>>
    >>> scene, settings = create_demo_scene()
    >>> renderer = FrameRenderer(settings)
    >>> renderer.render()
    >>> renderer.save_png("out.png")
"""

import logging
import time

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from tinytrace.camera.pinhole import PinholeCamera, get_primary_ray, setup_camera
from tinytrace.core.settings import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, RenderSettings
from tinytrace.core.shader import cast_ray, setup_shader

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer (preallocated to max size to avoid kernel recompilation)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image dimensions and clear the buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if not 0 < width <= MAX_IMAGE_WIDTH or not 0 < height <= MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) must be positive and at most "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def shade_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Color of pixel (i, j): cast its primary ray at depth 0."""
    ray = get_primary_ray(pixel_i, pixel_j, width, height)
    return cast_ray(ray.origin, ray.direction, 0)


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32):
    for i, j in ti.ndrange(width, height):
        _color_buffer[i, j] = shade_pixel(i, j, width, height)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    return shade_pixel(pixel_i, pixel_j, width, height)


def render_frame() -> None:
    """Render every pixel of the render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_frame(width, height)


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single pixel without touching the buffer.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).

    Returns:
        Tuple of (R, G, B) color values, unclamped.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the pixel lies outside the image.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not 0 <= pixel_i < width or not 0 <= pixel_j < height:
        raise ValueError(f"Pixel ({pixel_i}, {pixel_j}) outside {width}x{height} image")

    color = _render_single_pixel(pixel_i, pixel_j, width, height)
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Returns:
        Unclamped float32 array of shape (height, width, 3), top row first.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    image = _color_buffer.to_numpy()[:width, :height, :]

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(image, (1, 0, 2))

    # Row 0 of the buffer is the bottom of the image
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)


# =============================================================================
# High-level Renderer
# =============================================================================


class FrameRenderer:
    """Renders the current scene with a given set of render settings.

    Creating a FrameRenderer configures the camera, the shader and the
    render target from the settings. The scene itself is whatever the
    SceneManager has built.

    Attributes:
        settings: The RenderSettings in use.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        """Initialize the renderer.

        Args:
            settings: Render settings. Defaults to RenderSettings().
        """
        self.settings = settings if settings is not None else RenderSettings()
        self._render_seconds: float | None = None

        setup_camera(PinholeCamera(fov=self.settings.fov, aspect_ratio=self.settings.aspect_ratio))
        setup_shader(self.settings)
        setup_render_target(self.settings.width, self.settings.height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.settings.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.settings.height

    @property
    def render_seconds(self) -> float | None:
        """Wall-clock duration of the last render(), or None."""
        return self._render_seconds

    def render(self) -> npt.NDArray[np.float32]:
        """Render the full frame.

        Returns:
            The image as returned by get_image_numpy().
        """
        logger.info(
            "Rendering %dx%d (max depth %d)",
            self.width,
            self.height,
            self.settings.max_depth,
        )
        start = time.perf_counter()
        render_frame()
        ti.sync()
        self._render_seconds = time.perf_counter() - start
        logger.info("Frame rendered in %.3f s", self._render_seconds)
        return self.get_image_numpy()

    def render_pixel(self, pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
        """Render one pixel (j = 0 is the bottom row)."""
        return render_pixel(pixel_i, pixel_j)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image, shape (height, width, 3), unclamped."""
        return get_image_numpy()

    def save_png(self, filepath: str, gamma: float = 1.0) -> None:
        """Clamp, quantize and save the rendered image as a PNG.

        Args:
            filepath: Output path.
            gamma: Gamma correction value. Default 1.0 (linear).
        """
        from tinytrace.output.export import save_png_from_array

        save_png_from_array(self.get_image_numpy(), filepath, gamma=gamma)
        logger.info("Saved %s", filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return f"FrameRenderer(width={self.width}, height={self.height})"
