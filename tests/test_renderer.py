"""Unit tests for the frame renderer.

Tests cover:
- Render target setup and validation
- Full-frame rendering: shape, orientation, agreement with single pixels
- Unclamped output and PNG saving
"""

import numpy as np
import pytest
from PIL import Image as PILImage

from tinytrace.core.settings import DEFAULT_BACKGROUND, RenderSettings
from tinytrace.materials import Material


def _floor_scene():
    from tinytrace.scene.manager import SceneManager

    scene = SceneManager()
    scene.add_light((0.0, 20.0, 0.0), 1.0)
    scene.set_ground_plane(height=-4.0)
    return scene


class TestRenderTarget:
    """Tests for render target management."""

    def test_setup_render_target(self):
        """Test the active dimensions are stored."""
        from tinytrace.core.renderer import get_image_dimensions, setup_render_target

        setup_render_target(64, 32)
        assert get_image_dimensions() == (64, 32)

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (4096, 10), (10, 4096)])
    def test_invalid_dimensions_raise(self, width, height):
        """Test dimensions must be positive and within capacity."""
        from tinytrace.core.renderer import setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(width, height)

    def test_render_without_target_raises(self):
        """Test rendering before setup raises RuntimeError."""
        from tinytrace.core import renderer

        previous = renderer._render_target_initialized[None]
        renderer._render_target_initialized[None] = 0
        try:
            with pytest.raises(RuntimeError):
                renderer.render_frame()
            with pytest.raises(RuntimeError):
                renderer.get_image_numpy()
        finally:
            renderer._render_target_initialized[None] = previous


class TestFrameRenderer:
    """Tests for FrameRenderer."""

    def test_empty_scene_is_background(self):
        """Test every pixel of an empty scene is the background."""
        from tinytrace.core.renderer import FrameRenderer

        renderer = FrameRenderer(RenderSettings(width=8, height=6))
        image = renderer.render()

        assert image.shape == (6, 8, 3)
        assert image.dtype == np.float32
        assert np.allclose(image, np.array(DEFAULT_BACKGROUND, dtype=np.float32), atol=1e-6)
        assert renderer.render_seconds is not None

    def test_image_top_row_first(self):
        """Test the floor shows up in the bottom rows of the returned image."""
        from tinytrace.core.renderer import FrameRenderer

        _floor_scene()
        renderer = FrameRenderer(RenderSettings(width=8, height=6))
        image = renderer.render()

        background = np.array(DEFAULT_BACKGROUND, dtype=np.float32)
        assert np.allclose(image[0], background, atol=1e-6)
        assert not np.allclose(image[-1], background, atol=1e-3)

    def test_render_pixel_matches_frame(self):
        """Test single-pixel rendering agrees with the full frame."""
        from tinytrace.core.renderer import FrameRenderer
        from tinytrace.scene.presets import create_demo_scene

        _, settings = create_demo_scene(RenderSettings(width=16, height=12))
        renderer = FrameRenderer(settings)
        image = renderer.render()

        for i, j in [(0, 0), (5, 7), (15, 11), (8, 3)]:
            color = renderer.render_pixel(i, j)
            # Row j counts from the bottom of the image
            np.testing.assert_allclose(image[12 - 1 - j, i], color, atol=1e-6)

    def test_render_pixel_out_of_range(self):
        """Test pixels outside the image are rejected."""
        from tinytrace.core.renderer import FrameRenderer

        renderer = FrameRenderer(RenderSettings(width=8, height=6))
        with pytest.raises(ValueError):
            renderer.render_pixel(8, 0)
        with pytest.raises(ValueError):
            renderer.render_pixel(0, -1)

    def test_output_is_unclamped(self):
        """Test colors above one survive in the float image."""
        from tinytrace.core.renderer import FrameRenderer
        from tinytrace.scene.manager import SceneManager

        scene = SceneManager()
        bright = scene.add_material(Material(diffuse_color=(5.0, 5.0, 5.0)))
        scene.add_sphere((0.0, 0.0, -3.0), 1.0, bright)
        scene.add_light((0.0, 0.0, 10.0), 2.0)

        renderer = FrameRenderer(RenderSettings(width=9, height=9, fov=30.0))
        image = renderer.render()
        assert image.max() > 1.0
        assert np.all(np.isfinite(image))

    def test_save_png(self, tmp_path):
        """Test the saved PNG has the image size and is 8-bit RGB."""
        from tinytrace.core.renderer import FrameRenderer
        from tinytrace.scene.presets import create_demo_scene

        _, settings = create_demo_scene(RenderSettings(width=32, height=24))
        renderer = FrameRenderer(settings)
        renderer.render()

        path = tmp_path / "demo.png"
        renderer.save_png(str(path))

        with PILImage.open(path) as saved:
            assert saved.size == (32, 24)
            assert saved.mode == "RGB"
