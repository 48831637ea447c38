"""Unit tests for RenderSettings."""

import math

import pytest

from tinytrace.core.settings import (
    DEFAULT_BACKGROUND,
    MAX_RECURSION_DEPTH,
    MAX_STACK_SIZE,
    RenderSettings,
)


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self):
        """Test the defaults describe the demo render."""
        settings = RenderSettings()
        assert settings.width == 1024
        assert settings.height == 768
        assert settings.max_depth == 4
        assert settings.background == DEFAULT_BACKGROUND
        assert abs(math.radians(settings.fov) - 4.0 / math.pi) < 1e-12

    def test_aspect_ratio(self):
        """Test aspect ratio is width over height."""
        assert RenderSettings(width=320, height=240).aspect_ratio == pytest.approx(4.0 / 3.0)

    def test_stack_holds_deepest_tree(self):
        """Test the deepest supported tree fits in the shader stack."""
        assert MAX_RECURSION_DEPTH + 2 <= MAX_STACK_SIZE


class TestValidation:
    """Tests for rejected values."""

    @pytest.mark.parametrize(
        "changes",
        [
            {"width": 0},
            {"height": -1},
            {"width": 5000},
            {"fov": 0.0},
            {"fov": 180.0},
            {"max_depth": -1},
            {"max_depth": MAX_RECURSION_DEPTH + 1},
            {"t_min": 0.0},
            {"ray_offset": -1e-3},
            {"background": (0.1, 0.2)},
        ],
    )
    def test_invalid_values_raise(self, changes):
        """Test out-of-range values raise ValueError."""
        with pytest.raises(ValueError):
            RenderSettings(**changes)

    def test_max_depth_zero_allowed(self):
        """Test depth 0 (direct lighting only) is valid."""
        assert RenderSettings(max_depth=0).max_depth == 0

    def test_settings_are_frozen(self):
        """Test settings cannot be mutated in place."""
        settings = RenderSettings()
        with pytest.raises(AttributeError):
            settings.width = 10


class TestConversion:
    """Tests for replace() and dictionary conversion."""

    def test_replace(self):
        """Test replace changes only the given fields."""
        settings = RenderSettings(width=64, height=48)
        changed = settings.replace(max_depth=2)
        assert changed.max_depth == 2
        assert changed.width == 64
        assert settings.max_depth == 4

    def test_replace_revalidates(self):
        """Test replace rejects invalid values."""
        with pytest.raises(ValueError):
            RenderSettings().replace(fov=-5.0)

    def test_dict_round_trip(self):
        """Test to_dict/from_dict reproduce the settings."""
        settings = RenderSettings(width=64, height=48, fov=45.0, background=(0.0, 0.0, 0.0))
        data = settings.to_dict()
        assert data["background"] == [0.0, 0.0, 0.0]
        assert RenderSettings.from_dict(data) == settings

    def test_from_dict_uses_defaults(self):
        """Test missing keys fall back to defaults."""
        settings = RenderSettings.from_dict({"max_depth": 1})
        assert settings.max_depth == 1
        assert settings.width == 1024

    def test_from_dict_unknown_key_raises(self):
        """Test unknown keys are reported."""
        with pytest.raises(ValueError, match="samples"):
            RenderSettings.from_dict({"samples": 16})
