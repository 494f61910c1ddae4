"""
Tests for the flood color ramp.

Ramp: green (0) -> yellow (0.5) -> orange (0.67) -> red (1), boundary values
in the lower segment, channels rounded to the nearest integer.
"""

import numpy as np
import pytest

from src.flood.color_ramp import (
    GREEN,
    ORANGE,
    RED,
    YELLOW,
    flood_color_ramp,
    flood_color_ramp_array,
    rgb_to_css,
)


class TestFloodColorRamp:
    """Tests for the scalar ramp."""

    def test_endpoints(self):
        assert flood_color_ramp(0.0) == (0, 200, 0)
        assert flood_color_ramp(1.0) == (200, 0, 0)

    def test_anchor_colors(self):
        """Segment boundaries resolve exactly to the anchor colors."""
        assert flood_color_ramp(0.5) == YELLOW
        assert flood_color_ramp(0.67) == ORANGE

    def test_midpoint_of_first_segment(self):
        """0.25 is halfway between green and yellow; 127.5 rounds up."""
        assert flood_color_ramp(0.25) == (128, 215, 0)

    def test_interpolated_value(self):
        """0.48 -> t=0.96 along green->yellow."""
        assert flood_color_ramp(0.48) == (245, 229, 0)

    def test_just_above_boundary_uses_upper_segment(self):
        r, g, b = flood_color_ramp(0.51)
        assert r == 255
        assert g < 230

    @pytest.mark.parametrize("value,expected", [
        (-0.5, GREEN),
        (-1e9, GREEN),
        (1.5, RED),
        (42.0, RED),
    ])
    def test_out_of_range_is_clamped(self, value, expected):
        assert flood_color_ramp(value) == expected

    def test_nan_treated_as_zero(self):
        assert flood_color_ramp(float("nan")) == GREEN

    def test_channels_in_range(self):
        for v in np.linspace(0, 1, 101):
            color = flood_color_ramp(v)
            assert len(color) == 3
            assert all(isinstance(c, int) for c in color)
            assert all(0 <= c <= 255 for c in color)

    def test_progresses_green_to_red(self):
        """Red rises then falls only on the last segment; green never increases past yellow."""
        samples = [0.0, 0.25, 0.5, 0.67, 0.85, 1.0]
        colors = [flood_color_ramp(v) for v in samples]

        # green -> yellow: red non-decreasing
        assert colors[0][0] <= colors[1][0] <= colors[2][0]
        # from yellow onward green is non-increasing
        greens = [c[1] for c in colors[2:]]
        assert greens == sorted(greens, reverse=True)
        # blue stays at zero across the ramp
        assert all(c[2] == 0 for c in colors)

    def test_red_non_decreasing_within_first_segment(self):
        values = np.linspace(0, 0.5, 26)
        reds = [flood_color_ramp(v)[0] for v in values]
        assert reds == sorted(reds)

    def test_green_non_increasing_within_upper_segments(self):
        values = np.linspace(0.5, 1.0, 26)
        greens = [flood_color_ramp(v)[1] for v in values]
        assert greens == sorted(greens, reverse=True)


class TestFloodColorRampArray:
    """Tests for the vectorized ramp."""

    def test_matches_scalar(self):
        values = np.array([0.0, 0.1, 0.25, 0.48, 0.5, 0.51, 0.6, 0.67, 0.7, 0.85, 0.99, 1.0])
        colors = flood_color_ramp_array(values)
        for v, c in zip(values, colors):
            assert tuple(int(x) for x in c) == flood_color_ramp(v)

    def test_shape_and_dtype(self):
        values = np.random.rand(4, 5)
        colors = flood_color_ramp_array(values)
        assert colors.shape == (4, 5, 3)
        assert colors.dtype == np.uint8

    def test_clamps_and_handles_nan(self):
        colors = flood_color_ramp_array([-1.0, 2.0, np.nan])
        assert tuple(colors[0]) == GREEN
        assert tuple(colors[1]) == RED
        assert tuple(colors[2]) == GREEN


class TestCssAndColormap:
    def test_rgb_to_css(self):
        assert rgb_to_css((0, 200, 0)) == "rgb(0,200,0)"

    def test_flood_risk_colormap_registered(self):
        import matplotlib

        cmap = matplotlib.colormaps["flood_risk"]
        r, g, b, _ = cmap(0.0)
        assert (round(r * 255), round(g * 255), round(b * 255)) == GREEN

    def test_reimport_re_registers_colormap(self):
        import importlib

        import matplotlib

        from src.flood import color_ramp

        importlib.reload(color_ramp)
        cmap = matplotlib.colormaps["flood_risk"]
        r, g, b, _ = cmap(1.0)
        assert (round(r * 255), round(g * 255), round(b * 255)) == RED
