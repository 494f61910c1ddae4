"""
Color ramp for flood risk visualization.

Maps a normalized risk value in [0, 1] to an RGB color by piecewise linear
interpolation through four anchors:

    green (0.00) -> yellow (0.50) -> orange (0.67) -> red (1.00)

Boundary values belong to the lower segment. The same ramp is registered
with matplotlib as ``"flood_risk"`` for legends and figures.
"""

import math
from typing import Tuple, Union

import matplotlib
import numpy as np
from matplotlib.colors import LinearSegmentedColormap

RGBColor = Tuple[int, int, int]

GREEN = (0, 200, 0)
YELLOW = (255, 230, 0)
ORANGE = (255, 140, 0)
RED = (200, 0, 0)

# (segment_start, segment_end, start_color, end_color)
RAMP_SEGMENTS = (
    (0.0, 0.5, GREEN, YELLOW),
    (0.5, 0.67, YELLOW, ORANGE),
    (0.67, 1.0, ORANGE, RED),
)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _lerp_color(c1: RGBColor, c2: RGBColor, t: float) -> RGBColor:
    return tuple(_round_half_up(a + (b - a) * t) for a, b in zip(c1, c2))


def flood_color_ramp(value: float) -> RGBColor:
    """
    Map a normalized flood risk value to an RGB color.

    Values outside [0, 1] are clamped, never rejected. NaN is treated as 0.

    Args:
        value: Normalized risk score

    Returns:
        (r, g, b) tuple of ints in [0, 255]

    Example:
        >>> flood_color_ramp(0.0)
        (0, 200, 0)
        >>> flood_color_ramp(1.0)
        (200, 0, 0)
    """
    value = float(value)
    if math.isnan(value):
        value = 0.0
    value = max(0.0, min(1.0, value))

    for start, end, c1, c2 in RAMP_SEGMENTS:
        if value <= end:
            return _lerp_color(c1, c2, (value - start) / (end - start))

    # Unreachable after clamping
    return RED


def flood_color_ramp_array(values: Union[np.ndarray, list]) -> np.ndarray:
    """
    Vectorized flood_color_ramp.

    Produces exactly the same colors as the scalar version, for every element.

    Args:
        values: Array of normalized risk scores (any shape)

    Returns:
        uint8 array with shape (*values.shape, 3)
    """
    values = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0)
    values = np.clip(values, 0.0, 1.0)

    rgb = np.zeros(values.shape + (3,), dtype=np.float64)
    lower = -np.inf
    for start, end, c1, c2 in RAMP_SEGMENTS:
        mask = (values > lower) & (values <= end)
        if np.any(mask):
            t = (values[mask] - start) / (end - start)
            c1_arr = np.asarray(c1, dtype=np.float64)
            c2_arr = np.asarray(c2, dtype=np.float64)
            rgb[mask] = c1_arr + (c2_arr - c1_arr) * t[:, np.newaxis]
        lower = end

    return np.floor(rgb + 0.5).astype(np.uint8)


def rgb_to_css(color: RGBColor) -> str:
    """Format an RGB triple as a CSS color string, e.g. ``rgb(0,200,0)``."""
    r, g, b = color
    return f"rgb({r},{g},{b})"


def _build_colormap() -> LinearSegmentedColormap:
    stops = [(0.0, GREEN), (0.5, YELLOW), (0.67, ORANGE), (1.0, RED)]
    return LinearSegmentedColormap.from_list(
        "flood_risk",
        [(pos, tuple(c / 255.0 for c in color)) for pos, color in stops],
        N=256,
    )


# Register the flood risk colormap with matplotlib (colormaps registry, >= 3.7)
flood_risk_cmap = _build_colormap()
matplotlib.colormaps.register(flood_risk_cmap, force=True)
