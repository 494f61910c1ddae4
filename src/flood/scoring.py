"""
Flood score function.

Combines a raw susceptibility sample from the flood raster with a live
rainfall factor. Two heatmap modes are supported:

- susceptibility: static terrain vulnerability, rainfall ignored
- realtime: susceptibility scaled by max(rain_floor, rain_factor)

Formula (realtime): score = min(clamp(raw, 0, 1) * max(rain_floor, rain_factor), 1)

A clamped raw value of exactly 1 always scores 1 in both modes.
"""

from enum import Enum
from typing import Union

import numpy as np

from src import config

# Type alias for values that can be scalar or array
NumericType = Union[float, np.ndarray]


class HeatmapMode(Enum):
    """Which branch of the score function drives the map."""

    REALTIME = "realtime"
    SUSCEPTIBILITY = "susceptibility"

    @property
    def label(self) -> str:
        return _MODE_LABELS[self][0]

    @property
    def description(self) -> str:
        return _MODE_LABELS[self][1]

    @classmethod
    def coerce(cls, mode: Union["HeatmapMode", str]) -> "HeatmapMode":
        """Accept a HeatmapMode or its string value."""
        if isinstance(mode, cls):
            return mode
        try:
            return cls(str(mode).lower())
        except ValueError:
            raise ValueError(
                f"Unknown heatmap mode '{mode}'. "
                f"Available: {[m.value for m in cls]}"
            ) from None


_MODE_LABELS = {
    HeatmapMode.REALTIME: ("Real-time Flood Risk", "Rain-adjusted live risk"),
    HeatmapMode.SUSCEPTIBILITY: ("Flood Susceptibility", "Base terrain vulnerability"),
}


def compute_flood_score(
    raw_value: float,
    rain_factor: float,
    mode: Union[HeatmapMode, str],
    rain_floor: float = None,
) -> float:
    """
    Compute the normalized flood score for a single raster sample.

    Args:
        raw_value: Susceptibility sample, expected in [0, 1] (clamped)
        rain_factor: Normalized rainfall factor in [0, 1]
        mode: HeatmapMode or its string value
        rain_floor: Minimum rain scale in realtime mode (default: config.RAIN_FLOOR)

    Returns:
        Normalized score in [0, 1]

    Example:
        >>> compute_flood_score(0.5, 0.0, "realtime")
        0.025
        >>> compute_flood_score(0.42, 0.9, "susceptibility")
        0.42
    """
    mode = HeatmapMode.coerce(mode)
    floor = config.RAIN_FLOOR if rain_floor is None else rain_floor

    p = max(0.0, min(float(raw_value), 1.0))
    if p == 1.0:
        return 1.0
    if mode is HeatmapMode.SUSCEPTIBILITY:
        return p

    rain_scale = max(floor, rain_factor)
    return min(p * rain_scale, 1.0)


def compute_flood_score_array(
    raw_values: NumericType,
    rain_factor: float,
    mode: Union[HeatmapMode, str],
    rain_floor: float = None,
) -> np.ndarray:
    """
    Vectorized compute_flood_score over an array of raster samples.

    Args:
        raw_values: Array of susceptibility samples (any shape)
        rain_factor: Normalized rainfall factor in [0, 1]
        mode: HeatmapMode or its string value
        rain_floor: Minimum rain scale in realtime mode (default: config.RAIN_FLOOR)

    Returns:
        float64 array of scores with the same shape as raw_values
    """
    mode = HeatmapMode.coerce(mode)
    floor = config.RAIN_FLOOR if rain_floor is None else rain_floor

    p = np.clip(np.asarray(raw_values, dtype=np.float64), 0.0, 1.0)
    if mode is HeatmapMode.SUSCEPTIBILITY:
        return p

    rain_scale = max(floor, rain_factor)
    scores = np.minimum(p * rain_scale, 1.0)
    # Saturated samples stay at 1 regardless of rain
    scores[p == 1.0] = 1.0
    return scores
