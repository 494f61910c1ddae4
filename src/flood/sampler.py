"""
Raster sampling: map-click resolution and overlay rendering.

Both operations run the same pipeline:

    coordinate/pixel -> raw sample -> score function -> color

Clicks end in the risk classifier (popup label and swatch); the overlay
ends in the continuous color ramp. "No data" (outside the raster, or the
0 sentinel) is a normal outcome and is returned as None, or as a fully
transparent pixel in the overlay.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from src import config
from src.flood.color_ramp import RGBColor, flood_color_ramp_array, rgb_to_css
from src.flood.raster import NODATA, RasterGrid
from src.flood.risk_levels import classify
from src.flood.scoring import HeatmapMode, compute_flood_score, compute_flood_score_array

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClickedFloodInfo:
    """Flood risk at a clicked map location."""

    lat: float
    lng: float
    score: float
    level: str
    color: RGBColor

    @property
    def css_color(self) -> str:
        return rgb_to_css(self.color)

    def to_dict(self) -> dict:
        """Serialize for a popup/info-panel presenter."""
        return {
            "lat": self.lat,
            "lng": self.lng,
            "score": round(self.score, 2),
            "level": self.level,
            "color": self.css_color,
        }


def sample_raw_value(grid: Optional[RasterGrid], lat: float, lng: float) -> Optional[float]:
    """
    Look up the raw raster sample under a coordinate.

    Returns None when the grid is missing, the coordinate is outside the
    grid bounds, the pixel index falls outside the backing array, or the
    sample is the no-data sentinel.
    """
    if grid is None:
        return None
    if not grid.contains(lat, lng):
        return None

    pixel_x, pixel_y = grid.pixel_index(lat, lng)
    raw = grid.sample(pixel_x, pixel_y)
    if raw is None or math.isnan(raw) or raw == NODATA:
        return None
    return raw


def resolve_click(
    lat: float,
    lng: float,
    grid: Optional[RasterGrid],
    rain_factor: float,
    mode: Union[HeatmapMode, str],
    rain_floor: float = None,
) -> Optional[ClickedFloodInfo]:
    """
    Resolve a map click to a flood risk result.

    Args:
        lat: Click latitude
        lng: Click longitude
        grid: Loaded raster grid, or None if not yet available
        rain_factor: Current normalized rainfall factor
        mode: HeatmapMode or its string value
        rain_floor: Optional override of config.RAIN_FLOOR

    Returns:
        ClickedFloodInfo, or None when there is no data at the location
    """
    raw = sample_raw_value(grid, lat, lng)
    if raw is None:
        logger.debug(f"No flood data at ({lat:.5f}, {lng:.5f})")
        return None

    score = compute_flood_score(raw, rain_factor, mode, rain_floor=rain_floor)
    risk = classify(score)
    return ClickedFloodInfo(lat=lat, lng=lng, score=score, level=risk.label, color=risk.color)


def render_overlay(
    grid: Optional[RasterGrid],
    rain_factor: float,
    mode: Union[HeatmapMode, str],
    opacity: float = None,
    rain_floor: float = None,
) -> Optional[np.ndarray]:
    """
    Paint every raster pixel through score function and color ramp.

    Each call repaints the whole grid; there is no incremental update.

    Args:
        grid: Loaded raster grid, or None if not yet available
        rain_factor: Current normalized rainfall factor
        mode: HeatmapMode or its string value
        opacity: Alpha for data pixels in [0, 1] (default: config.DEFAULT_OVERLAY_OPACITY)
        rain_floor: Optional override of config.RAIN_FLOOR

    Returns:
        uint8 RGBA array with shape (rows, cols, 4), no-data pixels fully
        transparent; None when grid is None
    """
    if grid is None:
        return None

    mode = HeatmapMode.coerce(mode)
    if opacity is None:
        opacity = config.DEFAULT_OVERLAY_OPACITY
    opacity = max(0.0, min(1.0, float(opacity)))

    raw = grid.values[0]
    nodata = grid.nodata_mask()

    scores = compute_flood_score_array(raw, rain_factor, mode, rain_floor=rain_floor)
    rgb = flood_color_ramp_array(scores)

    rows, cols = raw.shape
    rgba = np.zeros((rows, cols, 4), dtype=np.uint8)
    rgba[..., :3] = rgb
    rgba[..., 3] = int(math.floor(opacity * 255 + 0.5))
    rgba[nodata] = 0

    logger.debug(
        f"Rendered {mode.value} overlay {rows}x{cols} "
        f"(rain_factor={rain_factor:.3f}, {int(nodata.sum())} no-data pixels)"
    )
    return rgba
