"""
Flood risk scoring and map interaction.

Core functionality:
- flood_color_ramp: continuous green -> red color ramp for overlays
- classify / RiskLevel: discrete Low / Moderate / High / Severe labels
- compute_flood_score / HeatmapMode: raster sample x live rainfall
- RasterGrid, resolve_click, render_overlay: raster lookup and painting
- FloodMapView: per-session owner of raster, rain and overlay state

Supporting data:
- RainSignal, fetch_rain_signal, fetch_daily_forecast: Open-Meteo rainfall
- outlook: multi-day outlook score and advisories
- alerts: community danger alert expiry and ranking
- geocode: Nominatim place search
"""

from .color_ramp import flood_color_ramp, flood_color_ramp_array, rgb_to_css
from .risk_levels import RiskLevel, RiskClassification, classify, legend_entries
from .scoring import HeatmapMode, compute_flood_score, compute_flood_score_array
from .raster import RasterGrid
from .sampler import ClickedFloodInfo, resolve_click, render_overlay
from .rain import RainSignal, DayRain, fetch_rain_signal, fetch_daily_forecast, rain_level
from .map_view import FloodMapView

__all__ = [
    # Color
    "flood_color_ramp",
    "flood_color_ramp_array",
    "rgb_to_css",
    # Classification
    "RiskLevel",
    "RiskClassification",
    "classify",
    "legend_entries",
    # Scoring
    "HeatmapMode",
    "compute_flood_score",
    "compute_flood_score_array",
    # Raster
    "RasterGrid",
    "ClickedFloodInfo",
    "resolve_click",
    "render_overlay",
    # Rain
    "RainSignal",
    "DayRain",
    "fetch_rain_signal",
    "fetch_daily_forecast",
    "rain_level",
    # Map session
    "FloodMapView",
]
