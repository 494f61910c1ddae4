"""Configuration module for the floodshield project.

Centralizes data paths, service endpoints and the flood policy constants.
Policy constants can be recalibrated per deployment region through
``FLOODSHIELD_*`` environment variables.
"""
import os
from pathlib import Path


def _env_float(name: str, default: float) -> float:
    """Read a float override from the environment, falling back to default."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Static flood susceptibility raster (~250 m/pixel, one band, 0 = no data)
FLOOD_RASTER_PATH = Path(
    os.environ.get("FLOODSHIELD_RASTER", DATA_DIR / "partial_flood_score_250m.tif")
)

# Map defaults (Hyderabad)
DEFAULT_CENTER = (17.406, 78.477)  # (lat, lon)
FORECAST_LOCATION = (17.384, 78.4564)  # rain calendar / dashboard point
DEFAULT_OVERLAY_OPACITY = 0.6

# Rainfall policy
# rain_factor = min(peak_mm_per_hr / RAIN_CAP_MM, 1)
RAIN_CAP_MM = _env_float("FLOODSHIELD_RAIN_CAP_MM", 20.0)
# Realtime mode never scales susceptibility below this
RAIN_FLOOR = _env_float("FLOODSHIELD_RAIN_FLOOR", 0.05)

# Daily rain levels (mm/day)
MODERATE_RAIN_MM = 2.5
HEAVY_RAIN_MM = 15.0

# Risk classification thresholds (upper bounds, inclusive)
RISK_THRESHOLDS = {
    "low_max": 0.50,
    "moderate_max": 0.67,
    "high_max": 0.85,
}

# External services
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
REQUEST_TIMEOUT = 30  # seconds
USER_AGENT = "floodshield/0.1"

# Community alerts
ALERT_TTL_HOURS = 36
MIN_ALERT_MESSAGE_LENGTH = 5

# Default settings
DEFAULT_LOG_LEVEL = "INFO"
