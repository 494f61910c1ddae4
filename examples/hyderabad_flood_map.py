#!/usr/bin/env python3
"""
Render the Hyderabad flood risk overlay and inspect individual locations.

Loads the static flood susceptibility raster, fetches today's rainfall from
Open-Meteo, and writes the overlay as a PNG with a risk legend.

Usage:
    # Real-time (rain-adjusted) overlay
    python examples/hyderabad_flood_map.py

    # Terrain-only susceptibility overlay
    python examples/hyderabad_flood_map.py --mode susceptibility

    # Resolve a map click
    python examples/hyderabad_flood_map.py --click 17.406 78.477

    # Use a different raster and skip the rain feed
    python examples/hyderabad_flood_map.py --raster data/other.tif --no-rain
"""

import argparse
import logging
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Patch

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src import config
from src.flood.map_view import FloodMapView
from src.flood.rain import RainSignal, fetch_rain_signal
from src.flood.raster import RasterGrid
from src.flood.risk_levels import RiskLevel
from src.flood.scoring import HeatmapMode

logging.basicConfig(
    level=getattr(logging, config.DEFAULT_LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def save_overlay_png(view: FloodMapView, output_path: Path) -> None:
    """Write the current overlay with geographic extent and a legend."""
    grid = view.grid
    rgba = view.overlay()

    fig, ax = plt.subplots(figsize=(10, 10))
    ax.imshow(
        rgba,
        extent=[grid.xmin, grid.xmax, grid.ymin, grid.ymax],
        origin="upper",
        interpolation="nearest",
    )
    ax.set_title(f"{view.mode.label} ({view.mode.description})", fontsize=14, fontweight="bold")
    ax.set_xlabel("Longitude (WGS84)")
    ax.set_ylabel("Latitude (WGS84)")
    ax.grid(True, alpha=0.3, linestyle="--", linewidth=0.5)

    handles = [Patch(color=[c / 255 for c in level.color], label=level.label) for level in RiskLevel]
    ax.legend(handles=handles, title="Flood Risk", loc="lower right")

    if view.mode is HeatmapMode.REALTIME:
        rain = view.rain
        stats_text = (
            f"Rain factor: {rain.rain_percent}%  |  24h: {rain.rain_24h_mm:.1f} mm  |  "
            f"Peak hour: {rain.rain_peak_mm:.1f} mm"
        )
        fig.text(0.5, 0.02, stats_text, ha="center", fontsize=10)

    plt.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Saved overlay to {output_path}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Hyderabad flood risk map")
    parser.add_argument("--raster", type=Path, default=config.FLOOD_RASTER_PATH,
                        help="Flood susceptibility GeoTIFF")
    parser.add_argument("--mode", choices=["realtime", "susceptibility"], default="realtime",
                        help="Heatmap mode (default: realtime)")
    parser.add_argument("--click", nargs=2, type=float, metavar=("LAT", "LNG"),
                        help="Resolve flood risk at a location")
    parser.add_argument("--no-rain", action="store_true",
                        help="Skip the rainfall feed (rain factor 0)")
    parser.add_argument("--output", type=Path, default=None,
                        help="Output PNG (default: output/flood_<mode>.png)")
    args = parser.parse_args()

    rain_loader = RainSignal.unavailable if args.no_rain else fetch_rain_signal

    with FloodMapView(mode=args.mode) as view:
        view.load(lambda: RasterGrid.from_geotiff(args.raster), rain_loader)

        if not view.is_ready:
            logger.error(f"No flood raster available at {args.raster}")
            return 1

        if args.click:
            lat, lng = args.click
            info = view.click(lat, lng)
            if info is None:
                print(f"No flood data at ({lat}, {lng})")
            else:
                print(f"Flood risk at ({lat}, {lng}): {info.score:.2f} ({info.level}, {info.css_color})")

        output = args.output or config.OUTPUT_DIR / f"flood_{view.mode.value}.png"
        save_overlay_png(view, output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
