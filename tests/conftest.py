"""Pytest configuration and fixtures for floodshield tests."""
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest
import numpy as np


@pytest.fixture
def hyderabad_values():
    """100x100 sample array over 1 degree: all no-data except a few cells."""
    values = np.zeros((100, 100), dtype=np.float64)
    values[50, 50] = 0.8
    values[10, 20] = 0.3
    values[0, 0] = 1.0
    return values


@pytest.fixture
def hyderabad_grid(hyderabad_values):
    """Grid over lat 17-18, lng 78-79 with 0.01 degree pixels."""
    from src.flood.raster import RasterGrid

    return RasterGrid.from_array(hyderabad_values, bounds=(78.0, 17.0, 79.0, 18.0))


@pytest.fixture
def cell_center():
    """Return the (lat, lng) centre of a pixel in the hyderabad grid."""

    def _center(pixel_x, pixel_y):
        return 18.0 - (pixel_y + 0.5) * 0.01, 78.0 + (pixel_x + 0.5) * 0.01

    return _center


@pytest.fixture
def ramp_grid():
    """Small 2x3 grid with a no-data cell and a saturated cell."""
    from src.flood.raster import RasterGrid

    values = np.array([[0.0, 0.25, 0.5], [0.67, 0.9, 1.0]], dtype=np.float64)
    return RasterGrid.from_array(values, bounds=(0.0, 0.0, 3.0, 2.0))


@pytest.fixture
def flood_geotiff(tmp_path, hyderabad_values):
    """Write the hyderabad sample array to a GeoTIFF."""
    import rasterio
    from rasterio.transform import from_bounds

    path = tmp_path / "flood_score.tif"
    rows, cols = hyderabad_values.shape
    transform = from_bounds(78.0, 17.0, 79.0, 18.0, cols, rows)
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=rows,
        width=cols,
        count=1,
        dtype="float32",
        crs="EPSG:4326",
        transform=transform,
    ) as dst:
        dst.write(hyderabad_values, 1)
    return path
