"""
Tests for RasterGrid construction, geometry and GeoTIFF loading.
"""

import numpy as np
import pytest
import rasterio
from rasterio.transform import from_bounds

from src.flood.raster import RasterGrid


class TestRasterGridFromArray:
    def test_geometry(self, hyderabad_grid):
        assert hyderabad_grid.shape == (100, 100)
        assert hyderabad_grid.bounds == (78.0, 17.0, 79.0, 18.0)
        assert hyderabad_grid.pixel_width == pytest.approx(0.01)
        assert hyderabad_grid.pixel_height == pytest.approx(0.01)

    def test_2d_values_get_band_axis(self, hyderabad_grid):
        assert hyderabad_grid.values.shape == (1, 100, 100)

    def test_3d_values_kept(self):
        grid = RasterGrid.from_array(np.ones((2, 4, 5)), bounds=(0, 0, 5, 4))
        assert grid.values.shape == (2, 4, 5)
        assert grid.shape == (4, 5)

    def test_values_are_read_only(self, hyderabad_grid):
        with pytest.raises(ValueError):
            hyderabad_grid.values[0, 0, 0] = 0.5

    def test_source_array_not_shared(self, hyderabad_values):
        grid = RasterGrid.from_array(hyderabad_values, bounds=(78.0, 17.0, 79.0, 18.0))
        hyderabad_values[50, 50] = 0.1
        assert grid.sample(50, 50) == pytest.approx(0.8)

    def test_frozen(self, hyderabad_grid):
        with pytest.raises(AttributeError):
            hyderabad_grid.xmin = 0.0

    def test_invalid_bounds_raise(self):
        with pytest.raises(ValueError, match="Invalid bounds"):
            RasterGrid.from_array(np.ones((2, 2)), bounds=(79.0, 17.0, 78.0, 18.0))

    def test_bounds_must_have_four_values(self):
        with pytest.raises(ValueError, match="4 values"):
            RasterGrid.from_array(np.ones((2, 2)), bounds=(78.0, 17.0))

    def test_1d_values_raise(self):
        with pytest.raises(ValueError, match="2-D or 3-D"):
            RasterGrid.from_array(np.ones(4), bounds=(0, 0, 1, 1))

    def test_empty_values_raise(self):
        with pytest.raises(ValueError, match="empty"):
            RasterGrid.from_array(np.ones((0, 3)), bounds=(0, 0, 1, 1))


class TestRasterGridLookup:
    def test_contains_is_inclusive(self, hyderabad_grid):
        assert hyderabad_grid.contains(18.0, 79.0)
        assert hyderabad_grid.contains(17.0, 78.0)
        assert not hyderabad_grid.contains(18.0 + 1e-9, 78.5)
        assert not hyderabad_grid.contains(17.5, 79.0 + 1e-9)

    def test_pixel_index_inverts_y(self, hyderabad_grid, cell_center):
        lat, lng = cell_center(20, 10)
        assert hyderabad_grid.pixel_index(lat, lng) == (20, 10)

    def test_north_west_corner_is_pixel_zero(self, hyderabad_grid):
        assert hyderabad_grid.pixel_index(18.0, 78.0) == (0, 0)

    def test_sample(self, hyderabad_grid):
        assert hyderabad_grid.sample(50, 50) == pytest.approx(0.8)
        assert hyderabad_grid.sample(1, 1) == 0.0

    @pytest.mark.parametrize("pixel_x,pixel_y", [(100, 0), (0, 100), (-1, 0), (0, -1)])
    def test_sample_outside_array_is_none(self, hyderabad_grid, pixel_x, pixel_y):
        assert hyderabad_grid.sample(pixel_x, pixel_y) is None

    def test_nodata_mask(self, ramp_grid):
        mask = ramp_grid.nodata_mask()
        assert mask.tolist() == [[True, False, False], [False, False, False]]


class TestRasterGridFromGeotiff:
    def test_loads_geotiff(self, flood_geotiff):
        grid = RasterGrid.from_geotiff(flood_geotiff)
        assert grid.shape == (100, 100)
        assert grid.xmin == pytest.approx(78.0)
        assert grid.ymax == pytest.approx(18.0)
        assert grid.pixel_width == pytest.approx(0.01)
        assert grid.pixel_height == pytest.approx(0.01)
        assert grid.sample(50, 50) == pytest.approx(0.8)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            RasterGrid.from_geotiff(tmp_path / "missing.tif")

    def test_declared_nodata_maps_to_sentinel(self, tmp_path):
        data = np.array([[-9999.0, 0.4], [0.6, np.nan]], dtype=np.float32)
        path = tmp_path / "nodata.tif"
        with rasterio.open(
            path,
            "w",
            driver="GTiff",
            height=2,
            width=2,
            count=1,
            dtype="float32",
            crs="EPSG:4326",
            transform=from_bounds(0, 0, 2, 2, 2, 2),
            nodata=-9999.0,
        ) as dst:
            dst.write(data, 1)

        grid = RasterGrid.from_geotiff(path)
        assert grid.sample(0, 0) == 0.0
        assert grid.sample(1, 1) == 0.0
        assert grid.sample(1, 0) == pytest.approx(0.4)
