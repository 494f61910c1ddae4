"""
Flood susceptibility raster grid.

RasterGrid is an immutable, decoded view of the static flood raster:
geographic bounds, per-axis pixel size and a (bands, rows, cols) array of
samples in [0, 1]. A sample of 0 is the no-data sentinel. Row 0 is the
northern edge, matching standard raster storage order.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np
import rasterio

logger = logging.getLogger(__name__)

NODATA = 0.0


@dataclass(frozen=True)
class RasterGrid:
    """
    Decoded raster grid in geographic (lon/lat) coordinates.

    Attributes:
        xmin: Western edge (longitude)
        xmax: Eastern edge (longitude)
        ymin: Southern edge (latitude)
        ymax: Northern edge (latitude)
        pixel_width: Pixel size along longitude (degrees)
        pixel_height: Pixel size along latitude (degrees, positive)
        values: Read-only float64 array with shape (bands, rows, cols)
    """

    xmin: float
    xmax: float
    ymin: float
    ymax: float
    pixel_width: float
    pixel_height: float
    values: np.ndarray

    def __post_init__(self):
        """Validate geometry and freeze the backing array."""
        if self.xmin >= self.xmax or self.ymin >= self.ymax:
            raise ValueError(
                f"Invalid bounds: need xmin < xmax and ymin < ymax. "
                f"Got x=({self.xmin}, {self.xmax}), y=({self.ymin}, {self.ymax})"
            )
        if self.pixel_width <= 0 or self.pixel_height <= 0:
            raise ValueError(
                f"Pixel size must be positive, got ({self.pixel_width}, {self.pixel_height})"
            )

        values = np.asarray(self.values, dtype=np.float64)
        if values.ndim == 2:
            values = values[np.newaxis, :, :]
        if values.ndim != 3:
            raise ValueError(f"values must be 2-D or 3-D, got shape {values.shape}")

        if values.flags.writeable:
            values = values.copy()
            values.flags.writeable = False
        object.__setattr__(self, "values", values)

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols) of the first band."""
        return self.values.shape[1], self.values.shape[2]

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax)."""
        return self.xmin, self.ymin, self.xmax, self.ymax

    def contains(self, lat: float, lng: float) -> bool:
        """Inclusive bounds test on all four edges."""
        return self.xmin <= lng <= self.xmax and self.ymin <= lat <= self.ymax

    def pixel_index(self, lat: float, lng: float) -> Tuple[int, int]:
        """
        Return (pixel_x, pixel_y) for a coordinate.

        The result may fall one past the backing array for coordinates on
        the eastern or southern edge; callers must bounds-check it.
        """
        pixel_x = int(np.floor((lng - self.xmin) / self.pixel_width))
        pixel_y = int(np.floor((self.ymax - lat) / self.pixel_height))
        return pixel_x, pixel_y

    def sample(self, pixel_x: int, pixel_y: int, band: int = 0):
        """
        Raw sample at a pixel, or None when the index is outside the array.

        Negative indices are treated as outside rather than wrapping.
        """
        bands, rows, cols = self.values.shape
        if not (0 <= band < bands and 0 <= pixel_y < rows and 0 <= pixel_x < cols):
            return None
        return float(self.values[band, pixel_y, pixel_x])

    def nodata_mask(self, band: int = 0) -> np.ndarray:
        """True where the band holds the no-data sentinel (or NaN)."""
        data = self.values[band]
        return (data == NODATA) | np.isnan(data)

    @classmethod
    def from_array(
        cls,
        values: np.ndarray,
        bounds: Tuple[float, float, float, float],
    ) -> "RasterGrid":
        """
        Build a grid from an in-memory array.

        Args:
            values: 2-D (rows, cols) or 3-D (bands, rows, cols) sample array
            bounds: (xmin, ymin, xmax, ymax) in degrees

        Returns:
            RasterGrid with pixel size derived from bounds and array shape
        """
        if not isinstance(bounds, (tuple, list)) or len(bounds) != 4:
            raise ValueError("bounds must be a tuple/list with 4 values (xmin, ymin, xmax, ymax)")

        values = np.asarray(values)
        if values.ndim not in (2, 3):
            raise ValueError(f"values must be 2-D or 3-D, got shape {values.shape}")
        rows, cols = values.shape[-2], values.shape[-1]
        if rows == 0 or cols == 0:
            raise ValueError(f"values must not be empty, got shape {values.shape}")

        xmin, ymin, xmax, ymax = bounds
        return cls(
            xmin=float(xmin),
            xmax=float(xmax),
            ymin=float(ymin),
            ymax=float(ymax),
            pixel_width=(xmax - xmin) / cols,
            pixel_height=(ymax - ymin) / rows,
            values=values,
        )

    @classmethod
    def from_geotiff(cls, path: Union[str, Path]) -> "RasterGrid":
        """
        Load a single-band flood raster from a GeoTIFF.

        The dataset's declared nodata value is mapped onto the 0 sentinel.

        Args:
            path: Path to the GeoTIFF

        Returns:
            RasterGrid

        Raises:
            FileNotFoundError: If the file does not exist
            rasterio.errors.RasterioIOError: If the file cannot be read
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Flood raster not found: {path}")

        logger.info(f"Loading flood raster from {path}")
        with rasterio.open(path) as src:
            data = src.read(1).astype(np.float32)
            nodata = src.nodata
            left, bottom, right, top = src.bounds
            pixel_width, pixel_height = src.res

        if nodata is not None:
            data[data == nodata] = NODATA
        data[np.isnan(data)] = NODATA

        grid = cls(
            xmin=left,
            xmax=right,
            ymin=bottom,
            ymax=top,
            pixel_width=pixel_width,
            pixel_height=pixel_height,
            values=data,
        )

        valid = data[data != NODATA]
        logger.info(f"  Shape: {grid.shape}, bounds: {grid.bounds}")
        if valid.size:
            logger.info(f"  Value range: {valid.min():.3f} to {valid.max():.3f} ({valid.size} valid pixels)")
        else:
            logger.warning(f"  Raster {path.name} holds no valid pixels")
        return grid
