"""
Map view context for the flood risk map.

FloodMapView owns the state one map session needs:

- the flood raster (None until loaded)
- the current RainSignal (no rain until loaded)
- the selected HeatmapMode
- the painted overlay for that combination

Raster and rain are each loaded exactly once, either inline or on a
concurrent.futures executor. State is replaced, never mutated in place, so
readers see either the old or the new complete value. After close(), late
load results are discarded without touching state.

Usage::

    from src.flood.map_view import FloodMapView
    from src.flood.raster import RasterGrid
    from src.flood.rain import fetch_rain_signal

    with FloodMapView(mode="realtime") as view:
        view.load(lambda: RasterGrid.from_geotiff(path), fetch_rain_signal)
        info = view.click(17.41, 78.47)
        view.set_mode("susceptibility")
        rgba = view.overlay()
"""

import logging
import threading
from concurrent.futures import Executor, Future
from typing import Callable, List, Optional, Union

import numpy as np

from src.flood.rain import RainSignal
from src.flood.raster import RasterGrid
from src.flood.sampler import ClickedFloodInfo, render_overlay, resolve_click
from src.flood.scoring import HeatmapMode

logger = logging.getLogger(__name__)

RasterLoader = Callable[[], RasterGrid]
RainLoader = Callable[[], RainSignal]


class FloodMapView:
    """
    Owning context for one flood map session.

    Attributes:
        opacity: Overlay alpha for data pixels (None uses the config default)
        rain_floor: Optional override of the realtime rain floor
    """

    def __init__(
        self,
        mode: Union[HeatmapMode, str] = HeatmapMode.REALTIME,
        opacity: Optional[float] = None,
        rain_floor: Optional[float] = None,
    ):
        self.opacity = opacity
        self.rain_floor = rain_floor

        self._mode = HeatmapMode.coerce(mode)
        self._grid: Optional[RasterGrid] = None
        self._rain = RainSignal()
        self._overlay: Optional[np.ndarray] = None
        self._overlay_generation = 0

        self._lock = threading.RLock()
        self._load_started = False
        self._closed = False
        self._futures: List[Future] = []

    # ------------------------------------------------------------------
    # State (read-only views)
    # ------------------------------------------------------------------

    @property
    def mode(self) -> HeatmapMode:
        return self._mode

    @property
    def grid(self) -> Optional[RasterGrid]:
        return self._grid

    @property
    def rain(self) -> RainSignal:
        return self._rain

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_ready(self) -> bool:
        """True once the raster is available and the view is open."""
        return self._grid is not None and not self._closed

    @property
    def overlay_generation(self) -> int:
        """Incremented on every full repaint."""
        return self._overlay_generation

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(
        self,
        raster_loader: RasterLoader,
        rain_loader: RainLoader,
        executor: Optional[Executor] = None,
    ) -> List[Future]:
        """
        Start the one-shot raster and rain loads.

        Without an executor both loaders run inline before this returns.
        With an executor they run as futures and results are applied as
        they complete.

        Args:
            raster_loader: Callable returning a RasterGrid
            rain_loader: Callable returning a RainSignal
            executor: Optional concurrent.futures executor

        Returns:
            The submitted futures (empty list for inline loading)

        Raises:
            RuntimeError: If load() was already called or the view is closed
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Cannot load a closed FloodMapView")
            if self._load_started:
                raise RuntimeError("FloodMapView.load() may only be called once")
            self._load_started = True

        if executor is None:
            self._finish_raster(_run_inline(raster_loader))
            self._finish_rain(_run_inline(rain_loader))
            return []

        raster_future = executor.submit(raster_loader)
        rain_future = executor.submit(rain_loader)
        with self._lock:
            self._futures = [raster_future, rain_future]
        raster_future.add_done_callback(self._finish_raster)
        rain_future.add_done_callback(self._finish_rain)
        return [raster_future, rain_future]

    def _finish_raster(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Flood raster failed to load; map overlay unavailable: {error}")
            return
        self.set_grid(future.result())

    def _finish_rain(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Rain feed failed to load; using susceptibility baseline: {error}")
            self.set_rain(RainSignal.unavailable())
            return
        self.set_rain(future.result())

    def set_grid(self, grid: RasterGrid) -> bool:
        """
        Replace the raster grid and invalidate the overlay.

        Returns:
            False if the view is closed and the grid was discarded
        """
        with self._lock:
            if self._closed:
                logger.debug("Discarding raster that arrived after teardown")
                return False
            self._grid = grid
            self._invalidate()
        logger.info(f"Flood raster ready: {grid.shape[0]}x{grid.shape[1]} pixels")
        return True

    def set_rain(self, signal: RainSignal) -> bool:
        """
        Replace the rain signal and invalidate the overlay.

        Returns:
            False if the view is closed and the signal was discarded
        """
        with self._lock:
            if self._closed:
                logger.debug("Discarding rain signal that arrived after teardown")
                return False
            self._rain = signal
            self._invalidate()
        return True

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def set_mode(self, mode: Union[HeatmapMode, str]) -> None:
        """
        Switch heatmap mode and fully repaint the overlay before returning.
        """
        mode = HeatmapMode.coerce(mode)
        with self._lock:
            if self._closed:
                return
            if mode is self._mode and self._overlay is not None:
                return
            logger.info(f"Heatmap mode: {self._mode.value} -> {mode.value}")
            self._mode = mode
            self._invalidate()
            self._overlay = self._repaint()

    def click(self, lat: float, lng: float) -> Optional[ClickedFloodInfo]:
        """
        Resolve a map click using the rain signal current at click time.

        Returns None when the view is closed, the raster is not loaded, or
        there is no data at the location.
        """
        with self._lock:
            if self._closed:
                return None
            grid, rain, mode = self._grid, self._rain, self._mode
        return resolve_click(lat, lng, grid, rain.rain_factor, mode, rain_floor=self.rain_floor)

    def overlay(self) -> Optional[np.ndarray]:
        """
        RGBA overlay for the current raster, rain and mode.

        Painted lazily after any invalidation; None until the raster loads.
        """
        with self._lock:
            if self._closed or self._grid is None:
                return None
            if self._overlay is None:
                self._overlay = self._repaint()
            return self._overlay

    def _invalidate(self) -> None:
        self._overlay = None

    def _repaint(self) -> Optional[np.ndarray]:
        if self._grid is None:
            return None
        rgba = render_overlay(
            self._grid,
            self._rain.rain_factor,
            self._mode,
            opacity=self.opacity,
            rain_floor=self.rain_floor,
        )
        rgba.flags.writeable = False
        self._overlay_generation += 1
        return rgba

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """
        Tear the view down. In-flight loads are cancelled where possible
        and their results discarded when they arrive.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            futures, self._futures = self._futures, []
            self._grid = None
            self._overlay = None
        for future in futures:
            future.cancel()
        logger.debug("FloodMapView closed")

    def __enter__(self) -> "FloodMapView":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _run_inline(loader: Callable) -> Future:
    """Run a loader now and wrap its outcome in a completed Future."""
    future: Future = Future()
    try:
        future.set_result(loader())
    except Exception as e:
        future.set_exception(e)
    return future
