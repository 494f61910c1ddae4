"""
Rainfall feed from the Open-Meteo forecast API.

Provides:
- RainSignal: today's rainfall reduced to a normalized rain factor
  (rain_factor = min(peak_mm_per_hr / cap, 1)) plus 24h total and peak
- DayRain: per-day totals for the rain calendar and dashboard

Usage::

    from src.flood.rain import fetch_rain_signal, fetch_daily_forecast

    signal = fetch_rain_signal()            # never raises; degrades to no rain
    days = fetch_daily_forecast(forecast_days=16)
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Tuple

import requests

from src import config

logger = logging.getLogger(__name__)


class RainfallFetchError(RuntimeError):
    """Raised when the rainfall feed cannot be fetched or parsed."""


@dataclass(frozen=True)
class RainSignal:
    """
    Rainfall reading for the current map session.

    Attributes:
        rain_factor: Normalized rainfall factor in [0, 1]
        rain_24h_mm: Sum of today's hourly rain (mm)
        rain_peak_mm: Wettest hour today (mm/hr)
        available: False when the feed could not be loaded
    """

    rain_factor: float = 0.0
    rain_24h_mm: float = 0.0
    rain_peak_mm: float = 0.0
    available: bool = True

    @classmethod
    def from_hourly(cls, hourly_mm: Iterable[Optional[float]], cap_mm: float = None) -> "RainSignal":
        """
        Reduce an array of hourly rain values to a RainSignal.

        Missing (None) hours count as 0. An empty array yields zero rain.
        """
        cap = config.RAIN_CAP_MM if cap_mm is None else cap_mm
        if cap <= 0:
            raise ValueError(f"Rain cap must be positive, got {cap}")

        values = [float(v) if v is not None else 0.0 for v in hourly_mm]
        total = sum(values)
        peak = max(values) if values else 0.0
        factor = max(0.0, min(peak / cap, 1.0))
        return cls(rain_factor=factor, rain_24h_mm=total, rain_peak_mm=peak)

    @classmethod
    def unavailable(cls) -> "RainSignal":
        """Signal used when the feed failed: factor 0, susceptibility baseline."""
        return cls(available=False)

    @property
    def rain_percent(self) -> int:
        """Rain factor as a whole percentage for display."""
        return int(math.floor(self.rain_factor * 100 + 0.5))


@dataclass(frozen=True)
class DayRain:
    """Rainfall totals for one calendar day."""

    date: date
    total_mm: float
    peak_mm: float


def rain_level(total_mm: float) -> str:
    """
    Daily rain level for the calendar view.

    Returns:
        "Low" below 2.5 mm, "Moderate" below 15 mm, otherwise "Heavy"
    """
    if total_mm < config.MODERATE_RAIN_MM:
        return "Low"
    if total_mm < config.HEAVY_RAIN_MM:
        return "Moderate"
    return "Heavy"


def fetch_hourly_rain(
    lat: float,
    lon: float,
    forecast_days: int = 1,
    session: Optional[requests.Session] = None,
    timezone: Optional[str] = None,
) -> Tuple[List[str], List[Optional[float]]]:
    """
    Fetch hourly rain (mm) from Open-Meteo.

    Args:
        lat: Latitude of the forecast point
        lon: Longitude of the forecast point
        forecast_days: Number of forecast days (1-16)
        session: Optional requests.Session to reuse connections
        timezone: Optional Open-Meteo timezone parameter (e.g. "auto")

    Returns:
        (times, rain_mm) lists of equal length

    Raises:
        ValueError: If forecast_days is out of range
        RainfallFetchError: If the request fails or the payload is malformed
    """
    if not 1 <= forecast_days <= 16:
        raise ValueError(f"forecast_days must be between 1 and 16, got {forecast_days}")

    params = {
        "latitude": lat,
        "longitude": lon,
        "hourly": "rain",
        "forecast_days": forecast_days,
    }
    if timezone:
        params["timezone"] = timezone

    http = session or requests
    logger.info(f"Fetching hourly rain for ({lat}, {lon}), {forecast_days} day(s)")
    try:
        response = http.get(config.OPEN_METEO_URL, params=params, timeout=config.REQUEST_TIMEOUT)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        raise RainfallFetchError(f"Open-Meteo request failed: {e}") from e

    if not isinstance(payload, dict):
        raise RainfallFetchError(
            f"Open-Meteo response is not a JSON object (got {type(payload).__name__})"
        )
    hourly = payload.get("hourly") or {}
    if not isinstance(hourly, dict):
        raise RainfallFetchError("Open-Meteo hourly block is not a JSON object")
    rain = hourly.get("rain")
    times = hourly.get("time") or []
    if rain is None:
        raise RainfallFetchError("Open-Meteo response has no hourly rain series")
    if not isinstance(rain, list):
        raise RainfallFetchError(f"Open-Meteo hourly rain is not a list (got {type(rain).__name__})")

    try:
        rain = [float(v) if v is not None else None for v in rain]
    except (TypeError, ValueError) as e:
        raise RainfallFetchError(f"Open-Meteo hourly rain holds a non-numeric value: {e}") from e
    if any(v is not None and not math.isfinite(v) for v in rain):
        raise RainfallFetchError("Open-Meteo hourly rain holds a non-finite value")

    logger.debug(f"Received {len(rain)} hourly rain values")
    return list(times), rain


def fetch_rain_signal(
    lat: float = None,
    lon: float = None,
    session: Optional[requests.Session] = None,
    cap_mm: float = None,
) -> RainSignal:
    """
    Fetch today's rainfall and reduce it to a RainSignal.

    Never raises for network or payload problems: a failed load degrades to
    RainSignal.unavailable() (rain factor 0).
    """
    if lat is None or lon is None:
        lat, lon = config.DEFAULT_CENTER

    try:
        _, rain = fetch_hourly_rain(lat, lon, forecast_days=1, session=session)
    except RainfallFetchError as e:
        logger.warning(f"Rainfall feed unavailable, using susceptibility baseline: {e}")
        return RainSignal.unavailable()

    signal = RainSignal.from_hourly(rain, cap_mm=cap_mm)
    logger.info(
        f"Rain: factor={signal.rain_factor:.2f}, 24h={signal.rain_24h_mm:.1f} mm, "
        f"peak={signal.rain_peak_mm:.1f} mm/hr"
    )
    return signal


def group_hourly_by_day(
    times: Sequence[str], rain_mm: Sequence[Optional[float]]
) -> List[DayRain]:
    """
    Group hourly rain values by calendar day.

    Args:
        times: ISO-8601 local timestamps (e.g. "2026-10-17T13:00")
        rain_mm: Hourly rain values aligned with times; None counts as 0

    Returns:
        DayRain per day, sorted by date
    """
    if len(times) != len(rain_mm):
        raise ValueError(
            f"times and rain_mm must have equal length, got {len(times)} and {len(rain_mm)}"
        )

    by_day: dict[date, List[float]] = {}
    for stamp, value in zip(times, rain_mm):
        day = datetime.fromisoformat(stamp).date()
        by_day.setdefault(day, []).append(float(value) if value is not None else 0.0)

    return [
        DayRain(date=day, total_mm=sum(hours), peak_mm=max(hours))
        for day, hours in sorted(by_day.items())
    ]


def fetch_daily_forecast(
    lat: float = None,
    lon: float = None,
    forecast_days: int = 16,
    session: Optional[requests.Session] = None,
) -> List[DayRain]:
    """
    Fetch the multi-day rain forecast grouped into DayRain records.

    Raises:
        RainfallFetchError: If the feed fails; the calendar has nothing to
            show without it
    """
    if lat is None or lon is None:
        lat, lon = config.FORECAST_LOCATION

    times, rain = fetch_hourly_rain(
        lat, lon, forecast_days=forecast_days, session=session, timezone="auto"
    )
    days = group_hourly_by_day(times, rain)
    logger.info(f"Grouped forecast into {len(days)} day(s)")
    return days
