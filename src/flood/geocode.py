"""
Place search via the Nominatim geocoder.

Results are restricted to India to keep suggestions local. Queries shorter
than three characters return no results without touching the network.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from src import config

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
RESULT_LIMIT = 6
# left, top, right, bottom
INDIA_VIEWBOX = "68.1,35.7,97.4,6.5"


class GeocodingError(RuntimeError):
    """Raised when the geocoder request fails."""


@dataclass(frozen=True)
class PlaceResult:
    display_name: str
    lat: float
    lon: float


def search_places(query: str, session: Optional[requests.Session] = None) -> List[PlaceResult]:
    """
    Search for places matching a free-text query.

    Args:
        query: Free-text place name
        session: Optional requests.Session to reuse connections

    Returns:
        Up to six PlaceResult records (empty for short queries)

    Raises:
        GeocodingError: If the request fails or returns a non-2xx status
    """
    q = (query or "").strip()
    if len(q) < MIN_QUERY_LENGTH:
        return []

    params = {
        "format": "json",
        "q": q,
        "limit": RESULT_LIMIT,
        "addressdetails": 1,
        "countrycodes": "in",
        "viewbox": INDIA_VIEWBOX,
        "bounded": 1,
    }
    headers = {
        "Accept": "application/json",
        "Accept-Language": "en-IN,en;q=0.9",
        "User-Agent": config.USER_AGENT,
    }

    http = session or requests
    logger.debug(f"Geocoding '{q}'")
    try:
        response = http.get(
            config.NOMINATIM_URL, params=params, headers=headers, timeout=config.REQUEST_TIMEOUT
        )
    except requests.RequestException as e:
        raise GeocodingError(f"Search failed: {e}") from e

    if not response.ok:
        raise GeocodingError(f"Search failed ({response.status_code})")

    try:
        rows = response.json()
    except ValueError as e:
        raise GeocodingError(f"Search returned invalid JSON: {e}") from e

    results = [
        PlaceResult(display_name=row["display_name"], lat=float(row["lat"]), lon=float(row["lon"]))
        for row in rows
    ]
    logger.info(f"Geocoder returned {len(results)} result(s) for '{q}'")
    return results
