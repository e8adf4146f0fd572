"""Route distance and travel time via TomTom (requires TOMTOM_API_KEY)."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any
from urllib.parse import quote

from lcars.services.http import DEFAULT_TIMEOUT, ServiceError, api_key, fetch_json

logger = logging.getLogger("lcars.services.maps")

_GEOCODE_URL = "https://api.tomtom.com/search/2/geocode/{query}.json"
_ROUTE_URL = "https://api.tomtom.com/routing/1/calculateRoute/{points}/json"

# dashboard mode name -> TomTom travelMode
_TRAVEL_MODES = {
    "driving": "car",
    "walking": "pedestrian",
    "transit": "bus",
}


@dataclass
class RouteResult:
    distance: str = ""
    duration: str = ""
    api_available: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def format_distance(meters: float) -> str:
    km = meters / 1000
    miles = km * 0.621371
    return f"{km:.1f} km ({miles:.1f} mi)"


def format_duration(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _geocode(address: str, key: str, timeout: float) -> dict[str, float]:
    data = fetch_json(_GEOCODE_URL.format(query=quote(address)), {"key": key}, timeout=timeout)
    results = (data or {}).get("results") or []
    if not results:
        raise ServiceError(f"Could not geocode: {address}")
    return results[0]["position"]


def calculate_route(
    origin: str,
    destination: str,
    mode: str = "driving",
    timeout: float = DEFAULT_TIMEOUT,
) -> RouteResult:
    """Return formatted distance/duration, or ``api_available=False`` when unconfigured."""
    key = api_key("TOMTOM_API_KEY")
    if not key:
        return RouteResult(api_available=False)

    start = _geocode(origin, key, timeout)
    end = _geocode(destination, key, timeout)
    points = f"{start['lat']},{start['lon']}:{end['lat']},{end['lon']}"

    data = fetch_json(
        _ROUTE_URL.format(points=points),
        {"key": key, "travelMode": _TRAVEL_MODES.get(mode, "car")},
        timeout=timeout,
    )
    routes = (data or {}).get("routes") or []
    if not routes:
        raise ServiceError("No route found")

    summary = routes[0]["summary"]
    result = RouteResult(
        distance=format_distance(summary["lengthInMeters"]),
        duration=format_duration(summary["travelTimeInSeconds"]),
    )
    logger.info("Route %s -> %s (%s): %s, %s", origin, destination, mode, result.distance, result.duration)
    return result
