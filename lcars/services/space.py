"""NASA Astronomy Picture of the Day and live ISS position."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from lcars.services.http import DEFAULT_TIMEOUT, ServiceError, api_key, fetch_json

logger = logging.getLogger("lcars.services.space")

_APOD_URL = "https://api.nasa.gov/planetary/apod"
_ISS_URL = "http://api.open-notify.org/iss-now.json"

# ISS orbits at roughly 408 km; open-notify does not report altitude.
ISS_ALTITUDE_KM = 408


@dataclass
class ApodResult:
    title: str
    date: str
    explanation: str
    url: str
    hdurl: str | None = None
    media_type: str = "image"
    copyright: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class IssPosition:
    latitude: float
    longitude: float
    timestamp: int
    altitude: int = ISS_ALTITUDE_KM

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_apod(timeout: float = DEFAULT_TIMEOUT) -> ApodResult:
    """Fetch today's APOD. Uses NASA_API_KEY, or the rate-limited DEMO_KEY."""
    data = fetch_json(_APOD_URL, {"api_key": api_key("NASA_API_KEY") or "DEMO_KEY"}, timeout=timeout)
    if not isinstance(data, dict) or not data.get("url"):
        raise ServiceError("NASA APOD response missing image url")
    return ApodResult(
        title=data.get("title", ""),
        date=data.get("date", ""),
        explanation=data.get("explanation", ""),
        url=data["url"],
        hdurl=data.get("hdurl"),
        media_type=data.get("media_type", "image"),
        copyright=(data.get("copyright") or "").strip() or None,
    )


def get_iss_position(timeout: float = DEFAULT_TIMEOUT) -> IssPosition:
    data = fetch_json(_ISS_URL, timeout=timeout)
    pos = (data or {}).get("iss_position") or {}
    try:
        return IssPosition(
            latitude=float(pos["latitude"]),
            longitude=float(pos["longitude"]),
            timestamp=int(data.get("timestamp", 0)),
        )
    except (KeyError, TypeError, ValueError):
        logger.warning("Malformed ISS payload: %s", data)
        raise ServiceError("ISS position unavailable") from None
