"""Current conditions and 7-day forecast from Open-Meteo (no API key)."""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from lcars.services.http import DEFAULT_TIMEOUT, ServiceError, fetch_json

logger = logging.getLogger("lcars.services.weather")

_GEOCODE_URL = "https://geocoding-api.open-meteo.com/v1/search"
_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass
class ForecastDay:
    day: str
    date: str
    condition: str
    max_temp: float
    min_temp: float


@dataclass
class WeatherReport:
    city: str
    temp: float
    feels_like: float
    condition: str
    humidity: float
    wind_speed: float
    wind_direction: float
    visibility: int = 10000
    forecast: list[ForecastDay] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def display_temp(value: float) -> int:
    """Round half up for display; 22.5 shows as 23."""
    return math.floor(value + 0.5)


def condition_for(code: int | None) -> str:
    """Map a WMO weather code to a short condition label."""
    if code is None:
        return "Unknown"
    if code == 0:
        return "Clear sky"
    if code <= 3:
        return "Partly cloudy"
    if code <= 48:
        return "Foggy"
    if code <= 67:
        return "Rainy"
    if code <= 77:
        return "Snowy"
    if code <= 82:
        return "Rain showers"
    if code <= 86:
        return "Snow showers"
    if code <= 99:
        return "Thunderstorm"
    return "Unknown"


def _num(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _forecast(daily: dict[str, Any]) -> list[ForecastDay]:
    days: list[ForecastDay] = []
    times = daily.get("time") or []
    codes = daily.get("weather_code") or []
    highs = daily.get("temperature_2m_max") or []
    lows = daily.get("temperature_2m_min") or []
    for i, iso in enumerate(times[:7]):
        try:
            label = _DAYS[date.fromisoformat(iso).weekday()]
        except ValueError:
            label = ""
        days.append(ForecastDay(
            day=label,
            date=iso,
            condition=condition_for(codes[i] if i < len(codes) else None),
            max_temp=_num(highs[i] if i < len(highs) else None),
            min_temp=_num(lows[i] if i < len(lows) else None),
        ))
    return days


class WeatherService:
    """Geocode a city name, then fetch current conditions and the daily forecast."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def geocode(self, city: str) -> dict[str, Any]:
        data = fetch_json(
            _GEOCODE_URL,
            {"name": city, "count": 1, "language": "en", "format": "json"},
            timeout=self.timeout,
        )
        results = (data or {}).get("results") or []
        if not results:
            raise ServiceError(f"City not found: {city}")
        return results[0]

    def current(self, city: str) -> WeatherReport:
        place = self.geocode(city)
        data = fetch_json(_FORECAST_URL, {
            "latitude": place["latitude"],
            "longitude": place["longitude"],
            "current": "temperature_2m,relative_humidity_2m,apparent_temperature,"
                       "weather_code,wind_speed_10m,wind_direction_10m",
            "daily": "weather_code,temperature_2m_max,temperature_2m_min",
            "timezone": "auto",
            "forecast_days": 7,
        }, timeout=self.timeout)

        current = (data or {}).get("current") or {}
        if "temperature_2m" not in current:
            raise ServiceError(f"No current conditions for {city}")

        report = WeatherReport(
            city=place.get("name") or city,
            temp=_num(current.get("temperature_2m")),
            feels_like=_num(current.get("apparent_temperature")),
            condition=condition_for(current.get("weather_code")),
            humidity=_num(current.get("relative_humidity_2m")),
            wind_speed=_num(current.get("wind_speed_10m")),
            wind_direction=_num(current.get("wind_direction_10m")),
            forecast=_forecast(data.get("daily") or {}),
        )
        logger.info("Weather for %s: %.1f°C %s", report.city, report.temp, report.condition)
        return report
