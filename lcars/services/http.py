"""Bounded-wait JSON fetch shared by every third-party service client."""

from __future__ import annotations

import logging
import os
from typing import Any

import requests

logger = logging.getLogger("lcars.services.http")

DEFAULT_TIMEOUT = 10


class ServiceError(Exception):
    """A third-party API could not produce usable data."""


def api_key(env_var: str) -> str | None:
    """Read an API key from the environment, ignoring ``your_..._here`` placeholders."""
    value = os.environ.get(env_var, "").strip()
    if not value or (value.startswith("your_") and value.endswith("_here")):
        return None
    return value


def fetch_json(
    url: str,
    params: dict[str, Any] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """GET ``url`` and decode JSON, converting every failure into ``ServiceError``."""
    try:
        resp = requests.get(url, params=params, timeout=timeout)
    except requests.Timeout:
        raise ServiceError("Request timeout - please try again") from None
    except requests.RequestException as exc:
        raise ServiceError(f"Network error: {exc}") from exc

    if not resp.ok:
        raise ServiceError(f"HTTP {resp.status_code}: {resp.reason}")

    try:
        return resp.json()
    except ValueError:
        raise ServiceError("Invalid JSON response from server") from None
