"""Input validation, rate limiting, and error classification helpers.

Everything user-typed or spoken passes through ``validate_message`` before it
reaches the classifier, and every outbound chat/voice call is gated by a
``RateLimiter`` built from the ``rate_limits`` presets in config.yaml.
"""

from __future__ import annotations

import html
import logging
import math
import re
import time
from dataclasses import dataclass
from typing import Any, Callable

import requests

logger = logging.getLogger("lcars.guards")

MESSAGE_LIMITS = {
    "short": 100,
    "medium": 500,
    "long": 1000,
    "very_long": 5000,
}

_SUSPICIOUS_PATTERNS = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
]


# ------------------------------------------------------------------
# Input validation
# ------------------------------------------------------------------

@dataclass
class ValidationResult:
    valid: bool
    error: str | None = None
    sanitized: str | None = None


def sanitize_input(text: str) -> str:
    """HTML-escape text so it can be echoed back safely."""
    if not text:
        return ""
    return html.escape(text, quote=False)


def validate_message(text: Any, max_length: int = MESSAGE_LIMITS["long"]) -> ValidationResult:
    """Check a message for type, emptiness, length and script injection."""
    if not text or not isinstance(text, str):
        return ValidationResult(False, "Invalid input type")

    trimmed = text.strip()
    if not trimmed:
        return ValidationResult(False, "Message cannot be empty")

    if len(trimmed) > max_length:
        return ValidationResult(False, f"Message too long (max {max_length} characters)")

    for pattern in _SUSPICIOUS_PATTERNS:
        if pattern.search(trimmed):
            logger.warning("Rejected message matching %s", pattern.pattern)
            return ValidationResult(False, "Message contains invalid content")

    return ValidationResult(True, sanitized=sanitize_input(trimmed))


# ------------------------------------------------------------------
# Rate limiting
# ------------------------------------------------------------------

class RateLimitExceeded(Exception):
    """Raised when a caller exhausts its sliding-window budget."""

    def __init__(self, retry_after: float, status: str) -> None:
        super().__init__(status)
        self.retry_after = retry_after
        self.status = status


class RateLimiter:
    """Sliding-window limiter: at most ``max_calls`` per ``time_window`` seconds."""

    def __init__(
        self,
        max_calls: int = 10,
        time_window: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_calls = max_calls
        self.time_window = time_window
        self._clock = clock
        self._calls: list[float] = []

    @classmethod
    def from_preset(cls, preset: dict[str, Any], clock: Callable[[], float] = time.monotonic) -> "RateLimiter":
        return cls(int(preset["max_calls"]), float(preset["time_window"]), clock=clock)

    def _prune(self) -> float:
        now = self._clock()
        self._calls = [t for t in self._calls if now - t < self.time_window]
        return now

    def can_make_call(self) -> bool:
        """Consume a slot if one is free."""
        now = self._prune()
        if len(self._calls) < self.max_calls:
            self._calls.append(now)
            return True
        return False

    def acquire(self) -> None:
        """Consume a slot or raise ``RateLimitExceeded``."""
        if not self.can_make_call():
            raise RateLimitExceeded(self.time_until_next_call(), format_rate_limit_status(self))

    def remaining_calls(self) -> int:
        self._prune()
        return max(0, self.max_calls - len(self._calls))

    def time_until_next_call(self) -> float:
        """Seconds until the oldest call in the window expires (0 if a slot is free)."""
        now = self._prune()
        if len(self._calls) < self.max_calls:
            return 0.0
        oldest = min(self._calls)
        return max(0.0, oldest + self.time_window - now)

    def reset(self) -> None:
        self._calls = []

    def status(self) -> dict[str, Any]:
        self._prune()
        return {
            "used": len(self._calls),
            "remaining": self.remaining_calls(),
            "max_calls": self.max_calls,
            "time_window": self.time_window,
            "next_available": self.time_until_next_call(),
        }


# ------------------------------------------------------------------
# Error classification
# ------------------------------------------------------------------

@dataclass
class ErrorInfo:
    message: str
    type: str
    user_message: str
    retryable: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.user_message,
            "type": self.type,
            "retryable": self.retryable,
        }


def parse_error(error: BaseException | None) -> ErrorInfo:
    """Map an exception onto a user-facing category."""
    if error is None:
        return ErrorInfo("Unknown error", "unknown", "An unexpected error occurred", False)

    message = str(error)
    lowered = message.lower()

    if isinstance(error, RateLimitExceeded):
        return ErrorInfo(message, "rate_limit", message, True)

    if isinstance(error, requests.Timeout) or "timeout" in lowered:
        return ErrorInfo(message, "timeout", "Request timed out. Please try again.", True)

    if isinstance(error, requests.ConnectionError) or "fetch" in lowered or "network" in lowered:
        return ErrorInfo(message, "network", "Network error. Please check your connection.", True)

    if isinstance(error, requests.HTTPError) or "HTTP" in message:
        return ErrorInfo(message, "server", "Server error. Please try again later.", True)

    if isinstance(error, ValueError):
        return ErrorInfo(message, "validation", message, False)

    return ErrorInfo(message, "unknown", message or "An unexpected error occurred", False)


# ------------------------------------------------------------------
# Formatting
# ------------------------------------------------------------------

def format_time_remaining(seconds: float) -> str:
    if seconds <= 0:
        return "now"
    secs = math.ceil(seconds)
    if secs < 60:
        return f"{secs} second{'s' if secs != 1 else ''}"
    minutes = math.ceil(secs / 60)
    return f"{minutes} minute{'s' if minutes != 1 else ''}"


def format_rate_limit_status(limiter: RateLimiter) -> str:
    status = limiter.status()
    if status["remaining"] > 0:
        return f"{status['remaining']}/{status['max_calls']} requests available"
    return f"Rate limit reached. Try again in {format_time_remaining(status['next_available'])}"
