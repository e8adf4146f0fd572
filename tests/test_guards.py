from __future__ import annotations

import pytest
import requests

from lcars.common.guards import (
    RateLimiter,
    RateLimitExceeded,
    format_rate_limit_status,
    format_time_remaining,
    parse_error,
    sanitize_input,
    validate_message,
)
from lcars.services.http import ServiceError


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestValidateMessage:
    def test_valid_message_is_sanitized(self) -> None:
        result = validate_message("  show me 1 < 2 & tasks  ")
        assert result.valid
        assert result.sanitized == "show me 1 &lt; 2 &amp; tasks"

    @pytest.mark.parametrize(
        ("text", "error"),
        [
            (None, "Invalid input type"),
            (42, "Invalid input type"),
            ("", "Invalid input type"),
            ("   ", "Message cannot be empty"),
            ("<script>alert(1)</script>", "Message contains invalid content"),
            ("javascript:void(0)", "Message contains invalid content"),
            ('img onerror = "x"', "Message contains invalid content"),
        ],
    )
    def test_rejections(self, text, error: str) -> None:
        result = validate_message(text)
        assert not result.valid
        assert result.error == error

    def test_length_limit(self) -> None:
        result = validate_message("x" * 11, max_length=10)
        assert not result.valid
        assert result.error == "Message too long (max 10 characters)"
        assert validate_message("x" * 10, max_length=10).valid

    def test_sanitize_keeps_quotes(self) -> None:
        assert sanitize_input("it's \"fine\"") == "it's \"fine\""


class TestRateLimiter:
    def test_window_budget(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(2, 60, clock=clock)
        assert limiter.can_make_call()
        assert limiter.can_make_call()
        assert not limiter.can_make_call()
        assert limiter.remaining_calls() == 0

    def test_slot_frees_after_window(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter(1, 60, clock=clock)
        limiter.acquire()
        clock.now += 45
        assert limiter.time_until_next_call() == pytest.approx(15)
        clock.now += 15
        assert limiter.can_make_call()

    def test_acquire_raises_with_retry_after(self) -> None:
        clock = FakeClock()
        limiter = RateLimiter.from_preset({"max_calls": 1, "time_window": 30}, clock=clock)
        limiter.acquire()
        with pytest.raises(RateLimitExceeded) as exc_info:
            limiter.acquire()
        assert exc_info.value.retry_after == pytest.approx(30)
        assert exc_info.value.status == "Rate limit reached. Try again in 30 seconds"

    def test_reset(self) -> None:
        limiter = RateLimiter(1, 60, clock=FakeClock())
        limiter.acquire()
        limiter.reset()
        assert limiter.remaining_calls() == 1

    def test_status_text_when_available(self) -> None:
        limiter = RateLimiter(5, 60, clock=FakeClock())
        limiter.acquire()
        assert format_rate_limit_status(limiter) == "4/5 requests available"


class TestFormatTimeRemaining:
    @pytest.mark.parametrize(
        ("seconds", "text"),
        [(0, "now"), (1, "1 second"), (12.2, "13 seconds"), (60, "1 minute"), (61, "2 minutes")],
    )
    def test_formats(self, seconds: float, text: str) -> None:
        assert format_time_remaining(seconds) == text


class TestParseError:
    def test_timeout(self) -> None:
        info = parse_error(requests.Timeout("read timed out"))
        assert info.type == "timeout"
        assert info.retryable

    def test_service_timeout_text(self) -> None:
        assert parse_error(ServiceError("Request timeout - please try again")).type == "timeout"

    def test_network(self) -> None:
        assert parse_error(requests.ConnectionError("refused")).type == "network"
        assert parse_error(ServiceError("Network error: refused")).type == "network"

    def test_server(self) -> None:
        info = parse_error(ServiceError("HTTP 503: Service Unavailable"))
        assert info.type == "server"
        assert info.user_message == "Server error. Please try again later."

    def test_rate_limit(self) -> None:
        info = parse_error(RateLimitExceeded(5.0, "Rate limit reached. Try again in 5 seconds"))
        assert info.type == "rate_limit"
        assert info.user_message == "Rate limit reached. Try again in 5 seconds"

    def test_validation(self) -> None:
        info = parse_error(ValueError("title is required"))
        assert info.type == "validation"
        assert not info.retryable

    def test_unknown(self) -> None:
        info = parse_error(RuntimeError("boom"))
        assert info.type == "unknown"
        assert not info.retryable
        assert parse_error(None).user_message == "An unexpected error occurred"

    def test_to_dict(self) -> None:
        assert parse_error(ValueError("bad")).to_dict() == {
            "error": "bad",
            "type": "validation",
            "retryable": False,
        }
