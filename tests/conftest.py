"""Shared fixtures: fake collaborators, temp config, and an ASGI client."""

from __future__ import annotations

import random
from datetime import datetime
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import httpx
import pytest
import pytest_asyncio

from lcars.agents.llm_provider import ChatReply
from lcars.common.config import load_config
from lcars.common.state import build_state, reset_state
from lcars.services.http import ServiceError
from lcars.services.weather import WeatherReport
from lcars.store.memory import Storage

FIXED_NOW = datetime(2024, 3, 15, 9, 30, 0)

CONFIG_YAML = """
default_city: Boston
log_dir: {log_dir}
log_level: DEBUG
message_limit: 200
chat:
  provider: anthropic
  model: claude-3-5-sonnet-20241022
rate_limits:
  chat:
    max_calls: 3
    time_window: 60
  voice:
    max_calls: 5
    time_window: 60
timeouts:
  http: 2
"""


class FakeWeather:
    """Stands in for WeatherService; flip ``fail`` to simulate an outage."""

    def __init__(self, temp: float = 21.4, condition: str = "Clear sky") -> None:
        self.temp = temp
        self.condition = condition
        self.fail = False
        self.calls: list[str] = []

    def current(self, city: str) -> WeatherReport:
        self.calls.append(city)
        if self.fail:
            raise ServiceError(f"City not found: {city}")
        return WeatherReport(
            city=city,
            temp=self.temp,
            feels_like=self.temp - 1,
            condition=self.condition,
            humidity=55,
            wind_speed=12.0,
            wind_direction=180,
        )


class FakeChatBackend:
    """Stands in for ChatBackend. ``response`` None means "not configured"."""

    def __init__(self, response: str | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.sent: list[str] = []

    @property
    def configured(self) -> bool:
        return self.response is not None

    def send(self, message: str) -> ChatReply:
        self.sent.append(message)
        if self.error is not None:
            raise self.error
        if self.response is None:
            return ChatReply("", False)
        return ChatReply(self.response, True)


def make_mock_litellm_response(content: str = "Test response"):
    """Build a mock LiteLLM ModelResponse."""
    msg = MagicMock()
    msg.content = content
    choice = MagicMock()
    choice.message = msg
    resp = MagicMock()
    resp.choices = [choice]
    return resp


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture()
def storage(fixed_clock) -> Storage:
    return Storage(default_city="Boston", clock=fixed_clock)


@pytest.fixture()
def weather() -> FakeWeather:
    return FakeWeather()


@pytest.fixture()
def chat_backend() -> FakeChatBackend:
    return FakeChatBackend()


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    path = config_dir / "config.yaml"
    path.write_text(CONFIG_YAML.format(log_dir=tmp_path / "logs"))
    return path


@pytest.fixture()
def config(config_file: Path, monkeypatch) -> dict[str, Any]:
    for var in ("LCARS_DEFAULT_CITY", "LCARS_LOG_DIR", "LCARS_LOG_LEVEL", "LCARS_CHAT_PROVIDER", "LCARS_CHAT_MODEL"):
        monkeypatch.delenv(var, raising=False)
    return load_config(config_file)


@pytest.fixture()
def console_state(config, weather, chat_backend, rng):
    state = build_state(
        config,
        storage=Storage(default_city=config["default_city"], seed=True),
        weather=weather,
        chat_backend=chat_backend,
        rng=rng,
    )
    reset_state(state)
    yield state
    reset_state()


@pytest_asyncio.fixture()
async def client(console_state, config_file):
    """Async httpx client bound to the FastAPI app with fake collaborators."""
    with patch("lcars.common.state.CONFIG_PATH", config_file):
        from lcars.dashboard.app import app
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
