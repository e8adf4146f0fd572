"""Response composer: canned replies, data fragments and degraded collaborators."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from lcars.nlp.composer import CommandStash, ResponseComposer, stardate
from lcars.nlp.intent import classify
from lcars.nlp.phrases import (
    ABOUT_REPLY,
    API_REPLY,
    DEFAULT_REPLY_TEMPLATE,
    GREETING_REPLY,
    JOKES,
    STATUS_REPORT,
    SWALLOW_REPORT,
    TASK_USAGE_REPLY,
    THANKS_REPLY,
)
from tests.conftest import FIXED_NOW, FakeChatBackend


@pytest.fixture()
def composer(storage, weather, rng, fixed_clock) -> ResponseComposer:
    return ResponseComposer(storage, weather, None, rng=rng, clock=fixed_clock, default_city="Boston")


def _task(title: str) -> dict:
    return {"title": title, "due_date": "2024-04-01"}


class TestStardate:
    def test_epoch_is_cycle_start(self) -> None:
        assert stardate(datetime(1970, 1, 1, tzinfo=timezone.utc)) == "41000.00"

    def test_cycle_wraps_every_365_days(self) -> None:
        assert stardate(datetime(1971, 1, 1, tzinfo=timezone.utc)) == "41000.00"

    def test_half_cycle(self) -> None:
        assert stardate(datetime(1970, 7, 2, 12, tzinfo=timezone.utc)) == "41500.00"


class TestCommandStash:
    def test_consumed_exactly_once(self) -> None:
        stash = CommandStash()
        stash.stage("picard")
        assert stash.pending == "picard"
        assert stash.consume() == "picard"
        assert stash.consume() is None


@pytest.mark.asyncio
class TestCompose:
    async def test_greeting(self, composer) -> None:
        assert await composer.compose(classify("hello")) == GREETING_REPLY

    async def test_thanks(self, composer) -> None:
        assert await composer.compose(classify("thanks a lot")) == THANKS_REPLY

    async def test_task_usage(self, composer, storage) -> None:
        assert await composer.compose(classify("add task")) == TASK_USAGE_REPLY
        assert storage.get_tasks() == []

    async def test_create_task(self, composer, storage) -> None:
        reply = await composer.compose(classify("add task Calibrate sensors"))
        assert reply == "✅ Task created: Calibrate sensors"

        [task] = storage.get_tasks()
        assert task["title"] == "Calibrate sensors"
        assert task["priority"] == "medium"
        assert task["status"] == "active"
        assert task["due_date"] == (FIXED_NOW + timedelta(days=7)).isoformat()

    async def test_create_task_failure_degrades(self, weather, rng, fixed_clock) -> None:
        broken = MagicMock()
        broken.create_task.side_effect = RuntimeError("disk on fire")
        composer = ResponseComposer(broken, weather, rng=rng, clock=fixed_clock)

        reply = await composer.compose(classify("add task Polish hull"))
        assert reply == "📋 TASKS: Unable to create task 'Polish hull'"

    async def test_captain_stages_terminal_command(self, composer) -> None:
        reply = await composer.compose(classify("give me a spock quote"))
        assert reply == "🖖 Opening terminal for a Spock quote."
        assert composer.stash.consume() == "spock"
        assert composer.stash.consume() is None

    async def test_multi_view(self, composer) -> None:
        reply = await composer.compose(classify("show weather, analytics and tasks"))
        assert reply == "🖥️ Displaying 3 panels: Task Manager, Weather, Analytics"

    async def test_navigate(self, composer) -> None:
        assert await composer.compose(classify("open weather")) == "Navigating to Weather."
        assert await composer.compose(classify("go home")) == "Navigating to Console."

    async def test_chat_uses_backend_reply(self, storage, weather, rng, fixed_clock) -> None:
        backend = FakeChatBackend("Aye, Captain.")
        composer = ResponseComposer(storage, weather, backend, rng=rng, clock=fixed_clock)

        assert await composer.compose(classify("tell me something")) == "Aye, Captain."
        assert backend.sent == ["tell me something"]

    async def test_chat_falls_back_when_not_configured(self, storage, weather, rng, fixed_clock) -> None:
        composer = ResponseComposer(storage, weather, FakeChatBackend(), rng=rng, clock=fixed_clock)
        assert await composer.compose(classify("do you use claude")) == API_REPLY

    async def test_chat_falls_back_on_backend_error(self, storage, weather, rng, fixed_clock) -> None:
        backend = FakeChatBackend("unused", error=RuntimeError("HTTP 503: Service Unavailable"))
        composer = ResponseComposer(storage, weather, backend, rng=rng, clock=fixed_clock)
        assert await composer.compose(classify("xyzzy")) == DEFAULT_REPLY_TEMPLATE.format(text="xyzzy")


@pytest.mark.asyncio
class TestLocalReply:
    async def test_greeting_and_thanks_short_circuit(self, composer) -> None:
        assert await composer.local_reply("hey there, what time is it") == GREETING_REPLY
        assert await composer.local_reply("many thanks, what time is it") == THANKS_REPLY

    async def test_time_fragment(self, composer) -> None:
        reply = await composer.local_reply("what time is it")
        assert reply == f"⏰ TIME: 09:30:00 | Stardate: {stardate(FIXED_NOW)}"

    async def test_gathers_topics_in_fixed_order(self, composer) -> None:
        reply = await composer.local_reply("tell me a joke, the weather and the time")
        parts = reply.split("\n\n")

        assert len(parts) == 3
        assert parts[0].startswith("⏰ TIME: ")
        assert parts[1] == "🌤️ WEATHER: 21°C, Clear sky in Boston"
        assert parts[2].startswith("😄 ")
        assert parts[2][2:] in JOKES

    async def test_weather_uses_settings_city(self, composer, storage, weather) -> None:
        storage.update_settings({"default_city": "Tokyo"})
        assert await composer.local_reply("weather?") == "🌤️ WEATHER: 21°C, Clear sky in Tokyo"
        assert weather.calls == ["Tokyo"]

    async def test_weather_rounds_half_up(self, composer, weather) -> None:
        weather.temp = 22.5
        assert await composer.local_reply("weather?") == "🌤️ WEATHER: 23°C, Clear sky in Boston"
        weather.temp = -0.5
        assert await composer.local_reply("weather?") == "🌤️ WEATHER: 0°C, Clear sky in Boston"

    async def test_weather_failure_degrades_one_fragment(self, composer, weather) -> None:
        weather.fail = True
        reply = await composer.local_reply("system status and weather")
        assert reply.split("\n\n") == [
            "🌤️ WEATHER: Unable to fetch weather data",
            STATUS_REPORT,
        ]

    async def test_task_summary_lists_top_three_active(self, composer, storage) -> None:
        for title in ("Alpha", "Bravo", "Charlie", "Delta"):
            storage.create_task(_task(title))
        done = storage.create_task(_task("Echo"))
        storage.complete_task(done["id"])

        reply = await composer.local_reply("any tasks?")
        assert reply == (
            "📋 TASKS: 4 active, 1 completed\n\n"
            "Top priorities:\n  • Delta\n  • Charlie\n  • Bravo"
        )

    async def test_no_active_tasks_omits_priorities(self, composer) -> None:
        assert await composer.local_reply("my todo list") == "📋 TASKS: 0 active, 0 completed"

    async def test_task_store_failure_degrades(self, weather, rng, fixed_clock) -> None:
        broken = MagicMock()
        broken.get_tasks.side_effect = RuntimeError("store offline")
        composer = ResponseComposer(broken, weather, rng=rng, clock=fixed_clock)
        assert await composer.local_reply("tasks") == "📋 TASKS: Unable to fetch task data"

    async def test_swallow_wins_over_about(self, composer) -> None:
        assert await composer.local_reply("what is the airspeed of a swallow") == SWALLOW_REPORT

    async def test_about(self, composer) -> None:
        assert await composer.local_reply("tell me about yourself") == ABOUT_REPLY

    async def test_default_echoes_text(self, composer) -> None:
        assert await composer.local_reply("Make it so") == DEFAULT_REPLY_TEMPLATE.format(text="Make it so")
