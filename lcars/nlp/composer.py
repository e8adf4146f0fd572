"""Compose reply text for a classified intent.

Data-backed topics (time, tasks, weather) call their collaborators; a
failing collaborator contributes an "unable to fetch" fragment instead of
an exception, so a combined reply degrades one fragment at a time.
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timedelta
from typing import Any, Callable

from lcars.nlp import intent as intents
from lcars.nlp.intent import Intent
from lcars.nlp.lexicon import ABOUT_RE, API_RE, CHAT_TOPICS, GREETING_RE, SWALLOW_RE, THANKS_RE
from lcars.nlp.panels import PANEL_TITLES
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
    pick,
)
from lcars.services.weather import display_temp

logger = logging.getLogger("lcars.nlp.composer")

_NAV_TITLES = {
    **PANEL_TITLES,
    "dashboard": "Console",
    "settings": "Settings",
}

_STARDATE_YEAR_MS = 31_536_000_000


def stardate(now: datetime) -> str:
    """TNG-style stardate: 41000 plus the fraction of the current 365-day cycle."""
    epoch_ms = int(now.timestamp() * 1000)
    return f"{41000.0 + (epoch_ms % _STARDATE_YEAR_MS) / 31_536_000:.2f}"


class CommandStash:
    """One-shot hand-off of a terminal command staged by the classifier."""

    def __init__(self) -> None:
        self._pending: str | None = None

    def stage(self, command: str) -> None:
        self._pending = command

    def consume(self) -> str | None:
        command, self._pending = self._pending, None
        return command

    @property
    def pending(self) -> str | None:
        return self._pending


class ResponseComposer:
    """Turns an ``Intent`` into reply text using injected collaborators.

    Collaborators:
        storage       -- record store (get_tasks, create_task, get_settings)
        weather       -- object with ``current(city)`` returning temp/condition/city
        chat_backend  -- object with ``send(message)`` returning a ChatReply,
                         or None for local-only replies
    """

    def __init__(
        self,
        storage: Any,
        weather: Any,
        chat_backend: Any = None,
        *,
        stash: CommandStash | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.now,
        default_city: str = "New York",
    ) -> None:
        self.storage = storage
        self.weather = weather
        self.chat_backend = chat_backend
        self.stash = stash or CommandStash()
        self.rng = rng or random.Random()
        self.clock = clock
        self.default_city = default_city

    async def compose(self, intent: Intent) -> str:
        kind = intent.kind

        if kind == intents.GREETING:
            return GREETING_REPLY
        if kind == intents.THANKS:
            return THANKS_REPLY
        if kind == intents.TASK_USAGE:
            return TASK_USAGE_REPLY
        if kind == intents.CREATE_TASK:
            return await self._create_task(intent.title or "")
        if kind == intents.CAPTAIN_QUOTE:
            self.stash.stage(intent.captain or "")
            return f"🖖 Opening terminal for a {str(intent.captain).title()} quote."
        if kind == intents.MULTI_VIEW:
            titles = ", ".join(PANEL_TITLES.get(t, t) for t in intent.tags)
            return f"🖥️ Displaying {len(intent.tags)} panels: {titles}"
        if kind == intents.NAVIGATE:
            tag = intent.tags[0] if intent.tags else "dashboard"
            return f"Navigating to {_NAV_TITLES.get(tag, tag.title())}."

        return await self.chat(intent.utterance)

    async def chat(self, message: str) -> str:
        """Ask the chat backend; fall back to the local composer on any miss."""
        if self.chat_backend is not None:
            try:
                reply = await asyncio.to_thread(self.chat_backend.send, message)
            except Exception as exc:
                logger.warning("Chat backend failed, using local reply: %s", exc)
            else:
                if reply.api_available and reply.response:
                    return reply.response
                logger.debug("Chat backend not configured, using local reply")
        return await self.local_reply(message)

    async def local_reply(self, text: str) -> str:
        """Rule-table reply that gathers every matched topic into one answer."""
        lowered = text.lower()

        if GREETING_RE.match(lowered.strip()):
            return GREETING_REPLY
        if THANKS_RE.search(lowered):
            return THANKS_REPLY

        fragments = await self.gather_fragments(lowered)
        if fragments:
            return "\n\n".join(fragments)

        if ABOUT_RE.search(lowered) and not SWALLOW_RE.search(lowered):
            return ABOUT_REPLY
        if API_RE.search(lowered):
            return API_REPLY
        return DEFAULT_REPLY_TEMPLATE.format(text=text)

    def detect_topics(self, text: str) -> list[str]:
        return [name for name, pattern in CHAT_TOPICS if pattern.search(text)]

    async def gather_fragments(self, text: str) -> list[str]:
        """One fragment per matched topic, in the fixed topic order."""
        fragments: list[str] = []
        for topic in self.detect_topics(text):
            if topic == "time":
                fragments.append(self._time_fragment())
            elif topic == "tasks":
                fragments.extend(await self._tasks_fragments())
            elif topic == "weather":
                fragments.append(await self._weather_fragment())
            elif topic == "status":
                fragments.append(STATUS_REPORT)
            elif topic == "joke":
                fragments.append(f"😄 {pick(JOKES, self.rng)}")
            elif topic == "swallow":
                fragments.append(SWALLOW_REPORT)
        return fragments

    # ------------------------------------------------------------------
    # Fragments
    # ------------------------------------------------------------------

    def _time_fragment(self) -> str:
        now = self.clock()
        return f"⏰ TIME: {now.strftime('%H:%M:%S')} | Stardate: {stardate(now)}"

    async def _tasks_fragments(self) -> list[str]:
        try:
            tasks = await asyncio.to_thread(self.storage.get_tasks)
        except Exception as exc:
            logger.warning("Task store unavailable: %s", exc)
            return ["📋 TASKS: Unable to fetch task data"]

        active = [t for t in tasks if t.get("status") == "active"]
        completed = [t for t in tasks if t.get("status") == "completed"]
        out = [f"📋 TASKS: {len(active)} active, {len(completed)} completed"]
        if active:
            top = "\n".join(f"  • {t['title']}" for t in active[:3])
            out.append(f"Top priorities:\n{top}")
        return out

    async def _weather_fragment(self) -> str:
        try:
            city = await asyncio.to_thread(self._current_city)
            report = await asyncio.to_thread(self.weather.current, city)
        except Exception as exc:
            logger.warning("Weather unavailable: %s", exc)
            return "🌤️ WEATHER: Unable to fetch weather data"
        return f"🌤️ WEATHER: {display_temp(report.temp)}°C, {report.condition} in {report.city}"

    def _current_city(self) -> str:
        settings = self.storage.get_settings() or {}
        return settings.get("default_city") or self.default_city

    async def _create_task(self, title: str) -> str:
        due = self.clock() + timedelta(days=7)
        try:
            task = await asyncio.to_thread(self.storage.create_task, {
                "title": title,
                "description": "Created by voice command",
                "priority": "medium",
                "status": "active",
                "due_date": due.isoformat(),
            })
        except Exception as exc:
            logger.warning("Could not create task %r: %s", title, exc)
            return f"📋 TASKS: Unable to create task '{title}'"
        return f"✅ Task created: {task['title']}"
