"""Process-wide console state: the record store and its collaborators.

Routes never construct collaborators themselves; they call ``get_state()``.
Tests (or an embedding host) install their own with ``reset_state``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lcars.agents.llm_provider import ChatBackend
from lcars.common.config import load_config
from lcars.common.guards import RateLimiter
from lcars.nlp.composer import CommandStash, ResponseComposer
from lcars.services.weather import WeatherService
from lcars.store.memory import Storage
from lcars.terminal.commands import Terminal

logger = logging.getLogger("lcars.state")

CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "config.yaml"


@dataclass
class ConsoleState:
    config: dict[str, Any]
    storage: Storage
    weather: WeatherService
    chat_backend: ChatBackend
    stash: CommandStash
    composer: ResponseComposer
    terminal: Terminal
    chat_limiter: RateLimiter
    voice_limiter: RateLimiter


_state: ConsoleState | None = None


def build_state(
    config: dict[str, Any],
    *,
    storage: Storage | None = None,
    weather: Any = None,
    chat_backend: Any = None,
    rng: random.Random | None = None,
) -> ConsoleState:
    """Wire collaborators from config; any of them may be injected instead."""
    rng = rng or random.Random()
    timeout = float(config["timeouts"]["http"])
    storage = storage if storage is not None else Storage(default_city=config["default_city"], seed=True)
    weather = weather if weather is not None else WeatherService(timeout=timeout)
    chat_backend = chat_backend if chat_backend is not None else ChatBackend(config)
    stash = CommandStash()

    composer = ResponseComposer(
        storage,
        weather,
        chat_backend,
        stash=stash,
        rng=rng,
        default_city=config["default_city"],
    )
    limits = config["rate_limits"]
    return ConsoleState(
        config=config,
        storage=storage,
        weather=weather,
        chat_backend=chat_backend,
        stash=stash,
        composer=composer,
        terminal=Terminal(storage, rng=rng),
        chat_limiter=RateLimiter.from_preset(limits["chat"]),
        voice_limiter=RateLimiter.from_preset(limits["voice"]),
    )


def get_state() -> ConsoleState:
    global _state
    if _state is None:
        _state = build_state(load_config(CONFIG_PATH))
        logger.info("Console state initialised (default city: %s)", _state.config["default_city"])
    return _state


def reset_state(state: ConsoleState | None = None) -> None:
    """Replace (or drop, when None) the process-wide state."""
    global _state
    _state = state
