"""Rule-based intent classifier for voice and typed commands.

Rules are evaluated in a fixed order and the first one that fires wins:

    1. greeting prefix       -> GREETING
    2. thanks                -> THANKS
    3. "add/create/new task" -> CREATE_TASK (or TASK_USAGE when no title)
    4. captain roster name   -> CAPTAIN_QUOTE (staged for the terminal)
    5. 2+ panel topics       -> MULTI_VIEW (deduplicated, capped at 4)
    6. single panel keyword  -> NAVIGATE
    7. anything else         -> CHAT

Later rules are unreachable once an earlier one fires, so
"hello, what's the weather" is a greeting and nothing else.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import Any

from lcars.nlp.lexicon import (
    CAPTAINS,
    GREETING_RE,
    NAVIGATION_KEYWORDS,
    PANEL_KEYWORDS,
    TASK_CREATION_RES,
    THANKS_RE,
    first_match,
    matches,
    normalize,
)

logger = logging.getLogger("lcars.nlp.intent")

GREETING = "greeting"
THANKS = "thanks"
CREATE_TASK = "create_task"
TASK_USAGE = "task_usage"
CAPTAIN_QUOTE = "captain_quote"
MULTI_VIEW = "multi_view"
NAVIGATE = "navigate"
CHAT = "chat"

MAX_PANELS = 4
WAKE_WORD = "computer"
_WAKE_RE = re.compile(rf"^{WAKE_WORD}\b", re.IGNORECASE)


@dataclass(frozen=True)
class Intent:
    kind: str
    utterance: str
    tags: tuple[str, ...] = ()
    title: str | None = None
    captain: str | None = None
    target: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["tags"] = list(self.tags)
        return d


def strip_wake_word(transcript: str) -> str | None:
    """Return the command after a leading "computer", or None if absent."""
    text = (transcript or "").strip()
    if not _WAKE_RE.match(text):
        return None
    return text[len(WAKE_WORD):].strip(" ,.!:")


def classify(utterance: str) -> Intent:
    """Resolve one utterance to exactly one intent."""
    text = (utterance or "").strip()
    lowered = normalize(text)

    if GREETING_RE.match(lowered):
        return _resolved(Intent(GREETING, text))

    if THANKS_RE.search(lowered):
        return _resolved(Intent(THANKS, text))

    task = _task_creation(text, lowered)
    if task is not None:
        return _resolved(task)

    captain = first_match(lowered, CAPTAINS)
    if captain:
        return _resolved(Intent(CAPTAIN_QUOTE, text, tags=(captain,), captain=captain, target="/terminal"))

    panels = detect_panels(lowered)
    if len(panels) >= 2:
        tags = tuple(panels[:MAX_PANELS])
        return _resolved(Intent(MULTI_VIEW, text, tags=tags, target="/multiview?panels=" + ",".join(tags)))

    for tag, path, keywords in NAVIGATION_KEYWORDS:
        if matches(lowered, keywords):
            return _resolved(Intent(NAVIGATE, text, tags=(tag,), target=path))

    return _resolved(Intent(CHAT, text))


def detect_panels(utterance: str) -> list[str]:
    """Distinct panel tags mentioned in the utterance, in table order."""
    found: list[str] = []
    for tag, keywords in PANEL_KEYWORDS:
        if tag not in found and matches(utterance, keywords):
            found.append(tag)
    return found


def _task_creation(text: str, lowered: str) -> Intent | None:
    for pattern in TASK_CREATION_RES:
        m = pattern.search(lowered)
        if m is None:
            continue
        title = text[m.end():].strip(" \t:,-")
        if not title:
            return Intent(TASK_USAGE, text)
        return Intent(CREATE_TASK, text, tags=("tasks",), title=title, target="/tasks")
    return None


def _resolved(intent: Intent) -> Intent:
    logger.debug("Classified %r as %s %s", intent.utterance, intent.kind, list(intent.tags))
    return intent
