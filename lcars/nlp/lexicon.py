"""Word sets, keyword tables and the two matching primitives.

Topic keywords match as substrings of the lowercased utterance that start at
a word boundary ("weathering" hits "weather", "prevent" misses "event").
Sentiment words match only as whole tokens after punctuation is stripped.
Keep the two separate.
"""

from __future__ import annotations

import re

POSITIVE_WORDS = frozenset([
    "good", "great", "awesome", "amazing", "excellent",
    "happy", "love", "perfect", "wonderful", "fantastic",
    "brilliant", "outstanding", "superb", "terrific", "marvelous",
    "delightful", "fabulous", "spectacular", "phenomenal", "incredible",
    "nice", "pleasant", "enjoyable", "satisfying", "pleased",
])

NEGATIVE_WORDS = frozenset([
    "bad", "terrible", "awful", "hate", "worst",
    "horrible", "sad", "angry", "disappointing", "poor",
    "awful", "dreadful", "atrocious", "abysmal", "appalling",
    "miserable", "pathetic", "useless", "frustrating", "annoying",
    "upset", "unhappy", "dissatisfied", "displeased",
])

GREETING_RE = re.compile(r"^(hi|hello|hey|greetings)", re.IGNORECASE)
THANKS_RE = re.compile(r"thank|thanks", re.IGNORECASE)

TASK_CREATION_PHRASES = ("add task", "create task", "new task")

# Singular only: "add tasks ..." reads as a request to see tasks, not to create one.
TASK_CREATION_RES = tuple(re.compile(rf"\b{phrase}\b") for phrase in TASK_CREATION_PHRASES)

# Roster order decides which captain wins when several are named.
CAPTAINS = ("spock", "picard", "sisko", "janeway", "archer", "mariner")

# Multi-view table: panel tag -> trigger keywords. Order is the panel order.
PANEL_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("tasks", ("task", "todo", "to-do")),
    ("weather", ("weather", "forecast", "temperature")),
    ("calendar", ("calendar", "schedule", "event")),
    ("analytics", ("analytics", "stats", "productivity")),
    ("space", ("space", "nasa", "astronomy")),
    ("travel", ("travel", "route", "directions")),
    ("notifications", ("notification", "alert")),
    ("terminal", ("terminal", "console")),
    ("ai", ("ai chat", "assistant")),
)

# Single-panel navigation, tested in this order; first hit wins.
NAVIGATION_KEYWORDS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("dashboard", "/", ("dashboard", "home")),
    ("tasks", "/tasks", ("task",)),
    ("weather", "/weather", ("weather",)),
    ("calendar", "/calendar", ("calendar",)),
    ("analytics", "/analytics", ("analytics",)),
    ("space", "/space", ("space",)),
    ("travel", "/travel", ("travel", "route")),
    ("notifications", "/notifications", ("notification",)),
    ("terminal", "/terminal", ("terminal", "console")),
    ("settings", "/settings", ("settings",)),
)

SWALLOW_RE = re.compile(r"swallow|african|european", re.IGNORECASE)

# Chat-fallback topics, in the order their fragments are joined.
CHAT_TOPICS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("time", re.compile(r"time|clock|stardate", re.IGNORECASE)),
    ("tasks", re.compile(r"task|todo|to-do|reminder", re.IGNORECASE)),
    ("weather", re.compile(r"weather|temperature|forecast", re.IGNORECASE)),
    ("status", re.compile(r"status|health|system|diagnostic", re.IGNORECASE)),
    ("joke", re.compile(r"joke|funny|laugh", re.IGNORECASE)),
    ("swallow", SWALLOW_RE),
)

ABOUT_RE = re.compile(r"about|what is|tell me about|explain", re.IGNORECASE)
API_RE = re.compile(r"api|claude|anthropic", re.IGNORECASE)

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)


def normalize(utterance: str) -> str:
    return (utterance or "").strip().lower()


def matches(utterance: str, keywords: tuple[str, ...] | frozenset[str] | list[str]) -> bool:
    """True if any keyword appears in the lowercased utterance at the start of a word.

    The match may run on past the keyword ("weathering" hits "weather") but
    may not begin mid-word ("prevent" does not hit "event").
    """
    lowered = normalize(utterance)
    return any(re.search(r"\b" + re.escape(k), lowered) for k in keywords)


def first_match(utterance: str, keywords: tuple[str, ...]) -> str | None:
    """Return the first keyword (in table order) found in the utterance."""
    lowered = normalize(utterance)
    for k in keywords:
        if k in lowered:
            return k
    return None


def tokenize(text: str) -> list[str]:
    """Lowercase, blank out punctuation, split, and drop tokens of 2 chars or fewer."""
    cleaned = _NON_WORD.sub(" ", (text or "").lower())
    return [w for w in cleaned.split() if len(w) > 2]


def word_matches(text: str, words: frozenset[str]) -> bool:
    """True only when an exact token of ``text`` is in ``words``."""
    return any(tok in words for tok in tokenize(text))
