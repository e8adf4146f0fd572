"""Lexicon-based sentiment scoring for chat and voice input."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from lcars.nlp.lexicon import NEGATIVE_WORDS, POSITIVE_WORDS, tokenize

WORD_WEIGHT = 10


@dataclass(frozen=True)
class SentimentResult:
    mood: str
    score: int
    icon: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def score_sentiment(text: str) -> SentimentResult:
    """Score ``text`` against the positive/negative word sets.

    Each surviving token adds +10 (positive) or -10 (negative). Confidence is
    the share of tokens that carried sentiment, capped at 1.

    Mood bands:
        score > 30          positive  (😄 above 60, else 😊)
        10 < score <= 30    positive  🙂
        score < -30         negative  (😢 below -60, else 😔)
        -30 <= score < -10  negative  😕
        otherwise           neutral   😐
    """
    words = tokenize(text)
    score = 0
    for word in words:
        if word in POSITIVE_WORDS:
            score += WORD_WEIGHT
        if word in NEGATIVE_WORDS:
            score -= WORD_WEIGHT

    sentiment_words = abs(score) / WORD_WEIGHT
    confidence = min(sentiment_words / max(len(words), 1), 1.0)

    if score > 30:
        return SentimentResult("positive", score, "😄" if score > 60 else "😊", confidence)
    if score > 10:
        return SentimentResult("positive", score, "🙂", confidence)
    if score < -30:
        return SentimentResult("negative", score, "😢" if score < -60 else "😔", confidence)
    if score < -10:
        return SentimentResult("negative", score, "😕", confidence)
    return SentimentResult("neutral", score, "😐", confidence)
