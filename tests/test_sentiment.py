from __future__ import annotations

import pytest

from lcars.nlp.sentiment import score_sentiment


class TestScoreSentiment:
    def test_empty_text_is_neutral_with_zero_confidence(self) -> None:
        result = score_sentiment("")
        assert result.mood == "neutral"
        assert result.score == 0
        assert result.icon == "😐"
        assert result.confidence == 0

    def test_two_positive_words(self) -> None:
        result = score_sentiment("this is great and amazing")
        assert result.score == 20
        assert result.mood == "positive"
        assert result.icon == "🙂"
        # "this", "great", "and", "amazing" survive tokenizing; two carry sentiment
        assert result.confidence == pytest.approx(0.5)

    def test_single_word_stays_neutral(self) -> None:
        result = score_sentiment("good")
        assert result.score == 10
        assert result.mood == "neutral"

    def test_punctuation_is_stripped_before_matching(self) -> None:
        assert score_sentiment("Great! Amazing!!").score == 20

    def test_substrings_do_not_count(self) -> None:
        # "goodness" and "badge" contain lexicon words but are not lexicon words
        assert score_sentiment("goodness, what a badge").score == 0

    def test_short_tokens_are_dropped(self) -> None:
        assert score_sentiment("ok no go").score == 0

    @pytest.mark.parametrize(
        ("text", "mood", "icon"),
        [
            ("great amazing excellent wonderful", "positive", "😊"),
            ("great amazing excellent wonderful fantastic brilliant superb", "positive", "😄"),
            ("bad terrible", "negative", "😕"),
            ("bad terrible awful horrible", "negative", "😔"),
            ("bad terrible awful horrible worst sad angry", "negative", "😢"),
            ("good bad", "neutral", "😐"),
        ],
    )
    def test_mood_bands(self, text: str, mood: str, icon: str) -> None:
        result = score_sentiment(text)
        assert result.mood == mood
        assert result.icon == icon

    def test_confidence_is_capped_at_one(self) -> None:
        assert score_sentiment("great great great").confidence == 1.0

    def test_to_dict_shape(self) -> None:
        assert set(score_sentiment("nice day").to_dict()) == {"mood", "score", "icon", "confidence"}
