"""VADER sentiment analysis for issue comments.

VADER (Valence Aware Dictionary and sEntiment Reasoner) is designed for
social media text and handles things like emoticons, slang, and capitalization,
which makes it a reasonable fit for issue tracker chatter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

import nltk
from nltk.sentiment.vader import SentimentIntensityAnalyzer

POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05


@lru_cache(maxsize=1)
def _get_analyzer() -> SentimentIntensityAnalyzer:
    """Get or initialize the VADER analyzer.

    Downloads the vader_lexicon on first use if not present.
    """
    try:
        nltk.data.find("sentiment/vader_lexicon.zip")
    except LookupError:
        nltk.download("vader_lexicon", quiet=True)

    return SentimentIntensityAnalyzer()


class Label(Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"

    @classmethod
    def from_compound(cls, compound: float) -> Label:
        """Label a compound score using VADER's standard thresholds."""
        if compound >= POSITIVE_THRESHOLD:
            return cls.POSITIVE
        elif compound <= NEGATIVE_THRESHOLD:
            return cls.NEGATIVE
        else:
            return cls.NEUTRAL


@dataclass(frozen=True)
class SentimentScores:
    """VADER sentiment scores for a piece of text."""

    positive: float  # 0.0 to 1.0
    negative: float  # 0.0 to 1.0
    neutral: float  # 0.0 to 1.0
    compound: float  # -1.0 to 1.0 (overall sentiment)

    @classmethod
    def identity(cls) -> SentimentScores:
        """Fully neutral score, used for empty text and scoring failures."""
        return cls(positive=0.0, negative=0.0, neutral=1.0, compound=0.0)

    @property
    def label(self) -> Label:
        return Label.from_compound(self.compound)


def get_sentiment_scores(text: str) -> SentimentScores:
    """Analyze sentiment of text using VADER.

    Args:
        text: The text to analyze.

    Returns:
        SentimentScores with positive, negative, neutral, and compound scores.
    """
    if not text or not text.strip():
        return SentimentScores.identity()

    analyzer = _get_analyzer()
    scores = analyzer.polarity_scores(text)

    return SentimentScores(
        positive=scores["pos"],
        negative=scores["neg"],
        neutral=scores["neu"],
        compound=scores["compound"],
    )
