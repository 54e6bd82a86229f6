"""Sentiment scoring for issue comments.

This module provides:
- VADER polarity scores and POSITIVE/NEGATIVE/NEUTRAL labels
- Per-comment and per-issue result types
- A thread-pool scorer that never fails a whole issue over one comment
"""

from .analyzer import AnalysisResult, CommentAnalysis
from .scorer import SentimentScorer
from .vader import Label, SentimentScores, get_sentiment_scores

__all__ = [
    # Scoring
    "get_sentiment_scores",
    "SentimentScores",
    "Label",
    "SentimentScorer",
    # Results
    "CommentAnalysis",
    "AnalysisResult",
]
