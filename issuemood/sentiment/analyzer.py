"""Per-comment analyses and per-issue aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..models import Comment, Issue
from .vader import Label, SentimentScores


@dataclass(frozen=True)
class CommentAnalysis:
    """Sentiment of a single comment."""

    comment: Comment
    scores: SentimentScores
    label: Label


@dataclass(frozen=True)
class AnalysisResult:
    """Sentiment of an issue's whole comment thread.

    Averages are 0.0 for an empty thread. Empty results are placeholders for
    failed or timed-out issues and never leave the pipeline.
    """

    issue: Issue
    comment_analyses: tuple[CommentAnalysis, ...] = field(default_factory=tuple)

    @property
    def comment_count(self) -> int:
        return len(self.comment_analyses)

    @property
    def is_empty(self) -> bool:
        return not self.comment_analyses

    def _average(self, attr: str) -> float:
        if not self.comment_analyses:
            return 0.0
        total = sum(getattr(a.scores, attr) for a in self.comment_analyses)
        return total / len(self.comment_analyses)

    @property
    def average_positive(self) -> float:
        return self._average("positive")

    @property
    def average_negative(self) -> float:
        return self._average("negative")

    @property
    def average_neutral(self) -> float:
        return self._average("neutral")

    @property
    def average_compound(self) -> float:
        return self._average("compound")

    @property
    def label_counts(self) -> dict[Label, int]:
        """Comments per label, with every label present."""
        counts = {label: 0 for label in Label}
        for analysis in self.comment_analyses:
            counts[analysis.label] += 1
        return counts

    @property
    def overall_label(self) -> Label:
        """Label of the thread's average compound score."""
        return Label.from_compound(self.average_compound)
