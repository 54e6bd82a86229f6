"""Concurrent comment scoring on worker threads.

VADER is CPU-bound, so scoring runs in trio worker threads bounded by its
own CapacityLimiter, away from the event loop doing network I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import trio

from ..config import SCORING_WORKERS
from ..models import Comment
from .analyzer import CommentAnalysis
from .vader import Label, SentimentScores, get_sentiment_scores

logger = logging.getLogger(__name__)


class SentimentScorer:
    """Scores comments concurrently with a neutral fallback on failure."""

    def __init__(
        self,
        analyze: Callable[[str], SentimentScores] = get_sentiment_scores,
        max_workers: int | None = None,
    ):
        self.analyze = analyze
        self.max_workers = max_workers or SCORING_WORKERS
        self._limiter: trio.CapacityLimiter | None = None  # Lazy init, needs a running trio loop

    @property
    def limiter(self) -> trio.CapacityLimiter:
        if self._limiter is None:
            self._limiter = trio.CapacityLimiter(self.max_workers)
        return self._limiter

    def _score_sync(self, comment: Comment) -> CommentAnalysis:
        """Score one comment. Failures become a neutral score, never an error."""
        try:
            scores = self.analyze(comment.body)
        except Exception as e:
            logger.warning(f"Error analyzing comment {comment.comment_id}: {e}")
            return CommentAnalysis(
                comment=comment,
                scores=SentimentScores.identity(),
                label=Label.NEUTRAL,
            )

        return CommentAnalysis(comment=comment, scores=scores, label=scores.label)

    async def score_comment(self, comment: Comment) -> CommentAnalysis:
        """Score one comment on a worker thread.

        Cancellation abandons the thread, so a deadline around scoring is
        honoured even while VADER is still running.
        """
        return await trio.to_thread.run_sync(
            self._score_sync, comment, limiter=self.limiter, abandon_on_cancel=True
        )

    async def score_comments(self, comments: list[Comment]) -> list[CommentAnalysis]:
        """Score all comments concurrently, returning results in input order."""
        results: list[CommentAnalysis | None] = [None] * len(comments)

        async def score_one(index: int, comment: Comment) -> None:
            results[index] = await self.score_comment(comment)

        async with trio.open_nursery() as nursery:
            for index, comment in enumerate(comments):
                nursery.start_soon(score_one, index, comment)

        return [r for r in results if r is not None]
