"""Analysis orchestrator: issues -> comments -> scores -> per-issue results.

Uses a producer/worker pipeline on trio memory channels:
- Producer: queues the repository's issues
- Workers: run each issue's pipeline (CONCURRENT_ISSUES at a time) under a
  deadline and send finished results downstream
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

import trio

from .config import CONCURRENT_ISSUES, ISSUE_TIMEOUT_SECONDS
from .errors import FetchError
from .events import AnalysisEvents
from .fetcher import IssueFetcher
from .models import Issue
from .sentiment import AnalysisResult, SentimentScorer

logger = logging.getLogger(__name__)


class IssueState(Enum):
    PENDING = "pending"
    FETCHING_COMMENTS = "fetching_comments"
    SCORING = "scoring"
    AGGREGATED = "aggregated"
    DEGRADED = "degraded"


@dataclass
class AnalysisStats:
    """Counters for one repository run."""
    total_issues: int = 0
    emitted: int = 0
    skipped_empty: int = 0
    timed_out: int = 0
    failed: int = 0
    comments_scored: int = 0


class IssueAnalyzer:
    """Runs sentiment analysis over a repository's issues."""

    def __init__(
        self,
        fetcher: IssueFetcher,
        scorer: SentimentScorer | None = None,
        events: AnalysisEvents | None = None,
        issue_timeout: float = ISSUE_TIMEOUT_SECONDS,
        concurrency: int = CONCURRENT_ISSUES,
    ):
        self.fetcher = fetcher
        self.scorer = scorer or SentimentScorer()
        self.events = events or fetcher.events
        self.issue_timeout = issue_timeout
        self.concurrency = max(concurrency, 1)

        self.stats = AnalysisStats()
        self.states: dict[int, IssueState] = {}
        self._running = False  # stats and states belong to a single run

    async def analyze_issue(self, issue: Issue) -> AnalysisResult:
        """Analyze one issue's thread within the deadline.

        A timeout or an escaping error yields an empty (degraded) result
        rather than raising.
        """
        self.states[issue.number] = IssueState.PENDING
        try:
            with trio.move_on_after(self.issue_timeout):
                self.states[issue.number] = IssueState.FETCHING_COMMENTS
                comments = await self.fetcher.fetch_comments(issue)

                self.states[issue.number] = IssueState.SCORING
                analyses = await self.scorer.score_comments(comments)

                self.states[issue.number] = IssueState.AGGREGATED
                self.stats.comments_scored += len(analyses)
                return AnalysisResult(issue=issue, comment_analyses=tuple(analyses))
        except Exception as e:
            self.stats.failed += 1
            self.states[issue.number] = IssueState.DEGRADED
            self.events.log(f"Error analyzing issue #{issue.number}: {e}", logging.WARNING)
            return AnalysisResult(issue=issue)

        # Only reached when the deadline cancelled the block
        self.stats.timed_out += 1
        self.states[issue.number] = IssueState.DEGRADED
        self.events.log(
            f"Timed out analyzing issue #{issue.number} after {self.issue_timeout:g}s",
            logging.WARNING,
        )
        return AnalysisResult(issue=issue)

    async def _issue_producer(self, send_channel: trio.MemorySendChannel, issues: list[Issue]) -> None:
        async with send_channel:
            for issue in issues:
                await send_channel.send(issue)

    async def _issue_worker(
        self,
        receive_channel: trio.MemoryReceiveChannel,
        results: trio.MemorySendChannel,
    ) -> None:
        """Worker that analyzes issues from the queue and forwards non-empty results."""
        async with receive_channel, results:
            async for issue in receive_channel:
                result = await self.analyze_issue(issue)
                if result.is_empty:
                    self.stats.skipped_empty += 1
                    continue

                await results.send(result)
                self.stats.emitted += 1
                self.events.log(f"Completed analysis for issue #{issue.number}")

    async def _fetch_issues(self, owner: str, repo: str, max_issues: int) -> list[Issue]:
        """Fetch the issue list; even unexpected failures degrade to no issues."""
        try:
            return await self.fetcher.fetch_issues(owner, repo, max_issues)
        except Exception as e:
            error = FetchError(f"Failed to fetch issues from {owner}/{repo}")
            error.__cause__ = e
            self.events.error(error)
            return []

    async def analyze_repository(
        self,
        owner: str,
        repo: str,
        max_issues: int,
        send_channel: trio.MemorySendChannel,
    ) -> None:
        """Stream AnalysisResults for a repository's issues into send_channel.

        Only issues with at least one scored comment are sent. Results arrive
        in completion order. send_channel is closed when the run finishes.

        An analyzer runs one repository at a time; use separate instances
        for overlapping runs.
        """
        async with send_channel:
            if self._running:
                raise RuntimeError("IssueAnalyzer is already running an analysis")

            self._running = True
            try:
                self.stats = AnalysisStats()
                self.states = {}

                issues = await self._fetch_issues(owner, repo, max_issues)
                self.stats.total_issues = len(issues)
                logger.info(f"Analyzing {len(issues)} issues from {owner}/{repo}")

                issue_send, issue_receive = trio.open_memory_channel[Issue](self.concurrency)

                async with trio.open_nursery() as nursery:
                    nursery.start_soon(self._issue_producer, issue_send, issues)

                    for _ in range(self.concurrency):
                        nursery.start_soon(self._issue_worker, issue_receive.clone(), send_channel.clone())

                    # Workers have clones
                    await issue_receive.aclose()
            finally:
                self._running = False

        logger.info(
            f"Analysis of {owner}/{repo} complete: {self.stats.emitted} emitted, "
            f"{self.stats.skipped_empty} skipped, {self.stats.timed_out} timed out"
        )

    async def collect(self, owner: str, repo: str, max_issues: int) -> list[AnalysisResult]:
        """Run analyze_repository and gather its stream into a list."""
        send_channel, receive_channel = trio.open_memory_channel[AnalysisResult](math.inf)
        results: list[AnalysisResult] = []

        async with trio.open_nursery() as nursery:
            nursery.start_soon(self.analyze_repository, owner, repo, max_issues, send_channel)
            async with receive_channel:
                async for result in receive_channel:
                    results.append(result)

        return results
