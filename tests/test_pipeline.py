"""Tests for the analysis orchestrator."""

import time
from datetime import UTC, datetime

import pytest
import trio
import trio.testing
from conftest import drain

from issuemood.errors import FetchError
from issuemood.events import AnalysisEvents
from issuemood.models import Comment, Issue
from issuemood.pipeline import IssueAnalyzer, IssueState
from issuemood.sentiment import Label, SentimentScorer, SentimentScores

# Deterministic stand-in for VADER: text -> compound
COMPOUNDS = {"love it": 0.6, "annoying": -0.2, "ok": 0.0}


def fake_analyze(text: str) -> SentimentScores:
    compound = COMPOUNDS[text]
    return SentimentScores(
        positive=max(compound, 0.0),
        negative=max(-compound, 0.0),
        neutral=1.0 - abs(compound),
        compound=compound,
    )


def make_issue(number: int, comments_count: int) -> Issue:
    return Issue(
        number=number,
        title=f"Issue {number}",
        body="",
        comments_count=comments_count,
        comments_url=f"https://api.github.com/repos/octo/repo/issues/{number}/comments",
    )


def make_comments(*bodies: str) -> list[Comment]:
    return [
        Comment(
            comment_id=i,
            body=body,
            author_login="octocat",
            created_at=datetime(2025, 1, 10, tzinfo=UTC),
        )
        for i, body in enumerate(bodies, start=1)
    ]


class FakeFetcher:
    """In-memory IssueFetcher with optional hanging or failing issues."""

    def __init__(self, issues, comments=None, hang=(), fail=()):
        self.events = AnalysisEvents()
        self.issues = issues
        self.comments = comments or {}
        self.hang = set(hang)
        self.fail = set(fail)
        self.comment_requests: list[int] = []

    async def fetch_issues(self, owner, repo, max_count):
        return self.issues[:max_count]

    async def fetch_comments(self, issue):
        self.comment_requests.append(issue.number)
        if issue.number in self.hang:
            await trio.sleep_forever()
        if issue.number in self.fail:
            raise RuntimeError("backend exploded")
        if issue.comments_count == 0:
            return []
        return self.comments.get(issue.number, [])


def make_analyzer(fetcher: FakeFetcher, **kwargs) -> IssueAnalyzer:
    return IssueAnalyzer(fetcher, scorer=SentimentScorer(analyze=fake_analyze), **kwargs)


class TestAnalyzeRepository:
    @pytest.mark.trio
    async def test_example_repository(self):
        """Issue #1 has three comments, issue #2 none and is excluded."""
        fetcher = FakeFetcher(
            issues=[make_issue(1, 3), make_issue(2, 0)],
            comments={1: make_comments("love it", "annoying", "ok")},
        )
        analyzer = make_analyzer(fetcher)

        results = await analyzer.collect("octo", "repo", 10)

        assert len(results) == 1
        result = results[0]
        assert result.issue.number == 1
        assert [a.label for a in result.comment_analyses] == [
            Label.POSITIVE,
            Label.NEGATIVE,
            Label.NEUTRAL,
        ]
        assert result.average_compound == pytest.approx(0.13333, abs=1e-4)
        assert analyzer.stats.emitted == 1
        assert analyzer.stats.skipped_empty == 1
        assert analyzer.states == {1: IssueState.AGGREGATED, 2: IssueState.AGGREGATED}

    @pytest.mark.trio
    async def test_streams_to_channel_and_closes(self):
        fetcher = FakeFetcher(
            issues=[make_issue(n, 1) for n in range(1, 6)],
            comments={n: make_comments("ok") for n in range(1, 6)},
        )
        analyzer = make_analyzer(fetcher, concurrency=2)
        send_channel, receive_channel = trio.open_memory_channel(0)

        received = []
        async with trio.open_nursery() as nursery:
            nursery.start_soon(analyzer.analyze_repository, "octo", "repo", 10, send_channel)
            async with receive_channel:
                async for result in receive_channel:
                    received.append(result.issue.number)

        assert sorted(received) == [1, 2, 3, 4, 5]

    @pytest.mark.trio
    async def test_completion_logged_for_each_emitted_issue(self):
        fetcher = FakeFetcher(
            issues=[make_issue(1, 1), make_issue(2, 0), make_issue(3, 1)],
            comments={1: make_comments("ok"), 3: make_comments("love it")},
        )
        logs = fetcher.events.logs.subscribe()

        await make_analyzer(fetcher).collect("octo", "repo", 10)

        completed = sorted(m for m in drain(logs) if m.startswith("Completed"))
        assert completed == [
            "Completed analysis for issue #1",
            "Completed analysis for issue #3",
        ]

    @pytest.mark.trio
    async def test_zero_comment_issue_never_fetches_or_emits(self):
        fetcher = FakeFetcher(issues=[make_issue(7, 0)])
        results = await make_analyzer(fetcher).collect("octo", "repo", 10)
        assert results == []

    @pytest.mark.trio
    async def test_no_issues(self):
        fetcher = FakeFetcher(issues=[])
        analyzer = make_analyzer(fetcher)
        assert await analyzer.collect("octo", "repo", 10) == []
        assert analyzer.stats.total_issues == 0

    @pytest.mark.trio
    async def test_issue_list_failure_degrades_to_empty(self):
        class BrokenFetcher(FakeFetcher):
            async def fetch_issues(self, owner, repo, max_count):
                raise RuntimeError("unexpected payload")

        fetcher = BrokenFetcher(issues=[])
        errors = fetcher.events.errors.subscribe()

        assert await make_analyzer(fetcher).collect("octo", "repo", 10) == []

        published = drain(errors)
        assert len(published) == 1
        assert isinstance(published[0], FetchError)

    @pytest.mark.trio
    async def test_error_in_one_issue_does_not_stop_others(self):
        fetcher = FakeFetcher(
            issues=[make_issue(1, 1), make_issue(2, 1)],
            comments={1: make_comments("ok"), 2: make_comments("love it")},
            fail={1},
        )
        logs = fetcher.events.logs.subscribe()
        analyzer = make_analyzer(fetcher)

        results = await analyzer.collect("octo", "repo", 10)

        assert [r.issue.number for r in results] == [2]
        assert analyzer.stats.failed == 1
        assert analyzer.states[1] is IssueState.DEGRADED
        assert any("Error analyzing issue #1" in m for m in drain(logs))

    @pytest.mark.trio
    async def test_scoring_failure_keeps_issue(self):
        fetcher = FakeFetcher(
            issues=[make_issue(1, 2)],
            comments={1: make_comments("love it", "not in the lexicon")},
        )
        errors = fetcher.events.errors.subscribe()

        results = await make_analyzer(fetcher).collect("octo", "repo", 10)

        assert len(results) == 1
        assert [a.label for a in results[0].comment_analyses] == [Label.POSITIVE, Label.NEUTRAL]
        assert drain(errors) == []


class TestIssueTimeout:
    @pytest.mark.trio
    async def test_hung_issue_degrades_at_deadline(self, autojump_clock):
        fetcher = FakeFetcher(issues=[make_issue(1, 5)], hang={1})
        logs = fetcher.events.logs.subscribe()
        analyzer = make_analyzer(fetcher)

        start = trio.current_time()
        results = await analyzer.collect("octo", "repo", 10)
        elapsed = trio.current_time() - start

        assert results == []
        assert 90 <= elapsed < 91
        assert analyzer.stats.timed_out == 1
        assert analyzer.states[1] is IssueState.DEGRADED
        assert "WARNING: Timed out analyzing issue #1 after 90s" in drain(logs)

    @pytest.mark.trio
    async def test_hung_issue_does_not_block_others(self):
        fetcher = FakeFetcher(
            issues=[make_issue(1, 1), make_issue(2, 1), make_issue(3, 1)],
            comments={1: make_comments("ok"), 3: make_comments("annoying")},
            hang={2},
        )
        analyzer = make_analyzer(fetcher, issue_timeout=0.5)

        start = time.monotonic()
        results = await analyzer.collect("octo", "repo", 10)

        assert sorted(r.issue.number for r in results) == [1, 3]
        assert time.monotonic() - start < 5
        assert analyzer.stats.timed_out == 1

    @pytest.mark.trio
    async def test_hung_issue_with_single_worker_still_completes(self):
        fetcher = FakeFetcher(
            issues=[make_issue(1, 1), make_issue(2, 1)],
            comments={2: make_comments("love it")},
            hang={1},
        )
        results = await make_analyzer(fetcher, issue_timeout=0.2, concurrency=1).collect("octo", "repo", 10)
        assert [r.issue.number for r in results] == [2]

    @pytest.mark.trio
    async def test_slow_scoring_counts_toward_deadline(self):
        def slow_analyze(text: str) -> SentimentScores:
            time.sleep(2)
            return fake_analyze(text)

        fetcher = FakeFetcher(issues=[make_issue(1, 1)], comments={1: make_comments("ok")})
        analyzer = IssueAnalyzer(fetcher, scorer=SentimentScorer(analyze=slow_analyze), issue_timeout=0.2)

        start = time.monotonic()
        results = await analyzer.collect("octo", "repo", 10)

        assert results == []
        assert time.monotonic() - start < 1.5
        assert analyzer.stats.timed_out == 1
        assert analyzer.stats.emitted == 0
        assert analyzer.states[1] is IssueState.DEGRADED


class TestCancellation:
    @pytest.mark.trio
    async def test_cancelled_run_emits_nothing_partial(self):
        fetcher = FakeFetcher(
            issues=[make_issue(1, 1), make_issue(2, 1)],
            comments={1: make_comments("ok")},
            hang={2},
        )
        analyzer = make_analyzer(fetcher)
        send_channel, receive_channel = trio.open_memory_channel(10)

        with trio.move_on_after(0.2):
            await analyzer.analyze_repository("octo", "repo", 10, send_channel)

        received = drain(receive_channel)
        # Only the finished issue made it out; the hung one was discarded
        assert [r.issue.number for r in received] == [1]
        assert all(not r.is_empty for r in received)


class TestSingleRun:
    @pytest.mark.trio
    async def test_overlapping_run_rejected(self):
        fetcher = FakeFetcher(issues=[make_issue(1, 1)], hang={1})
        analyzer = make_analyzer(fetcher)

        async with trio.open_nursery() as nursery:
            nursery.start_soon(analyzer.collect, "octo", "repo", 10)
            await trio.testing.wait_all_tasks_blocked()

            send_channel, _ = trio.open_memory_channel(1)
            with pytest.raises(RuntimeError, match="already running"):
                await analyzer.analyze_repository("octo", "repo", 10, send_channel)

            # The active run keeps its counters
            assert analyzer.stats.total_issues == 1
            nursery.cancel_scope.cancel()

    @pytest.mark.trio
    async def test_sequential_runs_allowed(self):
        fetcher = FakeFetcher(issues=[make_issue(1, 1)], comments={1: make_comments("ok")})
        analyzer = make_analyzer(fetcher)

        assert len(await analyzer.collect("octo", "repo", 10)) == 1
        assert len(await analyzer.collect("octo", "repo", 10)) == 1
        assert analyzer.stats.emitted == 1
