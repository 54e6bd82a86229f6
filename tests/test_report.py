"""Tests for the terminal report."""

from datetime import UTC, datetime

from rich.console import Console

from issuemood.models import Comment, Issue
from issuemood.report import build_results_table, format_score, render_results
from issuemood.sentiment import AnalysisResult, CommentAnalysis, SentimentScores


def make_result(number: int, *compounds: float) -> AnalysisResult:
    issue = Issue(
        number=number,
        title=f"Issue {number}",
        body="",
        comments_count=len(compounds),
        comments_url=f"https://api.github.com/repos/octo/repo/issues/{number}/comments",
    )
    analyses = []
    for i, compound in enumerate(compounds):
        scores = SentimentScores(positive=0.0, negative=0.0, neutral=1.0, compound=compound)
        comment = Comment(
            comment_id=i,
            body="x",
            author_login="octocat",
            created_at=datetime(2025, 1, 10, tzinfo=UTC),
        )
        analyses.append(CommentAnalysis(comment=comment, scores=scores, label=scores.label))
    return AnalysisResult(issue=issue, comment_analyses=tuple(analyses))


def test_format_score():
    assert format_score(0.13333) == "0.133"
    assert format_score(-1) == "-1.000"


def test_table_has_row_per_result():
    table = build_results_table([make_result(2, 0.5), make_result(1, -0.5, 0.0)])
    assert table.row_count == 2


def test_render_results():
    console = Console(record=True, width=200)
    render_results([make_result(5, 0.6, -0.2, 0.0)], console)
    output = console.export_text()
    assert "#5" in output
    assert "0.133" in output
    assert "1/1/1" in output
    assert "POSITIVE" in output
    assert "1 issues, 3 comments analyzed" in output


def test_render_empty():
    console = Console(record=True)
    render_results([], console)
    assert "No issues with comments to analyze" in console.export_text()
