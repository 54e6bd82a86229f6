"""Terminal report of per-issue sentiment."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from .sentiment import AnalysisResult, Label

LABEL_STYLES = {
    Label.POSITIVE: "green",
    Label.NEGATIVE: "red",
    Label.NEUTRAL: "dim",
}


def format_score(value: float) -> str:
    return f"{value:.3f}"


def format_label(label: Label) -> str:
    return f"[{LABEL_STYLES[label]}]{label.value}[/]"


def build_results_table(results: Sequence[AnalysisResult], title: str = "Issue Sentiment") -> Table:
    """Build a table with one row per analyzed issue, ordered by issue number."""
    table = Table(title=title, expand=True)
    table.add_column("Issue", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Comments", justify="right")
    table.add_column("Pos", justify="right")
    table.add_column("Neg", justify="right")
    table.add_column("Neu", justify="right")
    table.add_column("Compound", justify="right")
    table.add_column("+/-/=", justify="center")
    table.add_column("Overall")

    for result in sorted(results, key=lambda r: r.issue.number):
        counts = result.label_counts
        table.add_row(
            f"#{result.issue.number}",
            result.issue.title,
            str(result.comment_count),
            format_score(result.average_positive),
            format_score(result.average_negative),
            format_score(result.average_neutral),
            format_score(result.average_compound),
            f"{counts[Label.POSITIVE]}/{counts[Label.NEGATIVE]}/{counts[Label.NEUTRAL]}",
            format_label(result.overall_label),
        )

    return table


def render_results(results: Sequence[AnalysisResult], console: Console | None = None) -> None:
    """Print the results table, or a notice when nothing was analyzed."""
    console = console or Console()
    if not results:
        console.print("[yellow]No issues with comments to analyze.[/]")
        return

    console.print(build_results_table(results))

    total_comments = sum(r.comment_count for r in results)
    console.print(f"[dim]{len(results)} issues, {total_comments} comments analyzed[/]")
