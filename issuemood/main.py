"""Entry point tying the GitHub client, pipeline, stores and report together."""

import logging

import trio
from rich.console import Console
from rich.logging import RichHandler

from .config import LOG_LEVEL, MAX_ISSUES
from .events import AnalysisEvents
from .fetcher import IssueFetcher
from .github_client import GitHubClient
from .pipeline import IssueAnalyzer
from .report import render_results
from .sentiment import AnalysisResult
from .store import LogBuffer, ResultStore

logger = logging.getLogger(__name__)


def setup_logging(level: str = LOG_LEVEL, console: Console | None = None) -> None:
    """Route log records to the terminal through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_repo(repository: str) -> tuple[str, str]:
    """Split "owner/repo" into its parts."""
    owner, sep, repo = repository.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ValueError(f"Expected OWNER/REPO, got {repository!r}")
    return owner, repo


async def _record_events(
    receive_channel: trio.MemoryReceiveChannel,
    log_buffer: LogBuffer,
    is_error: bool = False,
) -> None:
    """Copy events from a channel subscription into the log buffer until it closes."""
    async with receive_channel:
        async for event in receive_channel:
            log_buffer.append(str(event), is_error=is_error)


async def run_analysis(
    owner: str,
    repo: str,
    max_issues: int = MAX_ISSUES,
    token: str | None = None,
    store: ResultStore | None = None,
    log_buffer: LogBuffer | None = None,
) -> list[AnalysisResult]:
    """Analyze one repository and publish the results to store.

    The store is only replaced once the whole run completes; an interrupted
    run leaves the previous results in place.
    """
    events = AnalysisEvents()
    store = store if store is not None else ResultStore()
    log_buffer = log_buffer if log_buffer is not None else LogBuffer()

    async with trio.open_nursery() as nursery:
        nursery.start_soon(_record_events, events.logs.subscribe(), log_buffer)
        nursery.start_soon(_record_events, events.errors.subscribe(), log_buffer, True)

        try:
            async with GitHubClient(token=token, events=events) as client:
                logger.info(f"Analyzing {owner}/{repo} (auth: {client.auth_type}, max issues: {max_issues})")
                analyzer = IssueAnalyzer(IssueFetcher(client, events), events=events)
                results = await analyzer.collect(owner, repo, max_issues)
                logger.info(f"API requests: {client.request_count}")
        finally:
            events.close()

    store.replace(results)
    return results


async def main(owner: str, repo: str, max_issues: int = MAX_ISSUES, token: str | None = None):
    """Analyze a repository and print the report."""
    console = Console()
    results = await run_analysis(owner, repo, max_issues=max_issues, token=token)
    render_results(results, console)


async def show_rate_limit(token: str | None = None) -> None:
    """Print the caller's current API quota."""
    console = Console()
    async with GitHubClient(token=token) as client:
        data = await client.get_rate_limit()

    if not data:
        console.print("[yellow]Rate limit information unavailable[/]")
        return

    core = data["resources"]["core"]
    console.print(
        f"[bold]{client.auth_type}[/]: {core['remaining']}/{core['limit']} requests remaining"
    )
