"""Issue and comment retrieval with recover-to-empty error handling.

Failures are published on the error channel and replaced by an empty list,
so one bad repository or issue never aborts an analysis run.
"""

import logging

from .config import PAGE_DELAY_SECONDS, PER_PAGE
from .errors import FetchError
from .events import AnalysisEvents
from .extractors.comments import extract_comment
from .extractors.issues import extract_issue
from .github_client import GitHubClient
from .models import Comment, Issue

logger = logging.getLogger(__name__)


class IssueFetcher:
    """Fetches issues and their comment threads through a GitHubClient."""

    def __init__(self, client: GitHubClient, events: AnalysisEvents | None = None):
        self.client = client
        self.events = events or client.events

    async def fetch_issues(self, owner: str, repo: str, max_count: int) -> list[Issue]:
        """Fetch up to max_count issues (open and closed) for a repository."""
        if max_count <= 0:
            return []

        path = f"/repos/{owner}/{repo}/issues"
        try:
            issues = [
                extract_issue(issue_data)
                async for issue_data in self.client.paginate(
                    path,
                    params={"state": "all"},
                    per_page=min(max_count, PER_PAGE),
                    max_items=max_count,
                )
            ]
        except Exception as e:
            error = FetchError(f"Failed to fetch issues from {owner}/{repo}")
            error.__cause__ = e
            self.events.error(error)
            return []

        self.events.log(f"Fetched {len(issues)} issues from {owner}/{repo}")
        return issues

    async def fetch_comments(self, issue: Issue) -> list[Comment]:
        """Fetch the full comment thread for one issue."""
        if issue.comments_count == 0:
            return []

        try:
            comments = [
                extract_comment(comment_data)
                async for comment_data in self.client.paginate(
                    issue.comments_url,
                    per_page=PER_PAGE,
                    page_delay=PAGE_DELAY_SECONDS,
                )
            ]
        except Exception as e:
            error = FetchError(f"Failed to fetch comments for issue #{issue.number}")
            error.__cause__ = e
            self.events.error(error)
            return []

        # Mismatch is informational only
        self.events.log(
            f"Fetched {len(comments)} comments for issue #{issue.number} "
            f"(expected: {issue.comments_count})"
        )
        return comments
