"""Issue data extractor."""

from ..models import Issue


def extract_issue(issue_data: dict) -> Issue:
    """Extract issue from GitHub API response."""
    return Issue(
        number=issue_data["number"],
        title=issue_data.get("title") or "",
        body=issue_data.get("body") or "",
        comments_count=issue_data.get("comments", 0),
        comments_url=issue_data["comments_url"],
    )
