"""Issue comment data extractor."""

from datetime import datetime

from ..models import Comment


def parse_datetime(value: str) -> datetime:
    """Parse GitHub's ISO 8601 timestamps (with trailing Z)."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def extract_comment(comment_data: dict) -> Comment:
    """Extract issue comment from GitHub API response."""
    # Deleted accounts come back as user: null
    user = comment_data.get("user") or {}

    return Comment(
        comment_id=comment_data["id"],
        body=comment_data.get("body") or "",
        author_login=user.get("login", "ghost"),
        created_at=parse_datetime(comment_data["created_at"]),
    )
