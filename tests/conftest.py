"""Shared test fixtures and factories."""

import pytest
import trio

from issuemood.events import AnalysisEvents

API = "https://api.github.com"


def make_issue_data(number: int = 1, comments: int = 0, **overrides) -> dict:
    base = {
        "number": number,
        "title": f"Issue {number}",
        "body": "Something is off",
        "comments": comments,
        "comments_url": f"{API}/repos/octo/repo/issues/{number}/comments",
        "state": "open",
    }
    base.update(overrides)
    return base


def make_comment_data(comment_id: int = 1, body: str = "Thanks!", **overrides) -> dict:
    base = {
        "id": comment_id,
        "body": body,
        "user": {"login": "octocat", "id": 1},
        "created_at": "2025-01-10T09:00:00Z",
    }
    base.update(overrides)
    return base


def drain(receive_channel: trio.MemoryReceiveChannel) -> list:
    """Everything currently buffered on a subscription."""
    items = []
    while True:
        try:
            items.append(receive_channel.receive_nowait())
        except (trio.WouldBlock, trio.EndOfChannel):
            return items


@pytest.fixture
def events():
    return AnalysisEvents()
