"""Pydantic models for GitHub issue data."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Issue(BaseModel):
    """Issue snapshot from one fetch."""
    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    body: str
    comments_count: int
    comments_url: str


class Comment(BaseModel):
    """Issue comment snapshot."""
    model_config = ConfigDict(frozen=True)

    comment_id: int
    body: str
    author_login: str
    created_at: datetime
