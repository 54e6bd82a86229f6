"""Exception types raised by the fetch layer."""


class IssueMoodError(Exception):
    """Base class for issuemood errors."""


class GitHubAPIError(IssueMoodError):
    """GitHub returned a non-success status we don't recover from."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"GitHub API returned {status_code}: {message}")
        self.status_code = status_code


class FetchError(IssueMoodError):
    """A fetch operation failed and was recovered to an empty result.

    Published on the error channel; the underlying error is chained as __cause__.
    """
