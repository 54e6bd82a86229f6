"""GitHub API client with rate limit awareness and retry logic.

Uses httpx.AsyncClient with trio for concurrent requests.
"""

import logging
import time
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import trio

from .config import (
    GITHUB_API_URL,
    GITHUB_TOKEN,
    PER_PAGE,
    RATE_LIMIT_WARNING_THRESHOLD,
    REQUEST_TIMEOUT_SECONDS,
    USER_AGENT,
)
from .errors import GitHubAPIError
from .events import AnalysisEvents

logger = logging.getLogger(__name__)


class GitHubClient:
    """Async GitHub REST API client.

    Authentication is an optional bearer token. Without one, requests are
    anonymous and GitHub applies the lower unauthenticated rate limit.
    """

    BASE_URL = GITHUB_API_URL

    def __init__(
        self,
        token: str | None = None,
        events: AnalysisEvents | None = None,
        max_retries: int = 3,
    ):
        """Initialize the client.

        Args:
            token: Personal access token. Falls back to GITHUB_TOKEN from the
                environment; if neither is set the client runs anonymously.
            events: Channels for rate limit warnings. A private set is
                created when omitted.
            max_retries: Attempts per request for 5xx and rate limit responses.
        """
        self.token = token if token is not None else GITHUB_TOKEN
        self.events = events or AnalysisEvents()
        self.max_retries = max_retries
        self.client: httpx.AsyncClient | None = None
        self._request_count = 0
        self._rate_limit_remaining: int | None = None

    async def __aenter__(self):
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        self.client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers=headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
            http2=True,
        )
        return self

    async def __aexit__(self, *args):
        if self.client:
            await self.client.aclose()

    @property
    def auth_type(self) -> str:
        """Return the authentication type being used."""
        return "token" if self.token else "anonymous"

    @property
    def request_count(self) -> int:
        return self._request_count

    @property
    def rate_limit_remaining(self) -> int | None:
        """Last X-RateLimit-Remaining value seen, if any."""
        return self._rate_limit_remaining

    def _check_rate_limit(self, response: httpx.Response) -> None:
        """Warn when the remaining quota is low. Unparseable headers are ignored."""
        header = response.headers.get("X-RateLimit-Remaining")
        if header is None:
            return
        try:
            remaining = int(header)
        except ValueError:
            return

        self._rate_limit_remaining = remaining
        if remaining < RATE_LIMIT_WARNING_THRESHOLD:
            self.events.log(f"Rate limit low - {remaining} requests remaining", logging.WARNING)

    async def _handle_rate_limit(self, response: httpx.Response) -> bool:
        """Handle rate limiting. Returns True if request should be retried."""
        if response.status_code == 429 or (
            response.status_code == 403 and "Retry-After" in response.headers
        ):
            retry_after = int(response.headers.get("Retry-After", 60))
            logger.warning(f"Rate limited (secondary). Waiting {retry_after}s...")
            await trio.sleep(retry_after)
            return True

        if response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            reset_time = int(response.headers.get("X-RateLimit-Reset", 0))
            wait_seconds = max(reset_time - time.time(), 1)
            logger.warning(f"Rate limited (primary). Waiting {wait_seconds:.0f}s until reset...")
            await trio.sleep(wait_seconds)
            return True

        return False

    async def _request(
        self,
        method: str,
        url: str,
        params: dict | None = None,
    ) -> httpx.Response | None:
        """Make request with rate limit handling. Returns None for 404."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        response: httpx.Response | None = None
        for attempt in range(self.max_retries):
            response = await self.client.request(method, url, params=params)
            self._request_count += 1
            self._check_rate_limit(response)

            if response.status_code == 404:
                return None

            if await self._handle_rate_limit(response):
                continue

            if response.status_code >= 500:
                wait = 2**attempt
                logger.warning(f"Server error {response.status_code}. Retrying in {wait}s...")
                await trio.sleep(wait)
                continue

            if not response.is_success:
                raise GitHubAPIError(response.status_code, response.text[:200])

            return response

        status = response.status_code if response is not None else 0
        raise GitHubAPIError(status, f"Max retries exceeded for {url}")

    async def get(self, url: str, params: dict | None = None) -> Any | None:
        """GET request returning JSON, or None if the resource doesn't exist."""
        response = await self._request("GET", url, params=params)
        if response is None:
            return None
        return response.json()

    async def paginate(
        self,
        url: str,
        params: dict | None = None,
        per_page: int = PER_PAGE,
        max_items: int | None = None,
        page_delay: float = 0.0,
    ) -> AsyncGenerator[Any]:
        """Paginate through results, yielding each item.

        Stops on a missing (404) or empty page, on a page shorter than
        per_page, or once max_items have been yielded. Sleeps page_delay
        seconds before each follow-up page.
        """
        params = params.copy() if params else {}
        params["per_page"] = per_page
        page = 1
        yielded = 0

        while True:
            params["page"] = page
            items = await self.get(url, params=params)

            if not items:
                break

            for item in items:
                yield item
                yielded += 1
                if max_items is not None and yielded >= max_items:
                    return

            if len(items) < per_page:
                break

            page += 1
            if page_delay:
                await trio.sleep(page_delay)

    async def get_rate_limit(self) -> dict | None:
        """Get current rate limit status."""
        return await self.get("/rate_limit")
