"""GitHub API adapter - HTTP client for merged pull request search."""

import logging

import requests

from braglog.config import Config
from braglog.core.entries import DateRange
from braglog.core.records import PullRequest

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"
PAGE_SIZE = 100
MAX_PAGES = 10  # search API caps results at 1000


class GitHubAPIError(RuntimeError):
    """Raised when the GitHub API returns an error response."""

    pass


class GitHubAdapter:
    """
    GitHub search API adapter.

    Implements PullRequestSource protocol. No business logic - just I/O.
    """

    def __init__(self, config: Config, session: requests.Session | None = None, timeout: int = 30):
        self.config = config
        self.timeout = timeout
        self._session = session or requests.Session()

    def _search(self, query: str, page: int) -> dict:
        """Run one page of an issue search."""
        resp = self._session.get(
            f"{API_BASE}/search/issues",
            headers={
                "Authorization": f"Bearer {self.config.github_token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            },
            params={
                "q": query,
                "sort": "created",
                "order": "desc",
                "per_page": PAGE_SIZE,
                "page": page,
            },
            timeout=self.timeout,
        )
        if not resp.ok:
            logger.error(f"GitHub API error: HTTP {resp.status_code}: {resp.text}")
            try:
                message = resp.json().get("message") or f"HTTP {resp.status_code}"
            except ValueError:
                message = f"HTTP {resp.status_code}"
            raise GitHubAPIError(f"GitHub API error: {message}")
        return resp.json()

    def fetch_merged_pull_requests(
        self,
        organization: str,
        author: str,
        date_range: DateRange,
    ) -> list[PullRequest]:
        """Fetch pull requests by the author merged within the range."""
        query = (
            f"is:pr is:merged org:{organization} author:{author} archived:false "
            f"merged:{date_range.start.isoformat()}..{date_range.end.isoformat()}"
        )
        logger.info(f"Search query: {query}")

        items: list[dict] = []
        for page in range(1, MAX_PAGES + 1):
            data = self._search(query, page)
            page_items = data.get("items", [])
            logger.info(f"Page {page}: found {len(page_items)} PRs (total: {data.get('total_count')})")
            if not page_items:
                break
            items.extend(page_items)
            if len(page_items) < PAGE_SIZE or len(items) >= data.get("total_count", 0):
                break
        else:
            logger.warning(f"Reached search pagination limit ({MAX_PAGES * PAGE_SIZE} results max)")

        pull_requests = [
            PullRequest.from_api(item)
            for item in items
            if (item.get("pull_request") or {}).get("merged_at")
        ]
        return sorted(pull_requests, key=lambda pr: pr.merged_at)
