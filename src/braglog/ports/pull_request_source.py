"""Code review source interface."""

from typing import Protocol

from braglog.core.entries import DateRange
from braglog.core.records import PullRequest


class PullRequestSource(Protocol):
    """Interface for fetching merged pull requests from any code host."""

    def fetch_merged_pull_requests(
        self,
        organization: str,
        author: str,
        date_range: DateRange,
    ) -> list[PullRequest]:
        """Fetch pull requests by the author merged within the range."""
        ...
