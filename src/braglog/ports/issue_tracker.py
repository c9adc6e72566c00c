"""Issue tracker interface."""

from typing import Protocol

from braglog.core.entries import DateRange
from braglog.core.records import JiraIssue


class IssueTracker(Protocol):
    """Interface for fetching resolved issues and user identities."""

    def find_account_id(self, email: str) -> str | None:
        """Stable account id for an email, or None if it cannot be found."""
        ...

    def fetch_resolved_issues(self, email: str, date_range: DateRange) -> list[JiraIssue]:
        """Fetch candidate issues resolved within the range, with changelogs."""
        ...

    def fetch_issues_by_keys(self, keys: set[str]) -> list[JiraIssue]:
        """Fetch specific issues by key."""
        ...
