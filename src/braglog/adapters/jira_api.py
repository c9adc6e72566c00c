"""Jira Cloud API adapter - HTTP client for resolved issue search."""

import logging
import re

import requests

from braglog.config import Config
from braglog.core.entries import DateRange
from braglog.core.records import JiraIssue

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class JiraAPIError(RuntimeError):
    """Raised when the Jira API returns an error response."""

    pass


def build_jql(template: str, email: str, date_range: DateRange) -> str:
    """Fill a JQL template and collapse it onto one line."""
    jql = (
        template.replace("{email}", email)
        .replace("{startDate}", date_range.start.isoformat())
        .replace("{endDate}", date_range.end.isoformat())
    )
    return re.sub(r"\s+", " ", jql).strip()


class JiraAdapter:
    """
    Jira REST API adapter.

    Implements IssueTracker protocol. Handles basic auth and nextPageToken
    pagination. No business logic - just I/O.
    """

    def __init__(self, config: Config, session: requests.Session | None = None, timeout: int = 30):
        self.config = config
        self.base_url = config.jira_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.auth = (config.jira_email, config.jira_api_token)
        self._session.headers.update({"Accept": "application/json"})

    def _api_request(self, endpoint: str, params: dict) -> dict | list:
        """Make authenticated API request."""
        resp = self._session.get(f"{self.base_url}{endpoint}", params=params, timeout=self.timeout)
        if not resp.ok:
            logger.error(f"Jira API error: HTTP {resp.status_code}: {resp.text}")
            raise JiraAPIError(f"Jira API error: {self._error_message(resp)}")
        return resp.json()

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            data = resp.json()
        except ValueError:
            return f"HTTP {resp.status_code} - Could not parse error response"
        if data.get("errorMessages"):
            return ", ".join(data["errorMessages"])
        if data.get("errors"):
            return ", ".join(f"{k}: {v}" for k, v in data["errors"].items())
        return f"HTTP {resp.status_code}"

    def find_account_id(self, email: str) -> str | None:
        """Look up the account id for an email. Failures are logged, not raised."""
        try:
            users = self._api_request("/rest/api/3/user/search", {"query": email})
        except (JiraAPIError, requests.RequestException) as e:
            logger.warning(f"Could not fetch account id for {email}: {e}")
            return None
        return next((u.get("accountId") for u in users if u.get("emailAddress") == email), None)

    def _search(self, jql: str) -> list[JiraIssue]:
        issues: list[JiraIssue] = []
        next_page_token = None

        while True:
            params = {
                "jql": jql,
                "maxResults": PAGE_SIZE,
                "fields": "*navigable",
                "expand": "changelog",
            }
            if next_page_token:
                params["nextPageToken"] = next_page_token

            data = self._api_request("/rest/api/3/search/jql", params)
            page = data.get("issues", [])
            logger.info(f"Fetched {len(page)} issues (total so far: {len(issues) + len(page)})")
            if not page:
                break

            issues.extend(
                JiraIssue.from_api(item, self.base_url, self.config.jira_engineer_field)
                for item in page
            )

            next_page_token = data.get("nextPageToken")
            if not next_page_token:
                break

        return issues

    def fetch_resolved_issues(self, email: str, date_range: DateRange) -> list[JiraIssue]:
        """Fetch candidate issues resolved within the range, with changelogs."""
        jql = build_jql(self.config.jira_jql_template, email, date_range)
        logger.info(f"Fetching resolved Jira issues for {email} from {date_range.start} to {date_range.end}")
        logger.debug(f"JQL: {jql}")
        return self._search(jql)

    def fetch_issues_by_keys(self, keys: set[str]) -> list[JiraIssue]:
        """Fetch specific issues by key."""
        if not keys:
            return []
        jql = f"key in ({', '.join(sorted(keys))})"
        return self._search(jql)
