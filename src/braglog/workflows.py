"""Use cases shared by the CLI: init, add, review, and the two sync flows.

Each use case gets its collaborators through the constructor; the get_* and
build_* functions at the bottom wire them from a Config.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from .adapters.file_journal import MarkdownJournalStore
from .adapters.git_cli import GitVersionControl, NoOpVersionControl
from .adapters.github_api import GitHubAdapter
from .adapters.jira_api import JiraAdapter
from .config import Config
from .core.entries import BragEntry, DateRange
from .core.involvement import is_user_involved
from .core.records import JiraIssue, PullRequest, extract_ticket_keys
from .core.timeframe import TimeframeSpec, resolve
from .ports import IssueTracker, JournalStore, NotInitializedError, PullRequestSource, VersionControl

logger = logging.getLogger(__name__)

MAX_COMMIT_MESSAGE_LENGTH = 50


# ============== Sync Results ==============


@dataclass(frozen=True)
class Disabled:
    """Sync is switched off in config."""


@dataclass(frozen=True)
class NotConfigured:
    """Sync is on but credentials or identifiers are missing."""


@dataclass(frozen=True)
class PrintOnly:
    items: list = field(default_factory=list)


@dataclass(frozen=True)
class ReadyToSync:
    """Issues found; waiting for the user to pick which ones to write."""

    issues: list[JiraIssue] = field(default_factory=list)


@dataclass(frozen=True)
class Synced:
    added_count: int
    skipped_count: int


PullRequestSyncResult = Disabled | NotConfigured | PrintOnly | Synced
JiraIssueSyncResult = Disabled | NotConfigured | PrintOnly | ReadyToSync | Synced


def _require_initialized(store: JournalStore) -> None:
    if not store.is_initialized():
        raise NotInitializedError("Repository not initialized. Run 'brag init' first")


def _write_entries(store: JournalStore, entries: list[BragEntry]) -> Synced:
    """Save entries one by one, counting content duplicates as skipped."""
    added = skipped = 0
    for entry in entries:
        if store.save(entry):
            added += 1
        else:
            skipped += 1
    return Synced(added, skipped)


# ============== Journal Use Cases ==============


def init_repository(store: JournalStore) -> None:
    store.initialize()


class AddBrag:
    """Add a manual entry, then commit it when repo sync is on."""

    def __init__(self, store: JournalStore, version_control: VersionControl, docs_location: Path):
        self.store = store
        self.version_control = version_control
        self.docs_location = docs_location

    def run(self, content: str, now: datetime | None = None) -> bool:
        """Returns False if the same text is already in this year's journal."""
        _require_initialized(self.store)

        content = content.strip()
        timestamp = (now or datetime.now()).replace(microsecond=0)
        entry = BragEntry(timestamp, content)

        if not self.store.save(entry):
            return False

        self.version_control.commit_and_push(self.docs_location, self._commit_message(content))
        return True

    @staticmethod
    def _commit_message(content: str) -> str:
        if len(content) > MAX_COMMIT_MESSAGE_LENGTH:
            content = content[:MAX_COMMIT_MESSAGE_LENGTH] + "..."
        return f"Add brag: {content}"


def get_brags(store: JournalStore, spec: TimeframeSpec, today: date | None = None) -> dict[date, list[BragEntry]]:
    """Entries in the timeframe, grouped by date (ascending)."""
    _require_initialized(store)

    date_range = resolve(spec, today)
    grouped: dict[date, list[BragEntry]] = {}
    for entry in store.find_by_date_range(date_range):
        grouped.setdefault(entry.date, []).append(entry)
    return grouped


# ============== Sync Use Cases ==============


class SyncPullRequests:
    def __init__(self, source: PullRequestSource, store: JournalStore, config: Config):
        self.source = source
        self.store = store
        self.config = config

    def run(self, spec: TimeframeSpec, print_only: bool = False, today: date | None = None) -> PullRequestSyncResult:
        if not self.config.github_pr_sync_enabled:
            logger.info("GitHub PR sync is disabled")
            return Disabled()

        if not self.config.github_configured():
            logger.warning("GitHub PR sync is enabled but not configured")
            return NotConfigured()

        if not print_only:
            _require_initialized(self.store)

        date_range = resolve(spec, today)
        logger.info(f"Syncing pull requests for {date_range.start}..{date_range.end}, print_only: {print_only}")

        fetched = self.source.fetch_merged_pull_requests(
            self.config.github_org, self.config.github_username, date_range
        )
        by_number: dict[int, PullRequest] = {}
        for pr in fetched:
            by_number.setdefault(pr.number, pr)
        pull_requests = sorted(by_number.values(), key=lambda pr: pr.merged_at)
        logger.info(f"Found {len(pull_requests)} merged pull requests")

        if print_only:
            return PrintOnly(pull_requests)

        result = _write_entries(
            self.store,
            [BragEntry(pr.merged_at, pr.to_entry_content()) for pr in pull_requests],
        )
        logger.info(f"Added {result.added_count} pull requests, skipped {result.skipped_count} duplicates")
        return result


class SyncJiraIssues:
    """
    Collect resolved Jira issues the user worked on.

    Two fetches run concurrently: Jira (account id + JQL search) and GitHub
    (merged PRs, mined for ticket keys the JQL search missed). Both are joined
    before any merging happens.
    """

    def __init__(
        self,
        tracker: IssueTracker,
        store: JournalStore,
        config: Config,
        pull_request_source: PullRequestSource | None = None,
    ):
        self.tracker = tracker
        self.store = store
        self.config = config
        self.pull_request_source = pull_request_source

    def run(self, spec: TimeframeSpec, print_only: bool = False, today: date | None = None) -> JiraIssueSyncResult:
        if not self.config.jira_sync_enabled:
            logger.info("Jira issue sync is disabled")
            return Disabled()

        if not self.config.jira_configured():
            logger.warning("Jira issue sync is enabled but not configured")
            return NotConfigured()

        date_range = resolve(spec, today)
        logger.info(f"Syncing Jira issues for {date_range.start}..{date_range.end}, print_only: {print_only}")

        with ThreadPoolExecutor(max_workers=2) as pool:
            issues_future = pool.submit(self._fetch_involved_issues, date_range)
            pull_requests_future = pool.submit(self._fetch_pull_requests, date_range)
        jql_issues = issues_future.result()
        pull_requests = pull_requests_future.result()

        pr_issues = self._issues_from_pull_requests(pull_requests, jql_issues)

        by_key: dict[str, JiraIssue] = {issue.key: issue for issue in jql_issues}
        for issue in pr_issues:
            by_key.setdefault(issue.key, issue)
        issues = sorted(by_key.values(), key=lambda i: i.resolved_at)
        logger.info(f"Total Jira issues after merge: {len(issues)}")

        if print_only:
            return PrintOnly(issues)
        return ReadyToSync(issues)

    def sync_selected(self, issues: list[JiraIssue]) -> Synced:
        """Write the chosen issues to the journal."""
        _require_initialized(self.store)
        result = _write_entries(
            self.store,
            [BragEntry(issue.resolved_at, issue.to_entry_content()) for issue in issues],
        )
        logger.info(f"Added {result.added_count} Jira issues, skipped {result.skipped_count} duplicates")
        return result

    def _fetch_involved_issues(self, date_range: DateRange) -> list[JiraIssue]:
        email = self.config.jira_email
        account_id = self.tracker.find_account_id(email)
        logger.info(f"User account id for {email}: {account_id}")

        issues = self.tracker.fetch_resolved_issues(email, date_range)
        logger.info(f"Found {len(issues)} resolved Jira issues from JQL")

        # A custom JQL template is trusted as-is
        if not self.config.uses_default_jql():
            logger.info("Using custom JQL template - skipping involvement filtering")
            return issues

        involved = []
        for issue in issues:
            if is_user_involved(issue, email, account_id, date_range):
                involved.append(issue)
            else:
                logger.info(f"Filtered out: [{issue.key}] {issue.title}\n  {issue.url}")
        return involved

    def _fetch_pull_requests(self, date_range: DateRange) -> list[PullRequest]:
        if self.pull_request_source is None:
            return []
        if not self.config.github_pr_sync_enabled or not self.config.github_configured():
            return []
        return self.pull_request_source.fetch_merged_pull_requests(
            self.config.github_org, self.config.github_username, date_range
        )

    def _issues_from_pull_requests(
        self,
        pull_requests: list[PullRequest],
        known: list[JiraIssue],
    ) -> list[JiraIssue]:
        keys: set[str] = set()
        for pr in pull_requests:
            keys |= extract_ticket_keys(pr.title, pr.description)
        logger.info(f"Extracted {len(keys)} unique Jira keys from {len(pull_requests)} PRs")

        new_keys = keys - {issue.key for issue in known}
        if not new_keys:
            return []

        logger.info(f"Fetching {len(new_keys)} additional Jira issues: {sorted(new_keys)}")
        return self.tracker.fetch_issues_by_keys(new_keys)


# ============== Wiring ==============


def get_journal(config: Config) -> MarkdownJournalStore:
    """Resolve journal store from config."""
    return MarkdownJournalStore(config.require_docs_location())


def get_version_control(config: Config) -> VersionControl:
    if config.repo_sync:
        return GitVersionControl(config.require_docs_location())
    return NoOpVersionControl()


def build_add_brag(config: Config) -> AddBrag:
    return AddBrag(get_journal(config), get_version_control(config), config.require_docs_location())


def build_sync_pull_requests(config: Config) -> SyncPullRequests:
    return SyncPullRequests(GitHubAdapter(config), get_journal(config), config)


def build_sync_jira_issues(config: Config) -> SyncJiraIssues:
    return SyncJiraIssues(JiraAdapter(config), get_journal(config), config, GitHubAdapter(config))
