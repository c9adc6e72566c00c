"""Adapters - I/O implementations of ports."""

from .file_journal import MarkdownJournalStore
from .git_cli import GitVersionControl, NoOpVersionControl
from .github_api import GitHubAdapter, GitHubAPIError
from .jira_api import JiraAdapter, JiraAPIError

__all__ = [
    "MarkdownJournalStore",
    "GitVersionControl",
    "NoOpVersionControl",
    "GitHubAdapter",
    "GitHubAPIError",
    "JiraAdapter",
    "JiraAPIError",
]
