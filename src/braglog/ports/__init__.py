"""Ports - interfaces/protocols for external dependencies."""

from .journal_store import InitializationError, JournalStore, NotInitializedError
from .pull_request_source import PullRequestSource
from .issue_tracker import IssueTracker
from .version_control import VersionControl

__all__ = [
    "JournalStore",
    "NotInitializedError",
    "InitializationError",
    "PullRequestSource",
    "IssueTracker",
    "VersionControl",
]
