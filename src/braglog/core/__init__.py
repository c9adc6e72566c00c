"""Functional core - pure business logic with no I/O."""

from .entries import BragEntry, DateRange
from .timeframe import (
    Custom,
    Predefined,
    QuarterYear,
    Timeframe,
    TimeframeSpec,
    parse_timeframe,
    quarter_range,
    resolve,
)
from .records import ChangeRecord, JiraIssue, PullRequest, extract_ticket_keys
from .involvement import is_user_involved
from .journal import format_partition, parse_partition

__all__ = [
    # Entries
    "BragEntry",
    "DateRange",
    # Timeframes
    "Custom",
    "Predefined",
    "QuarterYear",
    "Timeframe",
    "TimeframeSpec",
    "parse_timeframe",
    "quarter_range",
    "resolve",
    # Records
    "ChangeRecord",
    "JiraIssue",
    "PullRequest",
    "extract_ticket_keys",
    # Involvement
    "is_user_involved",
    # Journal format
    "format_partition",
    "parse_partition",
]
