"""Decide whether a user drove a ticket during a date range.

Jira only exposes the current assignee, so "who was working on this while it
was In Progress" is reconstructed by replaying the changelog.

Pure function - no I/O.
"""

from datetime import datetime
from itertools import groupby

from .entries import DateRange
from .records import ChangeRecord, JiraIssue

IN_PROGRESS = "in progress"


def _collapse(
    changelog: list[ChangeRecord],
) -> list[tuple[datetime, bool, str | None, bool, str | None]]:
    """
    Merge records sharing a timestamp into one simultaneous step.

    Each step is (timestamp, status_changed, status, assignee_changed, assignee).
    When one step changes the same field twice, the later record wins.
    """
    steps = []
    ordered = sorted(changelog, key=lambda r: r.timestamp)
    for timestamp, records in groupby(ordered, key=lambda r: r.timestamp):
        status = assignee = None
        status_changed = assignee_changed = False
        for record in records:
            if record.field == "status":
                status, status_changed = record.new_value, True
            elif record.field == "assignee":
                assignee, assignee_changed = record.new_value, True
        if status_changed or assignee_changed:
            steps.append((timestamp, status_changed, status, assignee_changed, assignee))
    return steps


def _is_qualifying(status: str | None, assignee_id: str | None, account_id: str) -> bool:
    return status is not None and status.casefold() == IN_PROGRESS and assignee_id == account_id


def is_user_involved(
    issue: JiraIssue,
    email: str,
    account_id: str | None,
    date_range: DateRange,
) -> bool:
    """
    True if the user was assignee while the issue was In Progress during the range.

    Current assignee (or engineer) matching the email is accepted outright,
    which covers tickets assigned at creation with no changelog record.
    Without an account id the changelog cannot be matched to the user, so
    the answer is False.
    """
    if issue.assignee_email == email or issue.engineer_email == email:
        return True

    if account_id is None:
        return False

    status: str | None = None
    assignee_id: str | None = None
    period_start: datetime | None = None

    for timestamp, status_changed, new_status, assignee_changed, new_assignee in _collapse(issue.changelog):
        was_qualifying = _is_qualifying(status, assignee_id, account_id)

        if status_changed:
            status = new_status
        if assignee_changed:
            assignee_id = new_assignee

        is_qualifying = _is_qualifying(status, assignee_id, account_id)

        if not was_qualifying and is_qualifying:
            period_start = timestamp
        elif was_qualifying and not is_qualifying and period_start is not None:
            start, end = period_start.date(), timestamp.date()
            if start <= date_range.end and end >= date_range.start:
                return True
            period_start = None

    # Still in a qualifying period: open-ended
    if period_start is not None and _is_qualifying(status, assignee_id, account_id):
        return period_start.date() <= date_range.end

    return False
