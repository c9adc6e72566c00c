"""External work records (pull requests, Jira issues) - no I/O dependencies."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

JIRA_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

_JIRA_KEY_PATTERN = re.compile(r"\b([A-Z][A-Z_0-9]+-[1-9]\d*)\b")


def parse_jira_datetime(value: str) -> datetime:
    """Parse a Jira timestamp like 2025-01-10T09:00:00.000+0000 (offset-aware)."""
    return datetime.strptime(value, JIRA_DATETIME_FORMAT)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC, truncated to seconds."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=0)


@dataclass(frozen=True)
class ChangeRecord:
    """One field transition from a ticket's changelog."""

    timestamp: datetime
    field: str
    old_value: str | None
    new_value: str | None

    @classmethod
    def from_history(cls, history: dict) -> list["ChangeRecord"]:
        """
        Build records from one Jira changelog history entry.

        Status changes carry status names, assignee changes carry account ids.
        Other fields are ignored.
        """
        timestamp = parse_jira_datetime(history["created"])
        records = []
        for item in history.get("items", []):
            match item.get("field"):
                case "status":
                    records.append(cls(timestamp, "status", item.get("fromString"), item.get("toString")))
                case "assignee":
                    records.append(cls(timestamp, "assignee", item.get("from"), item.get("to")))
        return records


@dataclass
class PullRequest:
    """A merged pull request."""

    number: int
    title: str
    url: str
    merged_at: datetime
    description: str | None = None

    def to_entry_content(self) -> str:
        return f"[PR #{self.number}] {self.title} - {self.url}"

    @classmethod
    def from_api(cls, data: dict) -> "PullRequest":
        """Create PullRequest from a GitHub search API item."""
        merged_at = data["pull_request"]["merged_at"].replace("Z", "+00:00")
        return cls(
            number=data["number"],
            title=data["title"],
            url=data["html_url"],
            merged_at=to_naive_utc(datetime.fromisoformat(merged_at)),
            description=data.get("body"),
        )


@dataclass
class JiraIssue:
    """A resolved Jira issue plus what is needed to judge involvement."""

    key: str
    title: str
    url: str
    resolved_at: datetime
    status: str | None = None
    issue_type: str | None = None
    assignee_email: str | None = None
    engineer_email: str | None = None
    changelog: list[ChangeRecord] = field(default_factory=list)

    def to_entry_content(self) -> str:
        content = f"[{self.key}] {self.title} - {self.url}"
        metadata = [m for m in (self.issue_type, self.status) if m and m.strip()]
        if metadata:
            content += f" ({', '.join(metadata)})"
        return content

    @classmethod
    def from_api(cls, data: dict, base_url: str, engineer_field: str = "") -> "JiraIssue":
        """
        Create JiraIssue from a Jira REST API issue (with expanded changelog).

        resolved_at is the latest transition into the current status, falling
        back to resolutiondate, then updated.
        """
        fields = data["fields"]
        status = (fields.get("status") or {}).get("name")
        histories = sorted(
            (data.get("changelog") or {}).get("histories", []),
            key=lambda h: parse_jira_datetime(h["created"]),
        )

        transition_date = None
        for history in reversed(histories):
            if any(
                item.get("field") == "status" and item.get("toString") == status
                for item in history.get("items", [])
            ):
                transition_date = history["created"]
                break

        date_string = transition_date or fields.get("resolutiondate") or fields["updated"]

        changelog = []
        for history in histories:
            changelog.extend(ChangeRecord.from_history(history))

        engineer = fields.get(engineer_field) if engineer_field else None

        return cls(
            key=data["key"],
            title=fields["summary"],
            url=f"{base_url.rstrip('/')}/browse/{data['key']}",
            resolved_at=to_naive_utc(parse_jira_datetime(date_string)),
            status=status,
            issue_type=(fields.get("issuetype") or {}).get("name"),
            assignee_email=(fields.get("assignee") or {}).get("emailAddress"),
            engineer_email=engineer.get("emailAddress") if isinstance(engineer, dict) else None,
            changelog=changelog,
        )


def extract_ticket_keys(*texts: str | None) -> set[str]:
    """Find Jira keys (e.g. PROJ-123) mentioned in any of the given texts."""
    keys: set[str] = set()
    for text in texts:
        if text:
            keys.update(_JIRA_KEY_PATTERN.findall(text))
    return keys
