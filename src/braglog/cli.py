"""braglog CLI - keep a brag document of your accomplishments."""

import logging
import sys

import click
import requests

from .adapters.github_api import GitHubAPIError
from .adapters.jira_api import JiraAPIError
from .config import ConfigurationError, load_config
from .core.records import JiraIssue, PullRequest
from .core.timeframe import VALID_TIMEFRAMES, TimeframeSpec, parse_timeframe
from .ports import InitializationError, NotInitializedError
from .workflows import (
    Disabled,
    NotConfigured,
    PrintOnly,
    ReadyToSync,
    Synced,
    build_add_brag,
    build_sync_jira_issues,
    build_sync_pull_requests,
    get_brags,
    get_journal,
    init_repository,
)

SEPARATOR = "=" * 80

# Errors that should end the command with a message rather than a traceback
EXPECTED_ERRORS = (
    ConfigurationError,
    NotInitializedError,
    InitializationError,
    GitHubAPIError,
    JiraAPIError,
    requests.RequestException,
)

GITHUB_NOT_CONFIGURED = """\
GitHub PR sync is enabled but not configured.

Required environment variables:
  BRAG_DOC_GITHUB_TOKEN (or use 'gh auth login')
  BRAG_DOC_GITHUB_USERNAME
  BRAG_DOC_GITHUB_ORG

To disable this feature, set:
  BRAG_DOC_GITHUB_PR_SYNC_ENABLED=false"""

JIRA_NOT_CONFIGURED = """\
Jira issue sync is enabled but not configured.

Required environment variables:
  BRAG_DOC_JIRA_URL (e.g., https://your-company.atlassian.net)
  BRAG_DOC_JIRA_EMAIL
  BRAG_DOC_JIRA_API_TOKEN

To disable this feature, set:
  BRAG_DOC_JIRA_SYNC_ENABLED=false"""


def _timeframe(ctx, param, value: tuple[str, ...]) -> TimeframeSpec:
    """Join the words back together so `q1 2025` works unquoted."""
    spec = parse_timeframe(" ".join(value))
    if spec is None:
        raise click.BadParameter(f"Unknown timeframe '{' '.join(value)}'. Valid: {VALID_TIMEFRAMES}")
    return spec


def _fail(e: Exception) -> None:
    logging.getLogger(__name__).debug("Command failed", exc_info=True)
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _present_sync_result(result: Synced, item: str) -> None:
    added, skipped = result.added_count, result.skipped_count
    if added == 0 and skipped == 0:
        click.echo(f"No {item}s found to add to brag document")
    elif skipped == 0:
        click.echo(f"Successfully added {_plural(added, item)} to brag document")
    elif added == 0:
        click.echo(f"All {_plural(skipped, item)} already in brag document (skipped duplicates)")
    else:
        click.echo(
            f"Successfully added {_plural(added, item)} to brag document "
            f"({_plural(skipped, 'duplicate')} skipped)"
        )


def _present_issue_list(issues: list[JiraIssue], url_only: bool) -> None:
    click.echo()
    click.echo("Resolved Jira Issues:")
    click.echo(SEPARATOR)
    for issue in issues:
        if url_only:
            click.echo(issue.url)
        else:
            metadata = [m for m in (issue.issue_type, issue.status) if m and m.strip()]
            suffix = f" ({', '.join(metadata)})" if metadata else ""
            click.echo(f"[{issue.key}] {issue.title}{suffix}")
            click.echo(f"  {issue.url}")
    click.echo(SEPARATOR)
    click.echo()
    click.echo(f"Total: {len(issues)} resolved Jira issues")
    click.echo()


def _present_pull_request_list(pull_requests: list[PullRequest]) -> None:
    if not pull_requests:
        click.echo("No merged pull requests found")
        return
    click.echo()
    click.echo("Merged Pull Requests:")
    click.echo(SEPARATOR)
    for pr in pull_requests:
        click.echo(pr.url)
    click.echo(SEPARATOR)
    click.echo()
    click.echo(f"Total: {len(pull_requests)} merged pull requests")


@click.group()
@click.version_option(package_name="braglog")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """braglog - a record of your professional accomplishments."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


@main.command()
def init():
    """Initialize the brag document directory (must be a git repository)."""
    try:
        init_repository(get_journal(load_config()))
    except EXPECTED_ERRORS as e:
        _fail(e)
    click.echo("Initialized bragging document directory")


@main.command()
@click.argument("text", nargs=-1)
@click.option("--comment", "-c", default=None, help="Entry text (alternative to positional TEXT)")
def add(text: tuple[str, ...], comment: str | None):
    """Add an accomplishment to today's journal."""
    content = (comment or " ".join(text)).strip()
    if not content:
        raise click.UsageError("No comment provided")
    if "\n" in content or "\r" in content:
        raise click.UsageError("Entries must be a single line")

    try:
        added = build_add_brag(load_config()).run(content)
    except EXPECTED_ERRORS as e:
        _fail(e)

    if added:
        click.echo(f"Added brag: {content}")
    else:
        click.echo(f"Already in brag document: {content}")


@main.command()
@click.argument("timeframe", nargs=-1, required=True, callback=_timeframe)
def about(timeframe: TimeframeSpec):
    """Show accomplishments for a TIMEFRAME (e.g. last-week, q1 2025)."""
    try:
        brags = get_brags(get_journal(load_config()), timeframe)
    except EXPECTED_ERRORS as e:
        _fail(e)

    if not brags:
        click.echo("No brags found in this time period.")
        return

    click.echo()
    for entry_date, entries in brags.items():
        click.echo(entry_date.isoformat())
        for entry in entries:
            click.echo(f"  * {entry.timestamp.strftime('%H:%M:%S')} {entry.content}")
        click.echo()


@main.command("sync-prs")
@click.argument("timeframe", nargs=-1, required=True, callback=_timeframe)
@click.option("--print-only", is_flag=True, help="List PR URLs without writing them")
def sync_prs(timeframe: TimeframeSpec, print_only: bool):
    """Add merged GitHub pull requests from a TIMEFRAME."""
    try:
        result = build_sync_pull_requests(load_config()).run(timeframe, print_only)
    except EXPECTED_ERRORS as e:
        _fail(e)

    match result:
        case Disabled():
            click.echo("GitHub PR sync is disabled")
        case NotConfigured():
            click.echo(GITHUB_NOT_CONFIGURED)
        case PrintOnly(items=pull_requests):
            _present_pull_request_list(pull_requests)
        case Synced():
            _present_sync_result(result, "merged pull request")


@main.command("sync-jira")
@click.argument("timeframe", nargs=-1, required=True, callback=_timeframe)
@click.option("--print-only", is_flag=True, help="List issue URLs without writing them")
def sync_jira(timeframe: TimeframeSpec, print_only: bool):
    """Add resolved Jira issues you worked on during a TIMEFRAME."""
    try:
        use_case = build_sync_jira_issues(load_config())
        result = use_case.run(timeframe, print_only)
    except EXPECTED_ERRORS as e:
        _fail(e)

    match result:
        case Disabled():
            click.echo("Jira issue sync is disabled")
        case NotConfigured():
            click.echo(JIRA_NOT_CONFIGURED)
        case PrintOnly(items=issues):
            _present_issue_list(issues, url_only=True)
        case ReadyToSync(issues=issues):
            selected = _select_issues(issues)
            if not selected:
                return
            try:
                synced = use_case.sync_selected(selected)
            except EXPECTED_ERRORS as e:
                _fail(e)
            click.echo()
            _present_sync_result(synced, "Jira issue")


def _select_issues(issues: list[JiraIssue]) -> list[JiraIssue]:
    """Show issues and let the user skip some by key."""
    if not issues:
        click.echo("No resolved Jira issues found to add to brag document")
        return []

    _present_issue_list(issues, url_only=False)
    answer = click.prompt(
        "Enter issue keys to skip (comma-separated), or press Enter to add all",
        default="",
        show_default=False,
    )
    skip = {key.strip().upper() for key in answer.split(",") if key.strip()}
    selected = [issue for issue in issues if issue.key not in skip]

    if not selected:
        click.echo("All issues skipped. No issues added to brag document.")
    return selected
