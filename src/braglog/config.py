"""Configuration management for braglog.

Settings come from an optional braglog.conf file (KEY = value lines) and are
overridden by BRAG_DOC_* environment variables. The resulting Config is built
once and passed to everything that needs it.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".config" / "braglog"
CONFIG_FILENAME = "braglog.conf"

DEFAULT_JIRA_ENGINEER_FIELD = "Engineer[User Picker (single user)]"

DEFAULT_JQL_TEMPLATE = """
(
    assignee = "{email}"
    OR
    "Engineer[User Picker (single user)]" = "{email}"
    OR
    assignee WAS "{email}" DURING ("{startDate}", "{endDate}")
)
AND status was "In Progress"
AND statusCategory IN (Done)
AND "Last Transition Occurred[Date]" >= "{startDate}"
AND "Last Transition Occurred[Date]" <= "{endDate}"
"""

# Config field -> environment variable
ENV_VARS = {
    "docs_location": "BRAG_DOC",
    "repo_sync": "BRAG_DOC_REPO_SYNC",
    "github_pr_sync_enabled": "BRAG_DOC_GITHUB_PR_SYNC_ENABLED",
    "github_token": "BRAG_DOC_GITHUB_TOKEN",
    "github_username": "BRAG_DOC_GITHUB_USERNAME",
    "github_org": "BRAG_DOC_GITHUB_ORG",
    "jira_sync_enabled": "BRAG_DOC_JIRA_SYNC_ENABLED",
    "jira_url": "BRAG_DOC_JIRA_URL",
    "jira_email": "BRAG_DOC_JIRA_EMAIL",
    "jira_api_token": "BRAG_DOC_JIRA_API_TOKEN",
    "jira_jql_template": "BRAG_DOC_JIRA_JQL_TEMPLATE",
    "jira_engineer_field": "BRAG_DOC_JIRA_ENGINEER_FIELD",
}

_TRUE_VALUES = {"true", "1", "yes", "on"}


class ConfigurationError(Exception):
    """Raised when required configuration is missing."""

    pass


@dataclass
class Config:
    """braglog configuration."""

    docs_location: str = ""
    repo_sync: bool = False
    # GitHub pull request sync
    github_pr_sync_enabled: bool = True
    github_token: str = ""
    github_username: str = ""
    github_org: str = ""
    # Jira issue sync
    jira_sync_enabled: bool = True
    jira_url: str = ""
    jira_email: str = ""
    jira_api_token: str = ""
    jira_jql_template: str = DEFAULT_JQL_TEMPLATE
    jira_engineer_field: str = DEFAULT_JIRA_ENGINEER_FIELD

    def github_configured(self) -> bool:
        return bool(self.github_token and self.github_username and self.github_org)

    def jira_configured(self) -> bool:
        return bool(self.jira_url and self.jira_email and self.jira_api_token)

    def uses_default_jql(self) -> bool:
        return self.jira_jql_template == DEFAULT_JQL_TEMPLATE

    def require_docs_location(self) -> Path:
        """Journal directory, or ConfigurationError if unset."""
        if not self.docs_location:
            raise ConfigurationError(
                "BRAG_DOC is not set. Point it at your brag document git repository."
            )
        return Path(self.docs_location).expanduser()


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


def _unquote(value: str) -> str:
    """Strip matching quotes, or an inline # comment from unquoted values."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _apply(config: Config, key: str, value: str) -> None:
    match key:
        case "repo_sync" | "github_pr_sync_enabled" | "jira_sync_enabled":
            setattr(config, key, _parse_bool(value))
        case _ if key in {f.name for f in fields(Config)}:
            setattr(config, key, value)
        case _:
            logger.warning(f"Ignoring unknown config key: {key}")


def _read_config_file(path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key.strip().lower()] = _unquote(value.strip())
    return values


def _gh_cli_token() -> str:
    """Token from 'gh auth token', or empty string if gh is unavailable."""
    try:
        proc = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=10)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return ""
    if proc.returncode != 0:
        return ""
    return proc.stdout.strip()


def load_config(environ: dict[str, str] | None = None, config_file: Path | None = None) -> Config:
    """Load configuration from braglog.conf, then environment overrides."""
    environ = os.environ if environ is None else environ
    config = Config()

    if config_file is None:
        home = Path(environ.get("BRAG_HOME", DEFAULT_HOME)).expanduser()
        config_file = home / CONFIG_FILENAME

    if config_file.exists():
        for key, value in _read_config_file(config_file).items():
            _apply(config, key, value)

    for key, env_var in ENV_VARS.items():
        value = environ.get(env_var)
        if value is not None and value != "":
            _apply(config, key, value)

    if config.github_pr_sync_enabled and not config.github_token:
        config.github_token = _gh_cli_token()

    return config
