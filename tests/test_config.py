"""Tests for configuration loading."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from braglog.config import (
    DEFAULT_JQL_TEMPLATE,
    Config,
    ConfigurationError,
    _gh_cli_token,
    load_config,
)


@pytest.fixture(autouse=True)
def no_gh_cli():
    with patch("braglog.config._gh_cli_token", return_value="") as mock:
        yield mock


class TestLoadConfig:
    def test_defaults(self, tmp_path):
        config = load_config(environ={}, config_file=tmp_path / "missing.conf")

        assert config.docs_location == ""
        assert config.repo_sync is False
        assert config.github_pr_sync_enabled is True
        assert config.jira_sync_enabled is True
        assert config.uses_default_jql()

    def test_environment(self, tmp_path):
        environ = {
            "BRAG_DOC": "~/brags",
            "BRAG_DOC_REPO_SYNC": "TRUE",
            "BRAG_DOC_GITHUB_TOKEN": "gh",
            "BRAG_DOC_GITHUB_USERNAME": "octocat",
            "BRAG_DOC_GITHUB_ORG": "acme",
            "BRAG_DOC_JIRA_SYNC_ENABLED": "no",
            "BRAG_DOC_JIRA_JQL_TEMPLATE": 'assignee = "{email}"',
        }

        config = load_config(environ=environ, config_file=tmp_path / "missing.conf")

        assert config.docs_location == "~/brags"
        assert config.repo_sync is True
        assert config.github_configured()
        assert config.jira_sync_enabled is False
        assert not config.uses_default_jql()

    def test_config_file(self, tmp_path):
        conf = tmp_path / "braglog.conf"
        conf.write_text(
            "# my settings\n"
            "docs_location = /srv/brags\n"
            'jira_url = "https://acme.atlassian.net"\n'
            "jira_email = dev@example.com  # work account\n"
            "JIRA_API_TOKEN = secret\n"
            "repo_sync = yes\n"
            "not a setting\n"
        )

        config = load_config(environ={}, config_file=conf)

        assert config.docs_location == "/srv/brags"
        assert config.jira_url == "https://acme.atlassian.net"
        assert config.jira_email == "dev@example.com"
        assert config.jira_api_token == "secret"
        assert config.repo_sync is True
        assert config.jira_configured()

    def test_environment_overrides_file(self, tmp_path):
        conf = tmp_path / "braglog.conf"
        conf.write_text("docs_location = /from/file\ngithub_org = file-org\n")

        config = load_config(environ={"BRAG_DOC": "/from/env", "BRAG_DOC_GITHUB_ORG": ""}, config_file=conf)

        assert config.docs_location == "/from/env"
        assert config.github_org == "file-org"

    def test_config_file_found_via_brag_home(self, tmp_path):
        (tmp_path / "braglog.conf").write_text("github_username = octocat\n")

        config = load_config(environ={"BRAG_HOME": str(tmp_path)})

        assert config.github_username == "octocat"

    def test_unknown_key_is_logged(self, tmp_path, caplog):
        conf = tmp_path / "braglog.conf"
        conf.write_text("colour = blue\n")

        load_config(environ={}, config_file=conf)

        assert "Ignoring unknown config key: colour" in caplog.text

    def test_gh_token_fallback(self, tmp_path, no_gh_cli):
        no_gh_cli.return_value = "from-gh"

        config = load_config(environ={}, config_file=tmp_path / "missing.conf")

        assert config.github_token == "from-gh"

    def test_gh_token_not_used_when_set(self, tmp_path, no_gh_cli):
        config = load_config(environ={"BRAG_DOC_GITHUB_TOKEN": "explicit"}, config_file=tmp_path / "x.conf")

        assert config.github_token == "explicit"
        no_gh_cli.assert_not_called()

    def test_gh_token_not_used_when_sync_disabled(self, tmp_path, no_gh_cli):
        load_config(environ={"BRAG_DOC_GITHUB_PR_SYNC_ENABLED": "false"}, config_file=tmp_path / "x.conf")
        no_gh_cli.assert_not_called()


class TestConfig:
    def test_require_docs_location(self):
        with pytest.raises(ConfigurationError, match="BRAG_DOC is not set"):
            Config().require_docs_location()

    def test_require_docs_location_expands_user(self):
        assert Config(docs_location="~/brags").require_docs_location() == Path.home() / "brags"

    def test_configured_checks(self):
        assert not Config(github_token="t", github_username="u").github_configured()
        assert not Config(jira_url="u", jira_email="e").jira_configured()
        assert Config(jira_url="u", jira_email="e", jira_api_token="t").jira_configured()

    def test_default_jql_mentions_placeholders(self):
        assert "{email}" in DEFAULT_JQL_TEMPLATE
        assert "{startDate}" in DEFAULT_JQL_TEMPLATE
        assert "{endDate}" in DEFAULT_JQL_TEMPLATE


class TestGhCliToken:
    @pytest.fixture(autouse=True)
    def no_gh_cli(self):
        # Override the module-level fixture so the real helper runs
        yield

    @patch("braglog.config.subprocess.run")
    def test_returns_token(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="gho_abc\n")
        assert _gh_cli_token() == "gho_abc"

    @patch("braglog.config.subprocess.run")
    def test_not_logged_in(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="")
        assert _gh_cli_token() == ""

    @patch("braglog.config.subprocess.run")
    def test_gh_missing(self, mock_run):
        mock_run.side_effect = FileNotFoundError("gh")
        assert _gh_cli_token() == ""

    @patch("braglog.config.subprocess.run")
    def test_gh_hangs(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="gh", timeout=10)
        assert _gh_cli_token() == ""
