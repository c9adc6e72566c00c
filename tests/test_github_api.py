"""Tests for the GitHub API adapter."""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from braglog.adapters.github_api import API_VERSION, PAGE_SIZE, GitHubAdapter, GitHubAPIError
from braglog.config import Config
from braglog.core.entries import DateRange

RANGE = DateRange(date(2025, 1, 1), date(2025, 1, 31))


def api_item(number, merged_at="2025-01-10T12:00:00Z", title="Change"):
    return {
        "number": number,
        "title": title,
        "html_url": f"https://github.com/acme/api/pull/{number}",
        "body": None,
        "pull_request": {"merged_at": merged_at},
    }


def response(payload, status=200):
    resp = MagicMock(status_code=status, ok=200 <= status < 300, text=str(payload))
    resp.json.return_value = payload
    return resp


@pytest.fixture
def config():
    return Config(github_token="gh-token", github_username="octocat", github_org="acme")


@pytest.fixture
def session():
    return MagicMock()


class TestGitHubAdapter:
    def test_query_and_headers(self, config, session):
        session.get.return_value = response({"total_count": 0, "items": []})

        GitHubAdapter(config, session=session).fetch_merged_pull_requests("acme", "octocat", RANGE)

        _, kwargs = session.get.call_args
        assert session.get.call_args.args[0] == "https://api.github.com/search/issues"
        assert kwargs["params"]["q"] == (
            "is:pr is:merged org:acme author:octocat archived:false merged:2025-01-01..2025-01-31"
        )
        assert kwargs["params"]["per_page"] == PAGE_SIZE
        assert kwargs["params"]["page"] == 1
        assert kwargs["headers"]["Authorization"] == "Bearer gh-token"
        assert kwargs["headers"]["X-GitHub-Api-Version"] == API_VERSION

    def test_parses_and_sorts_by_merge_time(self, config, session):
        session.get.return_value = response({
            "total_count": 2,
            "items": [
                api_item(2, "2025-01-20T08:00:00Z"),
                api_item(1, "2025-01-05T08:00:00Z"),
            ],
        })

        prs = GitHubAdapter(config, session=session).fetch_merged_pull_requests("acme", "octocat", RANGE)

        assert [pr.number for pr in prs] == [1, 2]
        assert prs[0].merged_at == datetime(2025, 1, 5, 8, 0, 0)

    def test_skips_items_without_merge_time(self, config, session):
        unmerged = api_item(3)
        unmerged["pull_request"]["merged_at"] = None
        session.get.return_value = response({"total_count": 2, "items": [api_item(1), unmerged]})

        prs = GitHubAdapter(config, session=session).fetch_merged_pull_requests("acme", "octocat", RANGE)

        assert [pr.number for pr in prs] == [1]

    def test_paginates_until_short_page(self, config, session):
        first = [api_item(n) for n in range(PAGE_SIZE)]
        session.get.side_effect = [
            response({"total_count": PAGE_SIZE + 1, "items": first}),
            response({"total_count": PAGE_SIZE + 1, "items": [api_item(999)]}),
        ]

        prs = GitHubAdapter(config, session=session).fetch_merged_pull_requests("acme", "octocat", RANGE)

        assert len(prs) == PAGE_SIZE + 1
        assert [c.kwargs["params"]["page"] for c in session.get.call_args_list] == [1, 2]

    def test_stops_at_total_count(self, config, session):
        session.get.return_value = response({
            "total_count": PAGE_SIZE,
            "items": [api_item(n) for n in range(PAGE_SIZE)],
        })

        GitHubAdapter(config, session=session).fetch_merged_pull_requests("acme", "octocat", RANGE)

        assert session.get.call_count == 1

    def test_error_uses_api_message(self, config, session):
        session.get.return_value = response({"message": "Bad credentials"}, status=401)

        with pytest.raises(GitHubAPIError, match="Bad credentials"):
            GitHubAdapter(config, session=session).fetch_merged_pull_requests("acme", "octocat", RANGE)

    def test_error_without_json_body(self, config, session):
        resp = response(None, status=502)
        resp.json.side_effect = ValueError("not json")
        session.get.return_value = resp

        with pytest.raises(GitHubAPIError, match="HTTP 502"):
            GitHubAdapter(config, session=session).fetch_merged_pull_requests("acme", "octocat", RANGE)
