"""Tests for GitLab API client."""

import os
from datetime import timedelta
from unittest.mock import Mock, patch

import pytest

from gitlab_issue_report.errors import ConfigurationError
from gitlab_issue_report.gitlab_client.client import GitLabClient, parse_next_page
from gitlab_issue_report.gitlab_client.models import GitLabIssue

ISSUE_PAYLOAD = {
    "id": 5001,
    "iid": 7,
    "project_id": 100,
    "title": "Pipeline fails on main",
    "description": "Ignored by the report",
    "state": "opened",
    "created_at": "2024-01-15T10:30:00.000Z",
    "updated_at": "2024-01-16T08:00:00.000Z",
    "web_url": "https://gitlab.example.com/team/app/-/issues/7",
    "labels": ["bug"],
}


def make_response(payload: list[dict], next_page: str = "") -> Mock:
    response = Mock()
    response.json.return_value = payload
    response.headers = {"X-Next-Page": next_page}
    return response


class TestParseNextPage:
    """Test X-Next-Page header handling."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [("2", 2), (" 15 ", 15), ("", 0), (None, 0), ("abc", 0), ("-1", 0)],
    )
    def test_parse_next_page(self, header: str | None, expected: int) -> None:
        assert parse_next_page(header) == expected


class TestGitLabClient:
    """Test GitLab client functionality."""

    @patch.dict(os.environ, {"GITLAB_TOKEN": "test_token"}, clear=False)
    @patch("gitlab_issue_report.gitlab_client.client.gitlab.Gitlab")
    def test_init_with_env_token(self, mock_gitlab: Mock) -> None:
        """Test client initialization with environment token."""
        os.environ.pop("GITLAB_URI", None)
        client = GitLabClient()
        assert client.token == "test_token"
        assert client.url == "https://gitlab.com"
        mock_gitlab.assert_called_once_with(
            "https://gitlab.com", private_token="test_token", timeout=30.0
        )

    @patch("gitlab_issue_report.gitlab_client.client.gitlab.Gitlab")
    def test_init_with_explicit_values(self, mock_gitlab: Mock) -> None:
        client = GitLabClient(
            token="explicit_token",
            url="https://gitlab.example.com",
            timeout=timedelta(seconds=5),
        )
        assert client.token == "explicit_token"
        assert client.timeout == timedelta(seconds=5)
        mock_gitlab.assert_called_once_with(
            "https://gitlab.example.com", private_token="explicit_token", timeout=5.0
        )

    @patch.dict(os.environ, {}, clear=True)
    def test_init_without_token_raises_error(self) -> None:
        """Test that missing token raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="GitLab token is required"):
            GitLabClient()

    @patch("gitlab_issue_report.gitlab_client.client.gitlab.Gitlab")
    def test_list_issues_page(self, mock_gitlab_class: Mock) -> None:
        """Test fetching one page of project issues."""
        mock_gitlab = Mock()
        mock_gitlab_class.return_value = mock_gitlab
        mock_gitlab.http_get.return_value = make_response([ISSUE_PAYLOAD], "2")

        client = GitLabClient(token="test_token")
        page = client.list_issues_page(
            "project", 100, {"state": "opened"}, page=1, per_page=50
        )

        mock_gitlab.http_get.assert_called_once_with(
            "/projects/100/issues",
            query_data={"state": "opened", "page": 1, "per_page": 50},
            raw=True,
        )
        assert page.next_page == 2
        assert len(page.issues) == 1
        issue = page.issues[0]
        assert isinstance(issue, GitLabIssue)
        assert issue.iid == 7
        assert issue.project_id == 100
        assert issue.title == "Pipeline fails on main"
        assert issue.created_at.year == 2024

    @patch("gitlab_issue_report.gitlab_client.client.gitlab.Gitlab")
    def test_list_group_issues_last_page(self, mock_gitlab_class: Mock) -> None:
        mock_gitlab = Mock()
        mock_gitlab_class.return_value = mock_gitlab
        mock_gitlab.http_get.return_value = make_response([], "")

        client = GitLabClient(token="test_token")
        page = client.list_issues_page("group", 42, {}, page=3)

        path = mock_gitlab.http_get.call_args.args[0]
        assert path == "/groups/42/issues"
        assert mock_gitlab.http_get.call_args.kwargs["query_data"]["per_page"] == 100
        assert page.issues == []
        assert page.next_page == 0

    @patch("gitlab_issue_report.gitlab_client.client.gitlab.Gitlab")
    def test_get_project_and_group_paths(self, mock_gitlab_class: Mock) -> None:
        mock_gitlab = Mock()
        mock_gitlab_class.return_value = mock_gitlab
        mock_gitlab.projects.get.return_value = Mock(path_with_namespace="team/app")
        mock_gitlab.groups.get.return_value = Mock(full_path="org/team")

        client = GitLabClient(token="test_token")

        assert client.get_project_path(100) == "team/app"
        assert client.get_group_path(42) == "org/team"
        mock_gitlab.projects.get.assert_called_once_with(100)
        mock_gitlab.groups.get.assert_called_once_with(42)

    @patch("gitlab_issue_report.gitlab_client.client.gitlab.Gitlab")
    def test_get_current_user(self, mock_gitlab_class: Mock) -> None:
        """Test getting the authenticated user."""
        mock_gitlab = Mock()
        mock_gitlab_class.return_value = mock_gitlab
        mock_gitlab.user = Mock(
            username="jdoe",
            id=12,
            attributes={
                "id": 12,
                "username": "jdoe",
                "name": "Jane Doe",
                "email": "jdoe@example.com",
                "state": "active",
            },
        )

        client = GitLabClient(token="test_token")
        user = client.get_current_user()

        mock_gitlab.auth.assert_called_once()
        assert user.id == 12
        assert user.username == "jdoe"
        assert user.name == "Jane Doe"
        assert user.email == "jdoe@example.com"

    @patch("gitlab_issue_report.gitlab_client.client.gitlab.Gitlab")
    def test_search_projects(self, mock_gitlab_class: Mock) -> None:
        mock_gitlab = Mock()
        mock_gitlab_class.return_value = mock_gitlab
        mock_gitlab.projects.list.return_value = [
            Mock(
                attributes={
                    "id": 100,
                    "name": "app",
                    "path_with_namespace": "team/app",
                    "ssh_url_to_repo": "git@gitlab.example.com:team/app.git",
                    "http_url_to_repo": "https://gitlab.example.com/team/app.git",
                }
            )
        ]

        client = GitLabClient(token="test_token")
        projects = list(client.search_projects("app"))

        mock_gitlab.projects.list.assert_called_once_with(search="app", iterator=True)
        assert [p.path_with_namespace for p in projects] == ["team/app"]
        assert projects[0].ssh_url_to_repo == "git@gitlab.example.com:team/app.git"
