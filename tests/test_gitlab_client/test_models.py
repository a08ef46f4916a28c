"""Tests for GitLab data models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from gitlab_issue_report.gitlab_client.models import (
    GitLabIssue,
    GitLabUser,
    ResolvedPath,
    placeholder_label,
)


class TestGitLabIssue:
    """Test GitLabIssue model."""

    def test_parses_api_payload(self) -> None:
        issue = GitLabIssue.model_validate(
            {
                "id": 1,
                "iid": 3,
                "project_id": 100,
                "title": "Broken link",
                "state": "closed",
                "created_at": "2024-01-15T10:30:00.000Z",
                "updated_at": "2024-01-16T10:30:00+01:00",
                "closed_at": "2024-01-16T10:30:00+01:00",
                "author": {"id": 5, "username": "someone"},
            }
        )
        assert issue.created_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert issue.state == "closed"
        assert issue.web_url is None

    def test_missing_title_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GitLabIssue.model_validate(
                {
                    "id": 1,
                    "project_id": 100,
                    "state": "opened",
                    "created_at": "2024-01-15T10:30:00Z",
                    "updated_at": "2024-01-15T10:30:00Z",
                }
            )


class TestGitLabUser:
    def test_optional_fields(self) -> None:
        user = GitLabUser(id=1, username="jdoe")
        assert user.name == ""
        assert user.email is None


class TestResolvedPath:
    """Test project path resolution results."""

    def test_resolved(self) -> None:
        entry = ResolvedPath(id=100, path="team/app")
        assert entry.resolved
        assert entry.label == "team/app"

    def test_unresolved_uses_placeholder(self) -> None:
        entry = ResolvedPath(id=100, error="404 Not Found")
        assert not entry.resolved
        assert entry.label == "ID:100"
        assert placeholder_label(7) == "ID:7"
