"""Test configuration and fixtures."""

import logging
from datetime import datetime
from unittest.mock import Mock

import pytest

from gitlab_issue_report.gitlab_client.models import GitLabIssue


def make_issue(
    issue_id: int = 1,
    title: str = "Fix login redirect",
    state: str = "opened",
    project_id: int = 100,
    created_at: datetime = datetime(2024, 1, 15, 10, 30),
    updated_at: datetime = datetime(2024, 2, 1, 8, 0),
) -> GitLabIssue:
    """Build an issue with sensible defaults."""
    return GitLabIssue(
        id=issue_id,
        iid=issue_id,
        project_id=project_id,
        title=title,
        state=state,
        created_at=created_at,
        updated_at=updated_at,
        web_url=f"https://gitlab.example.com/group/project/-/issues/{issue_id}",
    )


@pytest.fixture
def sample_issues() -> list[GitLabIssue]:
    """Two issues from the same project."""
    return [
        make_issue(1, "Fix login redirect", "opened"),
        make_issue(2, "Update dependencies", "closed"),
    ]


@pytest.fixture
def group_issues() -> list[GitLabIssue]:
    """Issues spread across two projects of a group."""
    return [
        make_issue(1, "Fix login redirect", "opened", project_id=100),
        make_issue(2, "Add dark mode", "opened", project_id=200),
        make_issue(3, "Update dependencies", "closed", project_id=100),
    ]


@pytest.fixture
def mock_client() -> Mock:
    """A GitLabClient stand-in with no network access."""
    client = Mock()
    client.url = "https://gitlab.example.com"
    return client


@pytest.fixture
def gitlab_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the CLI at a fake GitLab with a token and no timeout override."""
    monkeypatch.setenv("GITLAB_TOKEN", "test_token")
    monkeypatch.setenv("GITLAB_URI", "https://gitlab.example.com")
    monkeypatch.delenv("GITLAB_API_TIMEOUT", raising=False)


@pytest.fixture
def issue_factory():
    """Factory for issues with custom fields."""
    return make_issue


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo init_logging() so handlers bound to CliRunner streams do not leak."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers and type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
