"""Tests for project and group path resolution."""

from unittest.mock import Mock

import pytest
import requests
from gitlab.exceptions import GitlabGetError

from gitlab_issue_report.errors import MetadataError
from gitlab_issue_report.gitlab_client.metadata import MetadataResolver
from gitlab_issue_report.gitlab_client.models import ResolvedPath
from gitlab_issue_report.render.context import GroupContext, ProjectContext


class TestResolvePaths:
    """Test single path lookups."""

    def test_resolve_project_path(self, mock_client: Mock) -> None:
        mock_client.get_project_path.return_value = "team/app"
        assert MetadataResolver(mock_client).resolve_project_path(100) == "team/app"

    def test_resolve_group_path(self, mock_client: Mock) -> None:
        mock_client.get_group_path.return_value = "org/team"
        assert MetadataResolver(mock_client).resolve_group_path(42) == "org/team"

    def test_project_lookup_failure(self, mock_client: Mock) -> None:
        mock_client.get_project_path.side_effect = GitlabGetError("Not Found", 404)
        with pytest.raises(MetadataError, match="failed to get project 100"):
            MetadataResolver(mock_client).resolve_project_path(100)

    def test_group_lookup_network_failure(self, mock_client: Mock) -> None:
        mock_client.get_group_path.side_effect = requests.ConnectionError("refused")
        with pytest.raises(MetadataError, match="failed to get group 42"):
            MetadataResolver(mock_client).resolve_group_path(42)


class TestResolveProjectPathsForIssues:
    """Test per-project resolution for group reports."""

    def test_each_project_is_looked_up_once(
        self, mock_client: Mock, group_issues
    ) -> None:
        mock_client.get_project_path.side_effect = lambda pid: f"team/project-{pid}"

        paths = MetadataResolver(mock_client).resolve_project_paths_for_issues(
            group_issues
        )

        assert list(paths) == [100, 200]
        assert paths[100] == ResolvedPath(id=100, path="team/project-100")
        assert paths[200].label == "team/project-200"
        assert mock_client.get_project_path.call_count == 2

    def test_failed_lookup_keeps_placeholder(
        self,
        mock_client: Mock,
        group_issues,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        def get_path(project_id: int) -> str:
            if project_id == 100:
                raise GitlabGetError("Not Found", 404)
            return "team/dark-mode"

        mock_client.get_project_path.side_effect = get_path

        paths = MetadataResolver(mock_client).resolve_project_paths_for_issues(
            group_issues
        )

        assert not paths[100].resolved
        assert paths[100].label == "ID:100"
        assert "failed to get project 100" in (paths[100].error or "")
        assert paths[200].resolved
        assert "Failed to fetch path for project 100" in caplog.text
        # A failed project is not retried for its second issue
        assert mock_client.get_project_path.call_count == 2

    def test_no_issues(self, mock_client: Mock) -> None:
        assert MetadataResolver(mock_client).resolve_project_paths_for_issues([]) == {}
        mock_client.get_project_path.assert_not_called()


class TestBuildContexts:
    """Test report contexts with fallbacks."""

    def test_project_context(self, mock_client: Mock) -> None:
        mock_client.get_project_path.return_value = "team/app"
        context = MetadataResolver(mock_client).build_project_context(100)
        assert context == ProjectContext(project_path="team/app")

    def test_project_context_falls_back_to_id(self, mock_client: Mock) -> None:
        mock_client.get_project_path.side_effect = GitlabGetError("Not Found", 404)
        context = MetadataResolver(mock_client).build_project_context(100)
        assert context.project_path == "ID:100"

    def test_group_context(self, mock_client: Mock, group_issues) -> None:
        mock_client.get_group_path.return_value = "org/team"
        mock_client.get_project_path.side_effect = lambda pid: f"org/team/p{pid}"

        context = MetadataResolver(mock_client).build_group_context(42, group_issues)

        assert isinstance(context, GroupContext)
        assert context.group_path == "org/team"
        assert context.project_label(100) == "org/team/p100"
        assert context.project_label(999) == "ID:999"

    def test_group_context_still_resolves_projects_when_group_fails(
        self, mock_client: Mock, group_issues
    ) -> None:
        mock_client.get_group_path.side_effect = GitlabGetError("Forbidden", 403)
        mock_client.get_project_path.return_value = "org/team/app"

        context = MetadataResolver(mock_client).build_group_context(42, group_issues)

        assert context.group_path == "ID:42"
        assert context.project_label(100) == "org/team/app"
