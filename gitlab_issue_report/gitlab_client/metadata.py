"""Best-effort resolution of project and group paths for report headers."""

import logging

import requests
from gitlab.exceptions import GitlabError

from ..errors import MetadataError
from ..render.context import GroupContext, ProjectContext
from .client import GitLabClient
from .models import GitLabIssue, ResolvedPath, placeholder_label

logger = logging.getLogger(__name__)


class MetadataResolver:
    """Resolves numeric project and group IDs to their paths."""

    def __init__(self, client: GitLabClient):
        self.client = client

    def resolve_project_path(self, project_id: int) -> str:
        """Get the path with namespace of a project.

        Raises:
            MetadataError: If the lookup fails
        """
        try:
            return self.client.get_project_path(project_id)
        except (GitlabError, requests.RequestException) as e:
            raise MetadataError(f"failed to get project {project_id}: {e}") from e

    def resolve_group_path(self, group_id: int) -> str:
        """Get the full path of a group.

        Raises:
            MetadataError: If the lookup fails
        """
        try:
            return self.client.get_group_path(group_id)
        except (GitlabError, requests.RequestException) as e:
            raise MetadataError(f"failed to get group {group_id}: {e}") from e

    def resolve_project_paths_for_issues(
        self, issues: list[GitLabIssue]
    ) -> dict[int, ResolvedPath]:
        """Resolve the path of every distinct project referenced by ``issues``.

        Each project is looked up once. A failed lookup is logged and kept as
        an unresolved entry so its rows render as ``ID:<n>``.

        Args:
            issues: Issues from a group listing

        Returns:
            Mapping of project ID to ResolvedPath, in first-seen order
        """
        project_paths: dict[int, ResolvedPath] = {}
        for issue in issues:
            project_id = issue.project_id
            if project_id in project_paths:
                continue
            try:
                path = self.resolve_project_path(project_id)
            except MetadataError as e:
                logger.warning("Failed to fetch path for project %d: %s", project_id, e)
                project_paths[project_id] = ResolvedPath(id=project_id, error=str(e))
                continue
            project_paths[project_id] = ResolvedPath(id=project_id, path=path)
        return project_paths

    def build_project_context(self, project_id: int) -> ProjectContext:
        """Context for a project report, labelled ``ID:<n>`` if unresolvable."""
        try:
            path = self.resolve_project_path(project_id)
        except MetadataError as e:
            logger.warning("Rendering without project path: %s", e)
            path = placeholder_label(project_id)
        return ProjectContext(project_path=path)

    def build_group_context(
        self, group_id: int, issues: list[GitLabIssue]
    ) -> GroupContext:
        """Context for a group report with per-project path lookup."""
        try:
            group_path = self.resolve_group_path(group_id)
        except MetadataError as e:
            logger.warning("Rendering without group path: %s", e)
            group_path = placeholder_label(group_id)
        return GroupContext(
            group_path=group_path,
            project_paths=self.resolve_project_paths_for_issues(issues),
        )
