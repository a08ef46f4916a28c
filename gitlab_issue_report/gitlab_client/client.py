"""GitLab API client using python-gitlab."""

import logging
import os
from collections.abc import Iterator
from datetime import timedelta
from typing import Any, Literal

import gitlab

from ..config import DEFAULT_API_TIMEOUT, DEFAULT_GITLAB_URI
from ..errors import ConfigurationError
from .models import GitLabIssue, GitLabProject, GitLabUser, IssuePage

logger = logging.getLogger(__name__)

# Maximum page size accepted by the GitLab API
DEFAULT_PER_PAGE = 100

IssueScope = Literal["project", "group"]


def parse_next_page(header_value: str | None) -> int:
    """Convert an X-Next-Page header to a page number, 0 when there is none."""
    if header_value is None:
        return 0
    value = header_value.strip()
    if not value.isdigit():
        return 0
    return int(value)


class GitLabClient:
    """GitLab API client with authentication and a per-request timeout."""

    def __init__(
        self,
        token: str | None = None,
        url: str | None = None,
        timeout: timedelta = DEFAULT_API_TIMEOUT,
    ):
        """Initialize GitLab client with authentication.

        Args:
            token: GitLab personal access token. If None, reads from
                GITLAB_TOKEN env var.
            url: GitLab instance URL. If None, reads from GITLAB_URI env var
                and falls back to https://gitlab.com.
            timeout: Timeout applied to every HTTP request.
        """
        self.token = token or os.getenv("GITLAB_TOKEN")
        if not self.token:
            raise ConfigurationError(
                "GitLab token is required. Set GITLAB_TOKEN environment variable."
            )
        self.url = url or os.getenv("GITLAB_URI") or DEFAULT_GITLAB_URI
        self.timeout = timeout

        self.gitlab = gitlab.Gitlab(
            self.url,
            private_token=self.token,
            timeout=timeout.total_seconds(),
        )
        logger.debug("GitLab client created for %s with timeout %s", self.url, timeout)

    def _convert_issue(self, data: dict[str, Any]) -> GitLabIssue:
        """Convert a raw issue payload to our model."""
        return GitLabIssue.model_validate(data)

    def _convert_project(self, data: dict[str, Any]) -> GitLabProject:
        """Convert a raw project payload to our model."""
        return GitLabProject.model_validate(data)

    def list_issues_page(
        self,
        scope: IssueScope,
        scope_id: int,
        params: dict[str, Any],
        page: int,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> IssuePage:
        """Fetch a single page of project or group issues.

        Args:
            scope: "project" or "group"
            scope_id: Numeric project or group ID
            params: Filter parameters (state, dates, assignee)
            page: Page number, starting at 1
            per_page: Page size

        Returns:
            IssuePage with the issues and the X-Next-Page value

        Raises:
            gitlab.exceptions.GitlabError: On API errors
            requests.RequestException: On transport errors and timeouts
        """
        path = f"/{scope}s/{scope_id}/issues"
        query_data = {**params, "page": page, "per_page": per_page}
        logger.debug("GET %s %s", path, query_data)

        response = self.gitlab.http_get(path, query_data=query_data, raw=True)
        issues = [self._convert_issue(item) for item in response.json()]
        next_page = parse_next_page(response.headers.get("X-Next-Page"))
        logger.debug(
            "Page %d of %s %d: %d issues, next page %d",
            page,
            scope,
            scope_id,
            len(issues),
            next_page,
        )
        return IssuePage(issues=issues, next_page=next_page)

    def get_project_path(self, project_id: int) -> str:
        """Get the path with namespace of a project, e.g. 'group/project'."""
        project = self.gitlab.projects.get(project_id)
        return project.path_with_namespace

    def get_group_path(self, group_id: int) -> str:
        """Get the full path of a group, e.g. 'parent/group'."""
        group = self.gitlab.groups.get(group_id)
        return group.full_path

    def get_current_user(self) -> GitLabUser:
        """Get the user the token authenticates as."""
        self.gitlab.auth()
        user = self.gitlab.user
        if user is None:
            raise ConfigurationError("GitLab did not return the current user")
        logger.debug("Current user: %s (ID: %s)", user.username, user.id)
        return GitLabUser.model_validate(user.attributes)

    def search_projects(self, name: str) -> Iterator[GitLabProject]:
        """Search projects visible to the user by name.

        Result pages are fetched lazily, so a caller that stops iterating
        early does not request the remaining pages.
        """
        projects = self.gitlab.projects.list(search=name, iterator=True)
        for project in projects:
            yield self._convert_project(project.attributes)
