"""Issue filter building, paginated issue retrieval and project discovery."""

import logging
from collections.abc import Callable
from datetime import datetime

import requests
from gitlab.exceptions import GitlabError

from ..config import DEFAULT_DATE_FILTER, DateField, IssueState, ReportSettings
from ..errors import IssueFetchError, ProjectDiscoveryError
from ..utils.git_remote import normalize_remote_url, project_name_from_remote
from .client import DEFAULT_PER_PAGE, GitLabClient, IssueScope
from .models import GitLabIssue, GitLabProject
from .query import (
    AssigneeFilter,
    CreatedBetween,
    GroupScope,
    IssueDirective,
    ProjectScope,
    StateFilter,
    UpdatedBetween,
    build_query,
)

logger = logging.getLogger(__name__)


def build_issue_directives(
    project_id: int,
    group_id: int,
    begin: datetime | None,
    end: datetime | None,
    settings: ReportSettings,
    username_lookup: Callable[[], str] | None = None,
) -> list[IssueDirective]:
    """Translate report options into an ordered list of filter directives.

    Args:
        project_id: Project to report on, 0 if none
        group_id: Group to report on, 0 if none
        begin: Start of the interval, None for unbounded or no interval
        end: End of the interval, None for unbounded
        settings: Validated report options
        username_lookup: Returns the current user's username; only called
            when ``settings.mine`` is set

    Returns:
        Directives in scope, date, state, assignee order

    Raises:
        ValueError: If ``mine`` is set without a username lookup
        Exception: Whatever ``username_lookup`` raises is propagated

    Example:
        >>> build_issue_directives(42, 0, None, None, ReportSettings(state="opened"))
        [ProjectScope(project_id=42), StateFilter(state=IssueState.OPENED)]
    """
    directives: list[IssueDirective] = []

    if project_id:
        directives.append(ProjectScope(project_id=project_id))
    elif group_id:
        directives.append(GroupScope(group_id=group_id))

    if begin is not None or end is not None:
        date_field: DateField | None
        if settings.created and not settings.updated:
            date_field = DateField.CREATED
        elif settings.updated and not settings.created:
            date_field = DateField.UPDATED
        elif not settings.created and not settings.updated:
            date_field = DEFAULT_DATE_FILTER
        else:
            # Both set is rejected by option validation
            date_field = None

        if date_field is DateField.CREATED:
            directives.append(CreatedBetween(after=begin, before=end))
        elif date_field is DateField.UPDATED:
            directives.append(UpdatedBetween(after=begin, before=end))

    if settings.state is not IssueState.ALL:
        directives.append(StateFilter(state=settings.state))

    if settings.mine:
        if username_lookup is None:
            raise ValueError("--mine requires the current user to be resolvable")
        username = username_lookup()
        directives.append(AssigneeFilter(username=username))

    return directives


class IssueFetcher:
    """Retrieves every issue matching a set of directives."""

    def __init__(self, client: GitLabClient, per_page: int = DEFAULT_PER_PAGE):
        """Initialize fetcher with GitLab client.

        Args:
            client: Authenticated GitLabClient instance
            per_page: Page size for issue listing requests
        """
        self.client = client
        self.per_page = per_page

    def fetch_issues(self, directives: list[IssueDirective]) -> list[GitLabIssue]:
        """Fetch all issues of a project or group, following pagination.

        Args:
            directives: Filter directives from :func:`build_issue_directives`

        Returns:
            All matching issues across every page

        Raises:
            ScopeError: If the directives do not name exactly one scope
            IssueFetchError: If any page request fails
        """
        query = build_query(directives)
        query.validate_scope()

        if query.project_id:
            return self._paginate("project", query.project_id, query.to_params())
        return self._paginate("group", query.group_id, query.to_params())

    def _paginate(
        self, scope: IssueScope, scope_id: int, params: dict
    ) -> list[GitLabIssue]:
        all_issues: list[GitLabIssue] = []
        page = 1
        while True:
            try:
                issue_page = self.client.list_issues_page(
                    scope, scope_id, params, page=page, per_page=self.per_page
                )
            except (GitlabError, requests.RequestException) as e:
                raise IssueFetchError(scope, scope_id, page, e) from e

            all_issues.extend(issue_page.issues)
            if not issue_page.next_page:
                break
            page = issue_page.next_page

        logger.info("Fetched %d issues of %s %d", len(all_issues), scope, scope_id)
        return all_issues


def find_project_by_remote(client: GitLabClient, remote_url: str) -> GitLabProject:
    """Find the GitLab project whose clone URL matches a git remote.

    Args:
        client: Authenticated GitLabClient instance
        remote_url: URL of the local repository's origin remote

    Returns:
        The matching project

    Raises:
        ProjectDiscoveryError: If the search fails or nothing matches
    """
    project_name = project_name_from_remote(remote_url)
    logger.info("Looking up project %s in %s", project_name, client.url)

    wanted = normalize_remote_url(remote_url)
    try:
        for project in client.search_projects(project_name):
            logger.debug(
                "Candidate project: %s (ID %d) ssh=%s http=%s",
                project.path_with_namespace,
                project.id,
                project.ssh_url_to_repo,
                project.http_url_to_repo,
            )
            urls = (project.ssh_url_to_repo, project.http_url_to_repo)
            if any(url and normalize_remote_url(url) == wanted for url in urls):
                logger.info(
                    "Project found: %s (ID %d)",
                    project.path_with_namespace,
                    project.id,
                )
                return project
    except (GitlabError, requests.RequestException) as e:
        raise ProjectDiscoveryError(
            f"failed to search for project '{project_name}': {e}"
        ) from e

    raise ProjectDiscoveryError(f"gitlab project not found for remote '{remote_url}'")
