"""GitLab client package for API interaction."""

from .client import GitLabClient
from .models import GitLabIssue, GitLabProject, GitLabUser, IssuePage, ResolvedPath
from .query import IssueQuery, build_query
from .search import IssueFetcher, build_issue_directives, find_project_by_remote

__all__ = [
    "GitLabClient",
    "GitLabIssue",
    "GitLabProject",
    "GitLabUser",
    "IssueFetcher",
    "IssuePage",
    "IssueQuery",
    "ResolvedPath",
    "build_issue_directives",
    "build_query",
    "find_project_by_remote",
]
